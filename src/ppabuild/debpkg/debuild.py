# This file is part of ppabuild, a tool for maintaining a personal package archive.
#
# Copyright 2025 The ppabuild developers.
#
# SPDX-License-Identifier: GPL-3.0-only
#
# ppabuild is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License version 3, as published by the
# Free Software Foundation.
#
# ppabuild is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranties of MERCHANTABILITY,
# SATISFACTORY QUALITY, or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with
# ppabuild. If not, see <http://www.gnu.org/licenses/>.

"""Binary package builds with debuild."""

from __future__ import annotations

from pathlib import Path

from ppabuild.tools import CommandRunner

# Binary-only, unsigned source and changes
DEBUILD_ARGS = ["-b", "-uc", "-us"]


def build_binary(
    src_dir: Path,
    build_options: str = "nocheck",
    runner: CommandRunner | None = None,
) -> list[Path]:
    """Build binary packages from ``src_dir``.

    debuild writes its artifacts next to the source tree, so the returned
    .deb paths live in ``src_dir.parent``.

    Raises:
        ToolFailure: If debuild exits non-zero.
    """
    runner = runner or CommandRunner()
    runner.check(
        ["debuild", *DEBUILD_ARGS],
        cwd=src_dir,
        env={"DEB_BUILD_OPTIONS": build_options},
    )
    return sorted(src_dir.parent.glob("*.deb"))
