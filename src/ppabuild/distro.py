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

"""Host distribution detection."""

from __future__ import annotations

import logging
import os

from ppabuild.tools import CommandRunner

logger = logging.getLogger(__name__)


def get_distro_codename(runner: CommandRunner | None = None) -> str:
    """Return the codename of the running distribution (e.g. "bullseye").

    Raises:
        ToolFailure: If lsb_release fails.
    """
    runner = runner or CommandRunner()
    result = runner.check(
        ["lsb_release", "-sc"],
        capture=True,
        message="Error running lsb_release",
    )
    codename = result.stdout.strip()
    logger.debug("Distribution codename: %s", codename)
    return codename


def is_root_user() -> bool:
    """Return True when running as uid 0.

    Containers without a passwd entry for the current uid are treated as
    root, which is what they almost always are.
    """
    try:
        return os.getuid() == 0
    except (AttributeError, OSError):  # pragma: no cover - non-POSIX
        return True


if __name__ == "__main__":
    print(get_distro_codename())
