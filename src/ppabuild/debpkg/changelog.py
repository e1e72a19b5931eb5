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

"""Debian changelog updates for local rebuilds.

Entries are added with ``dch -l<suffix>``, which derives the new version
from the current one by appending the local suffix and a counter
(``1.2.1-2`` becomes ``1.2.1-2+ztroyppa1``). The resulting version is read
back with python-debian.
"""

from __future__ import annotations

import warnings
from pathlib import Path

from ppabuild.tools import CommandRunner

# Suppress python3-apt warning - it's optional
with warnings.catch_warnings():
    warnings.filterwarnings("ignore", message=".*python.*-apt.*")
    warnings.filterwarnings("ignore", message=".*apt_pkg.*")
    from debian.changelog import Changelog, ChangelogParseError


def dch_command(local_suffix: str, message: str, distribution: str | None = None) -> list[str]:
    """Return the dch command line for a local entry."""
    cmd = ["dch", f"-l{local_suffix}"]
    if distribution:
        cmd.extend(["-D", distribution])
    cmd.append(message)
    return cmd


def bump_changelog(
    src_dir: Path,
    local_suffix: str,
    message: str,
    maintainer_email: str,
    distribution: str | None = None,
    runner: CommandRunner | None = None,
) -> None:
    """Append a local changelog entry in ``src_dir``.

    Args:
        src_dir: Unpacked source tree containing debian/changelog.
        local_suffix: Local version marker (e.g. "+ztroyppa").
        message: Changelog entry text.
        maintainer_email: Identity recorded for the entry (DEBEMAIL).
        distribution: Target distribution for the entry; dch keeps the
            previous entry's when omitted.
        runner: Command runner.

    Raises:
        ToolFailure: If dch exits non-zero.
    """
    runner = runner or CommandRunner()
    runner.check(
        dch_command(local_suffix, message, distribution),
        cwd=src_dir,
        env={"DEBEMAIL": maintainer_email},
    )


def get_current_version(src_dir: Path) -> str | None:
    """Return the top version in ``src_dir/debian/changelog``, if readable."""
    changelog_path = src_dir / "debian" / "changelog"
    try:
        with changelog_path.open(encoding="utf-8") as f:
            changelog = Changelog(f, max_blocks=1)
        version = changelog.version
    except (OSError, ValueError, IndexError, ChangelogParseError):
        return None
    return str(version) if version is not None else None
