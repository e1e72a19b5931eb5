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


"""Thin wrapper over the aptly command line.

aptly is resource based: a local ``repo`` holds packages and a ``publish``
exposes a repo for one distribution. Each ``show`` sub-command reports
existence through its exit status, so those return the CommandResult
rather than raising.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ppabuild.tools import CommandResult, CommandRunner


class AptlyClient:
    """Run aptly sub-commands."""

    def __init__(self, runner: CommandRunner | None = None) -> None:
        self.runner = runner or CommandRunner()

    def _check(self, *args: str) -> CommandResult:
        return self.runner.check(["aptly", *args])

    def repo_show(self, name: str) -> CommandResult:
        return self.runner.run(["aptly", "repo", "show", name])

    def publish_show(self, distribution: str) -> CommandResult:
        return self.runner.run(["aptly", "publish", "show", distribution])

    def publish_drop(self, distribution: str) -> CommandResult:
        return self._check("publish", "drop", distribution)

    def repo_drop(self, name: str) -> CommandResult:
        return self._check("repo", "drop", name)

    def repo_create(self, name: str, component: str, distribution: str) -> CommandResult:
        return self._check(
            "repo",
            "create",
            f"-component={component}",
            f"-distribution={distribution}",
            name,
        )

    def repo_add(self, name: str, package_dir: Path) -> CommandResult:
        return self._check("repo", "add", name, str(package_dir))

    def publish_repo(
        self, name: str, architectures: Sequence[str], skip_signing: bool = True
    ) -> CommandResult:
        args = ["publish", "repo", f"-architectures={','.join(architectures)}"]
        if skip_signing:
            args.append("-skip-signing")
        return self._check(*args, name)
