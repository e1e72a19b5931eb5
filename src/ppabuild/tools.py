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

"""External command execution for ppabuild.

Every external tool (apt-get, apt-cache, dch, debuild, aptly, git, ...) is
invoked through a CommandRunner so tests can substitute a recorder and so a
non-zero exit is turned into a ToolFailure in exactly one place.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ppabuild.exceptions import ToolFailure

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result of a finished external command."""

    command: list[str]
    returncode: int | None
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs external commands synchronously.

    Output is inherited from the parent process unless ``capture`` is set,
    so long-running packaging tools stream straight to the terminal.
    """

    def run(
        self,
        cmd: Sequence[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        capture: bool = False,
        input_text: str | None = None,
    ) -> CommandResult:
        """Run a command and return its result without raising on failure.

        Args:
            cmd: Command and arguments to run.
            cwd: Working directory for the command.
            env: Environment variables (merged with current env).
            capture: If True, capture stdout/stderr as text.
            input_text: Text written to the command's stdin.

        Returns:
            CommandResult. A missing executable is reported as returncode
            None rather than raised.
        """
        command = [str(c) for c in cmd]
        run_env = os.environ.copy()
        if env:
            run_env.update(env)

        logger.debug("Running %s (cwd=%s)", " ".join(command), cwd)
        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                env=run_env,
                input=input_text,
                capture_output=capture,
                text=True,
            )
        except FileNotFoundError as e:
            logger.debug("Command not found: %s", e)
            return CommandResult(command=command, returncode=None, stderr=str(e))

        return CommandResult(
            command=command,
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )

    def check(
        self,
        cmd: Sequence[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        capture: bool = False,
        input_text: str | None = None,
        message: str = "",
    ) -> CommandResult:
        """Run a command and raise ToolFailure on a non-zero exit."""
        result = self.run(cmd, cwd=cwd, env=env, capture=capture, input_text=input_text)
        if not result.ok:
            raise ToolFailure.from_returncode(result.command, result.returncode, message)
        return result
