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

"""ppabuild-specific exception types with associated exit codes."""

from __future__ import annotations

from dataclasses import dataclass, field

from ppabuild.build.errors import EXIT_FAILURE


@dataclass
class PpaBuildError(Exception):
    """Base class for ppabuild errors with an exit code."""

    message: str = "An error occurred"
    exit_code: int = field(default=EXIT_FAILURE)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.message} (exit {self.exit_code})"


@dataclass
class ConfigError(PpaBuildError):
    exit_code: int = field(default=EXIT_FAILURE)


@dataclass
class CandidateNotFoundError(PpaBuildError, LookupError):
    """The package index has no candidate version for a package.

    A rebuild decision cannot be made without it, so the run aborts.
    """

    exit_code: int = field(default=EXIT_FAILURE)
    package: str = ""


@dataclass
class ToolFailure(PpaBuildError):
    """An external command exited non-zero.

    The exit code is the tool's own, or EXIT_FAILURE when the tool did
    not report one (killed by a signal, not found, ...).
    """

    command: list[str] = field(default_factory=list)

    @classmethod
    def from_returncode(
        cls, command: list[str], returncode: int | None, message: str = ""
    ) -> ToolFailure:
        code = returncode if returncode and returncode > 0 else EXIT_FAILURE
        text = message or f"{command[0] if command else 'command'} failed with exit code {returncode}"
        return cls(message=text, exit_code=code, command=list(command))


@dataclass
class PatchError(ToolFailure):
    """Applying a patch to the unpacked source failed."""


@dataclass
class FetchFailure(PpaBuildError):
    """An HTTPS fetch returned a non-2xx status or failed to connect."""

    url: str = ""
    status_code: int | None = None
