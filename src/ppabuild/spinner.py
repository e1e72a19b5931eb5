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


"""Status line for short, quiet steps.

A step such as an apt-cache query or a patch download produces no terminal
output of its own. ``activity_status`` shows a rich status spinner while it
runs (TTY only) and always finishes with one ``[phase]`` line stating the
outcome, so logs read the same with and without a terminal. Do not wrap
tools that stream to the terminal.
"""

from __future__ import annotations

import contextlib
import sys
from collections.abc import Iterator
from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape

from ppabuild.run import activity


@dataclass
class StepOutcome:
    """Result text reported when the step finishes.

    Callers set ``detail`` inside the block (e.g. the versions found).
    """

    detail: str = ""


def is_tty() -> bool:
    stream = sys.__stdout__
    return bool(stream is not None and stream.isatty())


@contextlib.contextmanager
def activity_status(phase: str, description: str, disable: bool = False) -> Iterator[StepOutcome]:
    """Show ``description`` while the block runs, then report its outcome.

    The outcome line is ``[phase] description: <detail or "done">``, or
    ``[phase] description: failed`` if the block raises. Exceptions are
    re-raised unchanged.
    """
    outcome = StepOutcome()
    status_cm: contextlib.AbstractContextManager[object] = contextlib.nullcontext()
    if not disable and is_tty():
        console = Console(file=sys.__stdout__, force_terminal=True)
        status_cm = console.status(escape(f"[{phase}] {description}"), spinner="dots")

    try:
        with status_cm:
            yield outcome
    except BaseException:
        activity(phase, f"{description}: failed")
        raise
    activity(phase, f"{description}: {outcome.detail or 'done'}")
