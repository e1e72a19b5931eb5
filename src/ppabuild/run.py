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

"""Run context manager for ppabuild CLI runs.

This module implements the run directory creation, JSONL event logging, and
summary.json generation. Console progress lines go to sys.__stdout__ so they
stay visible while Python-level stdout/stderr are captured to the run's log
files. External tools inherit the process file descriptors and therefore
keep writing to the terminal.
"""

from __future__ import annotations

import contextlib
import datetime
import json
import sys
import uuid
from pathlib import Path
from typing import Any


class RunContext:
    """Context manager that creates a run directory and captures runtime logs.

    Usage:
        with RunContext("build", runs_root) as run:
            run.log_event({"event": "build.start"})
            ...
    """

    def __init__(self, command: str, runs_root: Path) -> None:
        self.command = command
        self.runs_root = runs_root
        now_utc = datetime.datetime.now(datetime.timezone.utc)
        self.run_id = now_utc.strftime("%Y%m%dT%H%M%SZ") + f"-{command}-" + uuid.uuid4().hex[:8]
        self.run_path = self.runs_root / self.run_id
        self.logs_path = self.run_path / "logs"
        self.stdout_file: Any | None = None
        self.stderr_file: Any | None = None
        self.events_file: Any | None = None
        self._orig_stdout = sys.stdout
        self._orig_stderr = sys.stderr
        self.summary: dict[str, Any] = {"command": command, "start_utc": now_utc.isoformat()}

    def __enter__(self) -> RunContext:
        self.run_path.mkdir(parents=True, exist_ok=True)
        self.logs_path.mkdir(parents=True, exist_ok=True)

        self._orig_stdout = sys.stdout
        self._orig_stderr = sys.stderr
        self.stdout_file = (self.logs_path / "stdout.log").open("w", encoding="utf-8")
        self.stderr_file = (self.logs_path / "stderr.log").open("w", encoding="utf-8")
        self.events_file = (self.logs_path / "events.jsonl").open("a", encoding="utf-8")

        sys.stdout = self.stdout_file
        sys.stderr = self.stderr_file

        self.log_event({"event": "run.start", "run_id": self.run_id})
        return self

    def log_event(self, event: dict[str, Any]) -> None:
        """Write a JSONL event with a timestamp."""
        if self.events_file is None:  # pragma: no cover
            return
        payload = {"timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(), **event}
        self.events_file.write(json.dumps(payload, default=str) + "\n")
        self.events_file.flush()

    def write_summary(self, **kwargs: Any) -> None:
        self.summary.update(kwargs)
        blob = json.dumps(self.summary, indent=2, default=str)
        (self.run_path / "summary.json").write_text(blob)

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: object,
    ) -> bool | None:
        status = self.summary.get("status", "success")
        if exc is not None:
            status = "failed"
            self.summary["error"] = str(exc)

        self.summary["end_utc"] = datetime.datetime.now(datetime.timezone.utc).isoformat()
        self.summary["status"] = status
        self.write_summary()

        with contextlib.suppress(Exception):
            self.log_event({"event": "run.end", "status": status})

        try:
            for f in (self.stdout_file, self.stderr_file, self.events_file):
                if f:
                    f.close()
        finally:
            sys.stdout = self._orig_stdout
            sys.stderr = self._orig_stderr
            self.events_file = None

        # Print report path only on failure so users can inspect logs.
        if status != "success":
            with contextlib.suppress(Exception):
                print(f"[report] Logs: {self.run_path}", file=sys.__stdout__)

        return None


def activity(phase: str, description: str) -> None:
    """Print a progress line to the real terminal."""
    with contextlib.suppress(Exception):
        print(f"[{phase}] {description}", file=sys.__stdout__, flush=True)
