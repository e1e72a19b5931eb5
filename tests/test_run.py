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


"""Tests for ppabuild.run and ppabuild.build.errors modules."""

from __future__ import annotations

import json
import re
import sys
from pathlib import Path

from ppabuild import run
from ppabuild.build.errors import EXIT_FAILURE, log_phase_event, phase_error, phase_warning, report_failure
from ppabuild.exceptions import ConfigError, ToolFailure


def _events(ctx: run.RunContext) -> list[dict]:
    lines = (ctx.logs_path / "events.jsonl").read_text().strip().split("\n")
    return [json.loads(line) for line in lines]


class TestRunContext:
    """Tests for RunContext class."""

    def test_run_id_format(self, tmp_path: Path) -> None:
        with run.RunContext("build", tmp_path) as ctx:
            pattern = r"^\d{8}T\d{6}Z-build-[a-f0-9]{8}$"
            assert re.match(pattern, ctx.run_id), f"Run ID {ctx.run_id} doesn't match pattern"
            assert ctx.run_path.parent == tmp_path

    def test_captures_stdout(self, tmp_path: Path) -> None:
        with run.RunContext("build", tmp_path) as ctx:
            print("test output")

        assert "test output" in (ctx.logs_path / "stdout.log").read_text()

    def test_restores_streams(self, tmp_path: Path) -> None:
        original_stdout = sys.stdout
        original_stderr = sys.stderr

        with run.RunContext("build", tmp_path):
            pass

        assert sys.stdout is original_stdout
        assert sys.stderr is original_stderr

    def test_summary_success(self, tmp_path: Path) -> None:
        with run.RunContext("build", tmp_path) as ctx:
            ctx.write_summary(rebuilt=["foo"])

        summary = json.loads((ctx.run_path / "summary.json").read_text())
        assert summary["command"] == "build"
        assert summary["status"] == "success"
        assert summary["rebuilt"] == ["foo"]
        assert "end_utc" in summary

    def test_summary_records_exception(self, tmp_path: Path) -> None:
        try:
            with run.RunContext("build", tmp_path) as ctx:
                raise ValueError("test error")
        except ValueError:
            pass

        summary = json.loads((ctx.run_path / "summary.json").read_text())
        assert summary["status"] == "failed"
        assert "test error" in summary["error"]

    def test_preset_failed_status_is_kept(self, tmp_path: Path) -> None:
        with run.RunContext("build", tmp_path) as ctx:
            ctx.write_summary(status="failed", exit_code=2)

        summary = json.loads((ctx.run_path / "summary.json").read_text())
        assert summary["status"] == "failed"
        assert summary["exit_code"] == 2
        last = _events(ctx)[-1]
        assert last["event"] == "run.end"
        assert last["status"] == "failed"


class TestPhaseHelpers:
    def test_log_phase_event(self, tmp_path: Path) -> None:
        with run.RunContext("build", tmp_path) as ctx:
            log_phase_event(ctx, "fetch", "Fetched foo", "fetch.apt", package="foo")

        events = [e for e in _events(ctx) if e["event"] == "fetch.apt"]
        assert events[0]["package"] == "foo"

    def test_phase_error_writes_summary(self, tmp_path: Path) -> None:
        with run.RunContext("build", tmp_path) as ctx:
            code = phase_error(ctx, "build", "foo: debuild failed", 2, package="foo")

        assert code == 2
        summary = json.loads((ctx.run_path / "summary.json").read_text())
        assert summary["status"] == "failed"
        assert summary["exit_code"] == 2
        errors = [e for e in _events(ctx) if e["event"] == "build.error"]
        assert errors[0]["package"] == "foo"

    def test_phase_warning(self, tmp_path: Path) -> None:
        with run.RunContext("build", tmp_path) as ctx:
            phase_warning(ctx, "publish", "repo absent", event_key="publish.repo_absent")

        assert any(e["event"] == "publish.repo_absent" for e in _events(ctx))

    def test_helpers_without_run(self) -> None:
        assert phase_error(None, "build", "boom", 3) == 3
        log_phase_event(None, "build", "ok", "build.ok")
        phase_warning(None, "build", "careful")

    def test_report_failure_uses_error_exit_code(self, tmp_path: Path) -> None:
        error = ToolFailure.from_returncode(["debuild", "-b"], 2)
        with run.RunContext("build", tmp_path) as ctx:
            code = report_failure(ctx, "build", error, label="foo", package="foo")

        assert code == 2
        errors = [e for e in _events(ctx) if e["event"] == "build.error"]
        assert errors[0]["message"].startswith("foo: debuild failed")
        assert errors[0]["error_type"] == "ToolFailure"
        assert errors[0]["package"] == "foo"

    def test_report_failure_without_tool_code(self, tmp_path: Path) -> None:
        with run.RunContext("build", tmp_path) as ctx:
            code = report_failure(ctx, "init", ConfigError(message="bad config"))

        assert code == EXIT_FAILURE
        summary = json.loads((ctx.run_path / "summary.json").read_text())
        assert summary["error"] == "bad config"
        assert summary["exit_code"] == EXIT_FAILURE
