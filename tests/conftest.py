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


"""Pytest fixtures and configuration for ppabuild tests."""

from __future__ import annotations

import tempfile
from collections.abc import Callable, Generator, Sequence
from dataclasses import dataclass
from pathlib import Path

import pytest

from ppabuild.build.context import BuildContext
from ppabuild.config import Settings
from ppabuild.tools import CommandResult, CommandRunner


@pytest.fixture
def temp_home(monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Create a temporary home directory and set HOME/XDG paths."""
    with tempfile.TemporaryDirectory() as tmpdir:
        home = Path(tmpdir)
        monkeypatch.setenv("HOME", str(home))
        monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
        monkeypatch.setenv("XDG_CACHE_HOME", str(home / ".cache"))
        # Also patch Path.home() to return our temp home
        monkeypatch.setattr(Path, "home", lambda: home)
        yield home


@pytest.fixture
def mock_config(temp_home: Path) -> Path:
    """Create a minimal config file in the temp home."""
    config_dir = temp_home / ".config" / "ppabuild"
    config_dir.mkdir(parents=True, exist_ok=True)
    config_file = config_dir / "config.yaml"
    config_file.write_text(f"""
paths:
  repo_root: "{temp_home / 'repo'}"
  ppa_dir: "debian"
  aptly_public: "~/.aptly/public"
  runs_root: "~/.cache/ppabuild/runs"

maintainer:
  email: "ppa@example.com"
  name: "CI User"

build:
  local_suffix: "+local"
""")
    return config_file


@dataclass
class RecordedCall:
    command: list[str]
    cwd: Path | None
    env: dict[str, str] | None
    input_text: str | None


Action = Callable[[list[str], Path | None], None]


class FakeRunner(CommandRunner):
    """CommandRunner that records commands instead of running them.

    Rules registered with ``on`` match on a command prefix; the most
    recently registered matching rule wins. Unmatched commands succeed
    with empty output.
    """

    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self._rules: list[tuple[tuple[str, ...], int | None, str, Action | None]] = []

    def on(
        self,
        *prefix: str,
        returncode: int | None = 0,
        stdout: str = "",
        action: Action | None = None,
    ) -> FakeRunner:
        self._rules.append((prefix, returncode, stdout, action))
        return self

    def run(
        self,
        cmd: Sequence[str],
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
        capture: bool = False,
        input_text: str | None = None,
    ) -> CommandResult:
        command = [str(c) for c in cmd]
        self.calls.append(RecordedCall(command, cwd, env, input_text))
        for prefix, returncode, stdout, action in reversed(self._rules):
            if tuple(command[: len(prefix)]) == prefix:
                if action is not None:
                    action(command, cwd)
                return CommandResult(command=command, returncode=returncode, stdout=stdout)
        return CommandResult(command=command, returncode=0)

    @property
    def commands(self) -> list[list[str]]:
        return [c.command for c in self.calls]

    def called(self, *prefix: str) -> bool:
        return any(tuple(c[: len(prefix)]) == prefix for c in self.commands)

    def on_candidate(self, package: str, candidate: str) -> FakeRunner:
        """Answer apt-cache policy for package with candidate."""
        return self.on("apt-cache", "policy", package, stdout=policy_output(package, candidate))


def policy_output(package: str, candidate: str) -> str:
    """Return apt-cache policy output with the given candidate."""
    return (
        f"{package}:\n"
        "  Installed: (none)\n"
        f"  Candidate: {candidate}\n"
        "  Version table:\n"
        f"     {candidate} 500\n"
    )


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temporary directory."""
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    return Settings(
        repo_root=repo_root,
        ppa_dir=repo_root / "debian",
        aptly_public=tmp_path / "aptly" / "public",
        runs_root=tmp_path / "runs",
        maintainer_email="ppa@example.com",
        local_suffix="+local",
    )


@pytest.fixture
def context() -> BuildContext:
    """A root context so apt commands are not prefixed with sudo."""
    return BuildContext(distro="bullseye", root_user=True)
