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


"""Tests for ppabuild.vcs module."""

from __future__ import annotations

from pathlib import Path

import git
import pytest

from ppabuild.exceptions import ToolFailure
from ppabuild.vcs import ArchiveRepo, clone_at_revision, is_ci, is_github_workspace


def _seed_repo(path: Path) -> git.Repo:
    repo = git.Repo.init(path)
    (path / "file.txt").write_text("one")
    repo.index.add(["file.txt"])
    repo.index.commit("Initial commit")
    return repo


class TestEnvironment:
    def test_is_ci(self) -> None:
        assert is_ci({"CI": "true"})
        assert not is_ci({})
        assert not is_ci({"CI": ""})

    def test_is_github_workspace(self) -> None:
        assert is_github_workspace({"GITHUB_WORKSPACE": "/github/workspace"})
        assert not is_github_workspace({"CI": "true"})


class TestCloneAtRevision:
    def test_checks_out_revision(self, tmp_path: Path) -> None:
        upstream = _seed_repo(tmp_path / "upstream")
        first = upstream.head.commit.hexsha
        (tmp_path / "upstream" / "file.txt").write_text("two")
        upstream.index.add(["file.txt"])
        upstream.index.commit("Second commit")

        dest = clone_at_revision(str(tmp_path / "upstream"), first, tmp_path / "clone")

        assert (dest / "file.txt").read_text() == "one"
        assert git.Repo(dest).head.commit.hexsha == first

    def test_bad_revision(self, tmp_path: Path) -> None:
        _seed_repo(tmp_path / "upstream")
        with pytest.raises(ToolFailure, match="git checkout"):
            clone_at_revision(str(tmp_path / "upstream"), "0" * 40, tmp_path / "clone")

    def test_bad_url(self, tmp_path: Path) -> None:
        with pytest.raises(ToolFailure, match="git clone") as exc_info:
            clone_at_revision(str(tmp_path / "nope"), "", tmp_path / "clone")
        assert exc_info.value.exit_code >= 1


class TestArchiveRepo:
    def test_commit_and_push(self, tmp_path: Path) -> None:
        _seed_repo(tmp_path / "seed")
        origin = git.Repo.clone_from(str(tmp_path / "seed"), tmp_path / "origin.git", bare=True)
        git.Repo.clone_from(str(tmp_path / "origin.git"), tmp_path / "work")
        ppa = tmp_path / "work" / "debian"
        (ppa / "dists").mkdir(parents=True)
        (ppa / "dists" / "Release").write_text("Suite: bullseye\n")

        archive = ArchiveRepo(tmp_path / "work")
        archive.configure_identity("ppa@example.com", "CI User")
        archive.commit_and_push(ppa, "CI update")

        assert origin.head.commit.message.strip() == "CI update"
        assert origin.head.commit.author.email == "ppa@example.com"

    def test_not_a_repository(self, tmp_path: Path) -> None:
        with pytest.raises(ToolFailure, match="not a git repository"):
            ArchiveRepo(tmp_path).commit_and_push(tmp_path, "CI update")

    def test_nothing_to_commit(self, tmp_path: Path) -> None:
        _seed_repo(tmp_path / "work")
        archive = ArchiveRepo(tmp_path / "work")
        archive.configure_identity("ppa@example.com", "CI User")
        with pytest.raises(ToolFailure, match="git commit"):
            archive.commit_and_push(tmp_path / "work" / "file.txt", "CI update")
