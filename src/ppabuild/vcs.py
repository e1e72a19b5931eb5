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

"""Git operations: source checkouts and pushing the published archive."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import git

from ppabuild.exceptions import ToolFailure

logger = logging.getLogger(__name__)


def git_failure(e: git.GitCommandError, what: str = "git") -> ToolFailure:
    """Convert a GitPython error into a ToolFailure carrying git's exit code."""
    command = [str(c) for c in e.command] if isinstance(e.command, (list, tuple)) else ["git"]
    status = e.status if isinstance(e.status, int) else None
    detail = e.stderr.strip() if isinstance(e.stderr, str) and e.stderr.strip() else str(e)
    return ToolFailure.from_returncode(command, status, f"{what} failed: {detail}")


def is_ci(environ: Mapping[str, str] | None = None) -> bool:
    """Return True when running under continuous integration."""
    env = os.environ if environ is None else environ
    return bool(env.get("CI"))


def is_github_workspace(environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return bool(env.get("GITHUB_WORKSPACE"))


class ArchiveRepo:
    """The git checkout that carries the published archive."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root

    def _repo(self) -> git.Repo:
        try:
            return git.Repo(self.repo_root, search_parent_directories=True)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            raise ToolFailure(message=f"{self.repo_root} is not a git repository") from e

    def configure_identity(self, email: str, name: str) -> None:
        """Set the committer identity for this checkout.

        Best effort: CI checkouts may not allow writing their config.
        """
        try:
            with self._repo().config_writer() as cw:
                cw.set_value("user", "email", email)
                cw.set_value("user", "name", name)
        except (OSError, git.GitCommandError) as e:
            logger.warning("Could not set git identity: %s", e)

    def commit_and_push(self, path: Path, message: str) -> None:
        """Stage ``path``, commit it and push the current branch.

        Raises:
            ToolFailure: If any git step fails.
        """
        repo = self._repo()
        try:
            repo.git.add(str(path))
        except git.GitCommandError as e:
            raise git_failure(e, "git add") from e
        try:
            repo.git.commit("-m", message)
        except git.GitCommandError as e:
            raise git_failure(e, "git commit") from e
        try:
            repo.git.push()
        except git.GitCommandError as e:
            raise git_failure(e, "git push") from e


def clone_at_revision(url: str, revision: str, dest: Path) -> Path:
    """Clone ``url`` into ``dest`` and check out ``revision``.

    Raises:
        ToolFailure: If cloning or checking out fails.
    """
    try:
        repo = git.Repo.clone_from(url, dest)
    except git.GitCommandError as e:
        raise git_failure(e, "git clone") from e
    if revision:
        try:
            repo.git.checkout(revision)
        except git.GitCommandError as e:
            raise git_failure(e, "git checkout") from e
    return dest
