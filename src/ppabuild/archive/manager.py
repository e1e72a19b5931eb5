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


"""Republish the archive from a run's build outputs.

Publishing is all or nothing. The previous aptly state is torn down
completely, a fresh repo is created from every .deb the run knows about
(rebuilt or previously published), and aptly's public tree replaces the
published directory. Any failing step raises and nothing after it runs.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from ppabuild.apt.installer import install_packages
from ppabuild.archive.aptly import AptlyClient
from ppabuild.build.errors import log_phase_event, phase_warning
from ppabuild.exceptions import ToolFailure
from ppabuild.run import activity
from ppabuild.tools import CommandRunner
from ppabuild.vcs import ArchiveRepo, is_ci, is_github_workspace

if TYPE_CHECKING:
    from ppabuild.build.context import BuildContext
    from ppabuild.build.types import BuildStatus
    from ppabuild.config import Settings
    from ppabuild.run import RunContext

logger = logging.getLogger(__name__)


def stage_debs(dirs: Iterable[Path], staging: Path) -> list[Path]:
    """Copy every ``*.deb`` in ``dirs`` into ``staging``.

    Directories that do not exist are skipped; a package that has never
    been published contributes nothing.

    Returns:
        The staged file paths.

    Raises:
        ToolFailure: If a file cannot be copied.
    """
    staged: list[Path] = []
    for directory in dirs:
        if not directory.is_dir():
            logger.debug("Skipping missing output directory %s", directory)
            continue
        for entry in sorted(directory.iterdir()):
            if entry.is_file() and entry.name.endswith(".deb"):
                dest = staging / entry.name
                try:
                    shutil.copyfile(entry, dest)
                except OSError as e:
                    raise ToolFailure(message=f"Cannot stage {entry}: {e}") from e
                staged.append(dest)
    return staged


class ArchiveManager:
    """Rebuild the published archive with aptly."""

    def __init__(
        self,
        context: BuildContext,
        settings: Settings,
        aptly: AptlyClient | None = None,
        repo: ArchiveRepo | None = None,
        runner: CommandRunner | None = None,
        run: RunContext | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.context = context
        self.settings = settings
        self.runner = runner or CommandRunner()
        self.aptly = aptly or AptlyClient(self.runner)
        self.repo = repo or ArchiveRepo(settings.repo_root)
        self._run = run
        self.environ = os.environ if environ is None else environ

    def teardown(self) -> None:
        """Drop the existing publish and repo, if any.

        A failing ``repo show`` is treated as "no repo" and recreation
        proceeds; the exit status is recorded as a warning.
        """
        distro = self.context.distro
        repo_name = self.settings.repo_name

        shown = self.aptly.repo_show(repo_name)
        if not shown.ok:
            phase_warning(
                self._run,
                "publish",
                f"aptly repo show {repo_name} exited {shown.returncode}; treating repo as absent",
                event_key="publish.repo_absent",
                returncode=shown.returncode,
            )
            return

        if self.aptly.publish_show(distro).ok:
            self.aptly.publish_drop(distro)
        self.aptly.repo_drop(repo_name)

    def recreate(self, staging: Path) -> None:
        s = self.settings
        self.aptly.repo_create(s.repo_name, s.component, self.context.distro)
        self.aptly.repo_add(s.repo_name, staging)
        self.aptly.publish_repo(s.repo_name, s.architectures, skip_signing=True)

    def push(self) -> None:
        """Commit and push the published directory (CI only)."""
        activity("publish", "Running in CI - pushing updated PPA to remote...")
        if is_github_workspace(self.environ):
            self.repo.configure_identity(self.settings.maintainer_email, self.settings.maintainer_name)
        self.repo.commit_and_push(self.settings.ppa_dir, self.settings.commit_message)

    def publish(self, status: BuildStatus, retained: Iterable[Path] = ()) -> bool:
        """Republish the archive if ``status`` requires it.

        ``retained`` names published pool directories of packages the run
        did not consider; their .deb files are staged alongside the run's
        own so a partial run does not drop them from the archive.

        Returns:
            True if the archive was republished.

        Raises:
            ToolFailure: If any step fails.
        """
        if not status.succeeded or not status.publish_required:
            activity("publish", "Nothing to publish")
            return False

        ppa_dir = self.settings.ppa_dir
        install_packages(["aptly"], self.context, self.runner)

        with tempfile.TemporaryDirectory(prefix="ppabuild-debs-") as tmp:
            staging = Path(tmp)
            # Must run before ppa_dir is removed: unchanged packages are
            # staged from the published pool
            staged = stage_debs([*status.debdir_paths, *retained], staging)
            log_phase_event(
                self._run,
                "publish",
                f"Staged {len(staged)} package(s)",
                "publish.staged",
                debs=[p.name for p in staged],
            )

            if ppa_dir.exists():
                try:
                    shutil.rmtree(ppa_dir)
                except OSError as e:
                    raise ToolFailure(message=f"Cannot remove {ppa_dir}: {e}") from e

            self.teardown()
            self.recreate(staging)

        try:
            shutil.copytree(self.settings.aptly_public, ppa_dir, dirs_exist_ok=True)
        except (OSError, shutil.Error) as e:
            raise ToolFailure(message=f"Cannot copy {self.settings.aptly_public} to {ppa_dir}: {e}") from e
        log_phase_event(
            self._run,
            "publish",
            f"Published {self.settings.repo_name} for {self.context.distro} to {ppa_dir}",
            "publish.complete",
            distro=self.context.distro,
            path=str(ppa_dir),
        )

        if is_ci(self.environ):
            self.push()
        return True
