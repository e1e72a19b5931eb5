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


"""Implementation of `ppabuild build` command.

Rebuilds every package whose published artifacts do not match apt's
candidate version, then republishes the archive if anything was rebuilt.

Exit codes:
  0 - Success (including "nothing to rebuild")
  1 - Configuration error, or a tool failed without reporting a code
  N - Exit code of the first external tool that failed
"""

from __future__ import annotations

import sys
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

import requests
import typer

from ppabuild.archive.manager import ArchiveManager
from ppabuild.build.context import BuildContext
from ppabuild.build.descriptors import PackageDescriptor, load_descriptors, select_descriptors
from ppabuild.build.errors import EXIT_SUCCESS, report_failure
from ppabuild.build.orchestrator import BuildOrchestrator
from ppabuild.config import Settings, load_settings
from ppabuild.distro import get_distro_codename
from ppabuild.exceptions import PpaBuildError
from ppabuild.paths import ensure_directories
from ppabuild.run import RunContext, activity
from ppabuild.tools import CommandRunner

if TYPE_CHECKING:
    from ppabuild.run import RunContext as RunContextType


def run_build(
    settings: Settings,
    descriptors: list[PackageDescriptor],
    run: RunContextType,
    publish: bool = True,
    runner: CommandRunner | None = None,
    session: requests.Session | None = None,
    environ: Mapping[str, str] | None = None,
    all_descriptors: list[PackageDescriptor] | None = None,
) -> int:
    """Build and publish, returning the process exit code.

    ``all_descriptors`` is the full table when ``descriptors`` is a
    selection from it. Packages outside the selection are republished
    from their current pool directories.
    """
    runner = runner or CommandRunner()

    try:
        distro = get_distro_codename(runner)
    except PpaBuildError as e:
        return report_failure(run, "init", e)

    context = BuildContext.from_environment(distro, environ)
    run.log_event(
        {
            "event": "build.context",
            "distro": distro,
            "root_user": context.root_user,
            "preinstalled_override": context.preinstalled_override,
            "packages": [d.name for d in descriptors],
        }
    )
    activity("init", f"Target distribution: {distro}")

    published = False
    with BuildOrchestrator(descriptors, context, settings, runner=runner, session=session, run=run) as orchestrator:
        status = orchestrator.run()
        if not status.succeeded:
            run.write_summary(rebuilt=status.rebuilt)
            return status.exit_code

        if publish:
            selected = {d.name for d in descriptors}
            retained = [
                d.published_dir(settings.pool_dir)
                for d in all_descriptors or ()
                if d.name not in selected
            ]
            manager = ArchiveManager(context, settings, runner=runner, run=run, environ=environ)
            try:
                published = manager.publish(status, retained=retained)
            except PpaBuildError as e:
                run.write_summary(rebuilt=status.rebuilt)
                return report_failure(run, "publish", e)
        elif status.publish_required:
            activity("publish", "Skipping publish (--no-publish)")

    run.write_summary(
        status="success",
        exit_code=EXIT_SUCCESS,
        distro=distro,
        rebuilt=status.rebuilt,
        published=published,
    )
    return EXIT_SUCCESS


def build(
    package: list[str] = typer.Option(
        [], "-p", "--package", help="Only consider this package (repeatable)"
    ),
    publish: bool = typer.Option(
        True, "--publish/--no-publish", help="Republish the archive when something was rebuilt"
    ),
    table: str = typer.Option(
        "", "--table", help="Descriptor table to use instead of the default"
    ),
) -> None:
    """Rebuild out-of-date packages and republish the archive."""
    try:
        settings = load_settings()
        table_descriptors = load_descriptors(Path(table) if table else None)
        descriptors = select_descriptors(table_descriptors, package)
    except PpaBuildError as e:
        activity("error", e.message)
        sys.exit(e.exit_code)

    ensure_directories(settings)

    with RunContext("build", settings.runs_root) as run:
        exit_code = run_build(
            settings, descriptors, run, publish=publish, all_descriptors=table_descriptors
        )

    sys.exit(exit_code)
