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


"""Implementation of `ppabuild check` command.

Reports, per package, whether the published artifacts are current without
building or publishing anything.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ppabuild.apt.candidates import get_package_candidates
from ppabuild.apt.installer import update_package_sources
from ppabuild.build.context import BuildContext
from ppabuild.build.descriptors import CheckMethod, PackageDescriptor, load_descriptors, select_descriptors
from ppabuild.build.errors import EXIT_SUCCESS, report_failure
from ppabuild.build.published import has_any_artifact, needs_rebuild
from ppabuild.config import Settings, load_settings
from ppabuild.distro import get_distro_codename
from ppabuild.exceptions import PpaBuildError
from ppabuild.paths import ensure_directories
from ppabuild.run import RunContext, activity
from ppabuild.tools import CommandRunner


@dataclass
class PackageState:
    name: str
    published_dir: Path
    candidates: list[str]
    rebuild: bool


def check_package(
    descriptor: PackageDescriptor, settings: Settings, runner: CommandRunner | None = None
) -> PackageState:
    """Return the published state of one package."""
    published = descriptor.published_dir(settings.pool_dir)
    if descriptor.check == CheckMethod.ANY_ARTIFACT:
        return PackageState(
            name=descriptor.name,
            published_dir=published,
            candidates=[],
            rebuild=not has_any_artifact(published, descriptor.name),
        )

    candidates = get_package_candidates(descriptor.name, runner)
    return PackageState(
        name=descriptor.name,
        published_dir=published,
        candidates=candidates,
        rebuild=needs_rebuild(published, descriptor.name, candidates, settings.local_suffix),
    )


def render_states(states: list[PackageState]) -> Table:
    table = Table(title="Published packages")
    table.add_column("Package")
    table.add_column("Candidates")
    table.add_column("Pool directory")
    table.add_column("Status")
    for state in states:
        table.add_row(
            state.name,
            ", ".join(state.candidates) or "-",
            str(state.published_dir),
            "[yellow]rebuild[/yellow]" if state.rebuild else "[green]current[/green]",
        )
    return table


def check(
    package: list[str] = typer.Option(
        [], "-p", "--package", help="Only check this package (repeatable)"
    ),
    update: bool = typer.Option(
        False, "--update", help="Run apt-get update before querying candidates"
    ),
    table: str = typer.Option(
        "", "--table", help="Descriptor table to use instead of the default"
    ),
) -> None:
    """Show which packages would be rebuilt."""
    try:
        settings = load_settings()
        descriptors = select_descriptors(load_descriptors(Path(table) if table else None), package)
    except PpaBuildError as e:
        activity("error", e.message)
        sys.exit(e.exit_code)

    ensure_directories(settings)
    runner = CommandRunner()
    exit_code = EXIT_SUCCESS

    with RunContext("check", settings.runs_root) as run:
        states: list[PackageState] = []
        try:
            if update:
                context = BuildContext.from_environment(get_distro_codename(runner))
                update_package_sources(context, runner)
            for descriptor in descriptors:
                state = check_package(descriptor, settings, runner)
                states.append(state)
                run.log_event(
                    {
                        "event": "check.package",
                        "package": state.name,
                        "candidates": state.candidates,
                        "rebuild": state.rebuild,
                    }
                )
        except PpaBuildError as e:
            exit_code = report_failure(run, "check", e)

        if states:
            Console(file=sys.__stdout__).print(render_states(states))
        if exit_code == EXIT_SUCCESS:
            run.write_summary(
                status="success",
                exit_code=EXIT_SUCCESS,
                rebuild=[s.name for s in states if s.rebuild],
            )

    sys.exit(exit_code)
