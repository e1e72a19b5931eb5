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


"""Implementation of `ppabuild init` command.

Writes the default configuration if missing, creates the run directory
and optionally copies the in-tree descriptor table to the user's config
directory for editing.
"""

from __future__ import annotations

import shutil
import sys

import typer

from ppabuild.build.descriptors import get_default_table_path, get_override_table_path, load_descriptors
from ppabuild.build.errors import EXIT_SUCCESS
from ppabuild.config import ensure_config_exists, get_config_path, load_settings
from ppabuild.paths import ensure_directories
from ppabuild.run import RunContext, activity
from ppabuild.spinner import activity_status


def init(
    copy_table: bool = typer.Option(
        False, "--copy-table", help="Copy the package table to ~/.config/ppabuild for editing"
    ),
) -> None:
    """Initialize ppabuild configuration and run directories."""
    ensure_config_exists()
    settings = load_settings()

    with RunContext("init", settings.runs_root) as run:
        steps_completed: list[str] = []

        with activity_status("init", "Creating directories"):
            paths = ensure_directories(settings)
            steps_completed.append("directories_created")
            run.log_event({"event": "directories.created", "paths": {k: str(v) for k, v in paths.items()}})
        activity("init", f"Config: {get_config_path()}")

        if copy_table:
            override = get_override_table_path()
            if override.exists():
                activity("init", f"Package table already exists at {override}")
            else:
                override.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(get_default_table_path(), override)
                run.log_event({"event": "table.copied", "path": str(override)})
                steps_completed.append("table_copied")
                activity("init", f"Package table copied to {override}")

        names = [d.name for d in load_descriptors()]
        activity("init", f"Packages: {', '.join(names)}")

        run.write_summary(steps_completed=steps_completed, packages=names)

    sys.exit(EXIT_SUCCESS)
