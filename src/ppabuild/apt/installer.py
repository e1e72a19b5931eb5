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

"""Idempotent apt operations backed by the BuildContext cache.

Each function consults the context first and records what it did, so a
package or build-dependency set is installed at most once per run, and
``apt-get update`` runs at most once. Commands are prefixed with ``sudo``
unless the process is root.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ppabuild.build.context import BuildContext
from ppabuild.exceptions import ToolFailure
from ppabuild.run import activity
from ppabuild.tools import CommandRunner

logger = logging.getLogger(__name__)


def apt_get_command(args: Sequence[str], context: BuildContext) -> list[str]:
    """Return an apt-get command line, privileged as needed."""
    cmd = ["apt-get", *args]
    return cmd if context.root_user else ["sudo", *cmd]


def update_package_sources(context: BuildContext, runner: CommandRunner | None = None) -> bool:
    """Run ``apt-get update`` once per run.

    Returns:
        True if the update ran, False if it had already run.

    Raises:
        ToolFailure: If apt-get update fails.
    """
    if context.package_sources_updated:
        return False

    runner = runner or CommandRunner()
    activity("apt", "Running apt-get update")
    cmd = apt_get_command(["update"], context)
    result = runner.run(cmd)
    if not result.ok:
        raise ToolFailure.from_returncode(
            cmd, result.returncode, f"apt-get update failed with exit code {result.returncode}"
        )
    context.mark_sources_updated()
    return True


def install_packages(
    names: Sequence[str], context: BuildContext, runner: CommandRunner | None = None
) -> bool:
    """Install OS packages unless the context already has them.

    Returns:
        True if apt-get install ran.
    """
    if context.packages_installed(names):
        logger.debug("Package(s) %s already installed", " ".join(names))
        return False

    runner = runner or CommandRunner()
    activity("apt", "Installing " + " ".join(names))
    update_package_sources(context, runner)
    runner.check(apt_get_command(["install", "-y", *names], context))
    context.mark_packages_installed(names)
    return True


def install_build_deps(
    names: Sequence[str], context: BuildContext, runner: CommandRunner | None = None
) -> bool:
    """Install the build dependencies of source packages.

    Returns:
        True if apt-get build-dep ran.
    """
    if context.build_deps_installed(names):
        logger.debug("Build dep(s) %s already installed", " ".join(names))
        return False

    runner = runner or CommandRunner()
    activity("apt", "Installing build deps for " + " ".join(names))
    update_package_sources(context, runner)
    runner.check(apt_get_command(["build-dep", "-y", *names], context))
    context.mark_build_deps_installed(names)
    return True
