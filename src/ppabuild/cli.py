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


"""CLI application definition for ppabuild."""

from __future__ import annotations

from typer import Typer

from ppabuild.commands.build import build
from ppabuild.commands.check import check
from ppabuild.commands.init import init

app: Typer = Typer(
    name="ppabuild",
    help="Rebuild patched Debian packages and republish a personal package archive.",
    add_completion=False,
)

# Register commands
app.command(name="init")(init)
app.command(name="check")(check)
app.command(name="build")(build)
