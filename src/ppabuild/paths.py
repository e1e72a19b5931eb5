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

"""Path helpers and directory creation for ppabuild."""

from __future__ import annotations

from pathlib import Path

from ppabuild.config import Settings, load_settings


def pool_bucket(source_name: str) -> str:
    """Return the Debian pool bucket for a source package.

    Library sources are bucketed by ``lib`` plus their next letter
    (``libpod`` -> ``libp``); everything else by its first letter.
    """
    if not source_name:
        raise ValueError("source package name must not be empty")
    if source_name.startswith("lib") and len(source_name) > 3:
        return source_name[:4]
    return source_name[0]


def published_dir(pool_dir: Path, source_name: str) -> Path:
    """Return the directory holding published artifacts for a source package."""
    return pool_dir / pool_bucket(source_name) / source_name


def ensure_directories(settings: Settings | None = None) -> dict[str, Path]:
    """Ensure run directories exist.

    Returns a mapping of keys to Path objects that were created/ensured.
    The published archive directory is only reported, never created here;
    its absence means nothing has been published yet.
    """
    if settings is None:
        settings = load_settings()

    settings.runs_root.mkdir(parents=True, exist_ok=True)

    return {
        "repo_root": settings.repo_root,
        "ppa_dir": settings.ppa_dir,
        "aptly_public": settings.aptly_public,
        "runs_root": settings.runs_root,
    }


if __name__ == "__main__":
    resolved = ensure_directories()
    for k, p in resolved.items():
        print(f"{k}: {p}")
