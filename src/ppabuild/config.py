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

"""Configuration utilities for ppabuild."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ppabuild.exceptions import ConfigError

DEFAULT_CONFIG: dict[str, Any] = {
    "paths": {
        "repo_root": ".",
        "ppa_dir": "debian",
        "aptly_public": "~/.aptly/public",
        "runs_root": "~/.cache/ppabuild/runs",
    },
    "maintainer": {
        "email": "ppa@troyready.com",
        "name": "CI User",
    },
    "build": {
        "local_suffix": "+ztroyppa",
        "build_options": "nocheck",
    },
    "archive": {
        "repo_name": "ppa",
        "component": "main",
        "architectures": ["amd64"],
        "commit_message": "CI update",
    },
    "http": {"timeout": 30},
}


@dataclass(frozen=True)
class Settings:
    """Resolved, immutable view of the configuration used by a run.

    Attributes:
        repo_root: Checkout holding the published archive.
        ppa_dir: Published archive directory (metadata and pool).
        aptly_public: aptly's generated public tree.
        runs_root: Parent directory for per-run log directories.
        maintainer_email: DEBEMAIL used for changelog entries and CI commits.
        maintainer_name: Committer name used in CI.
        local_suffix: Version marker appended to locally rebuilt packages.
        build_options: DEB_BUILD_OPTIONS passed to debuild.
        repo_name: aptly local repo name.
        component: Archive component.
        architectures: Architectures to publish.
        commit_message: Commit message for CI pushes.
        http_timeout: Timeout in seconds for patch downloads.
    """

    repo_root: Path
    ppa_dir: Path
    aptly_public: Path
    runs_root: Path
    maintainer_email: str = "ppa@troyready.com"
    maintainer_name: str = "CI User"
    local_suffix: str = "+ztroyppa"
    build_options: str = "nocheck"
    repo_name: str = "ppa"
    component: str = "main"
    architectures: tuple[str, ...] = ("amd64",)
    commit_message: str = "CI update"
    http_timeout: int = 30

    @property
    def pool_dir(self) -> Path:
        """Directory holding published .deb files, one subdirectory per bucket."""
        return self.ppa_dir / "pool" / self.component


def get_config_path() -> Path:
    """Return the path to the config file."""
    return Path.home() / ".config" / "ppabuild" / "config.yaml"


def ensure_config_exists() -> None:
    """Create the config file with defaults if it does not exist."""
    cfg_path = get_config_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    if not cfg_path.exists():
        cfg_path.write_text(yaml.safe_dump(DEFAULT_CONFIG))


def load_config() -> dict[str, Any]:
    """Load configuration from disk and merge with defaults.

    The returned dictionary is a shallow merge, per top-level section, of
    DEFAULT_CONFIG and the values stored in the on-disk config file.
    """
    ensure_config_exists()
    cfg_path = get_config_path()
    try:
        raw = yaml.safe_load(cfg_path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ConfigError(message=f"Invalid config file {cfg_path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(message=f"Config file {cfg_path} must contain a mapping")

    merged: dict[str, Any] = {}
    for key, val in DEFAULT_CONFIG.items():
        if key in raw and isinstance(raw[key], dict):
            merged[key] = {**val, **raw[key]}
        elif isinstance(val, dict):
            # Copy so callers cannot mutate DEFAULT_CONFIG
            merged[key] = dict(val)
        else:
            merged[key] = raw.get(key, val)

    return merged


def load_settings(cfg: dict[str, Any] | None = None) -> Settings:
    """Build a Settings object from a merged config mapping.

    Relative ``ppa_dir`` values are resolved against ``repo_root``.
    """
    if cfg is None:
        cfg = load_config()

    paths = cfg.get("paths", {})
    repo_root = Path(str(paths.get("repo_root", "."))).expanduser().resolve()
    ppa_dir = Path(str(paths.get("ppa_dir", "debian"))).expanduser()
    if not ppa_dir.is_absolute():
        ppa_dir = repo_root / ppa_dir

    maintainer = cfg.get("maintainer", {})
    build = cfg.get("build", {})
    archive = cfg.get("archive", {})

    try:
        timeout = int(cfg.get("http", {}).get("timeout", 30))
    except (TypeError, ValueError) as e:
        raise ConfigError(message=f"http.timeout must be an integer: {e}") from e

    architectures = archive.get("architectures", ["amd64"])
    if isinstance(architectures, str):
        architectures = architectures.split()

    return Settings(
        repo_root=repo_root,
        ppa_dir=ppa_dir,
        aptly_public=Path(str(paths.get("aptly_public", "~/.aptly/public"))).expanduser(),
        runs_root=Path(str(paths.get("runs_root", "~/.cache/ppabuild/runs"))).expanduser(),
        maintainer_email=str(maintainer.get("email", "ppa@troyready.com")),
        maintainer_name=str(maintainer.get("name", "CI User")),
        local_suffix=str(build.get("local_suffix", "+ztroyppa")),
        build_options=str(build.get("build_options", "nocheck")),
        repo_name=str(archive.get("repo_name", "ppa")),
        component=str(archive.get("component", "main")),
        architectures=tuple(str(a) for a in architectures),
        commit_message=str(archive.get("commit_message", "CI update")),
        http_timeout=timeout,
    )


def write_config(data: dict[str, Any]) -> None:
    """Write the provided data as YAML to the config path.

    The caller should pass a complete configuration mapping.
    """
    cfg_path = get_config_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text(yaml.safe_dump(data))


if __name__ == "__main__":
    cfg = load_config()
    print(json.dumps(cfg, indent=2))
