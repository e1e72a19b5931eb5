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

"""Candidate version lookup against the host's apt index.

A package can match more than one version string. apt-cache may report a
binary rebuild revision such as ``3.0.1+dfsg1-3+b2``, while a local rebuild
produces ``podman_3.0.1+dfsg1-3<suffix>1_amd64.deb``. Both the full
candidate and the candidate with its last ``+`` suffix removed are therefore
returned, full candidate first.

See https://www.debian.org/doc/debian-policy/ch-controlfields.html#version
"""

from __future__ import annotations

import logging
import re

from ppabuild.exceptions import CandidateNotFoundError
from ppabuild.tools import CommandRunner

logger = logging.getLogger(__name__)

CANDIDATE_RE = re.compile(r"^\s*Candidate:\s(.*)$", re.MULTILINE)
EPOCH_RE = re.compile(r"^[0-9]*:(.*)")
REVISION_RE = re.compile(r"^(.*)\+.*$")


def derive_candidates(raw: str) -> list[str]:
    """Derive the acceptable version strings from a raw candidate.

    >>> derive_candidates("5.2.3+deb11u1")
    ['5.2.3+deb11u1', '5.2.3']
    >>> derive_candidates("2:1.4-3")
    ['1.4-3']
    """
    epoch_match = EPOCH_RE.match(raw)
    version = epoch_match.group(1) if epoch_match else raw
    candidates = [version]

    revision_match = REVISION_RE.match(version)
    if revision_match:
        candidates.append(revision_match.group(1))
    return candidates


def parse_policy_output(output: str) -> str | None:
    """Return the raw candidate from ``apt-cache policy`` output, if any."""
    match = CANDIDATE_RE.search(output)
    if not match:
        return None
    candidate = match.group(1).strip()
    if not candidate or candidate == "(none)":
        return None
    return candidate


def get_package_candidates(package_name: str, runner: CommandRunner | None = None) -> list[str]:
    """Return the candidate version set for ``package_name``.

    Raises:
        CandidateNotFoundError: If the index has no candidate for the package.
    """
    runner = runner or CommandRunner()
    result = runner.run(["apt-cache", "policy", package_name], capture=True)
    raw = parse_policy_output(result.stdout) if result.ok else None
    if raw is None:
        raise CandidateNotFoundError(
            message=f"Error retrieving available package version for {package_name}",
            package=package_name,
        )

    candidates = derive_candidates(raw)
    logger.debug("Candidates for %s: %s", package_name, candidates)
    return candidates
