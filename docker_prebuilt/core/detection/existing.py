"""
Detection — an already-installed Docker.

Looks for the executable in the platform's binary directory, falling
back to ``PATH``, and reads its version. The extracted copy under the
install root is never consulted: an unpacked archive is not an install.
"""

from __future__ import annotations

import logging
import shutil
import subprocess

from docker_prebuilt.core.errors import MalformedVersion, RequirementUnavailable
from docker_prebuilt.core.models.requirement import Requirement, VersionRule
from docker_prebuilt.core.models.target import InstallTarget
from docker_prebuilt.core.detection.requirements import Runner, probe_version

logger = logging.getLogger(__name__)

DOCKER_VERSION_RULE = VersionRule.regex(r"Docker version\s+(\d+(?:\.\d+)*)")


def find_installed_binary(target: InstallTarget, platform: str) -> str | None:
    """Locate the product executable, preferring the system binary directory."""
    candidate = target.bin_dir(platform) / target.name
    if candidate.is_file():
        return str(candidate)
    return shutil.which(target.name)


def detect_installed_version(
    target: InstallTarget,
    platform: str,
    *,
    run: Runner = subprocess.run,
) -> str | None:
    """Version of the installed product, or ``None`` if not installed.

    A binary that is missing, fails, or prints something unparseable
    counts as "not installed".
    """
    binary = find_installed_binary(target, platform)
    if binary is None:
        logger.debug("%s not found", target.name)
        return None

    probe = Requirement(binary=binary, min_version="0", rule=DOCKER_VERSION_RULE)
    try:
        version = probe_version(probe, run=run)
    except (RequirementUnavailable, MalformedVersion) as e:
        logger.debug("no usable %s at %s: %s", target.name, binary, e)
        return None

    logger.info("%s version: %s", target.name, version)
    return version
