"""
Detection — host tool requirement checks.

Runs each required tool's ``--version`` command, extracts the version
with the requirement's ``VersionRule`` and enforces the minimum.

A tool that cannot be invoked is logged and skipped; a tool that is
present but too old stops the install.
"""

from __future__ import annotations

import logging
import re
import subprocess
from collections.abc import Callable, Iterable

from docker_prebuilt.core.domain.version import is_at_least, parse_version
from docker_prebuilt.core.errors import (
    MalformedVersion,
    RequirementTooOld,
    RequirementUnavailable,
)
from docker_prebuilt.core.models.requirement import Requirement, VersionRule

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]

# Seconds before a ``--version`` probe is abandoned
PROBE_TIMEOUT = 10


def extract_version(rule: VersionRule, output: str) -> str:
    """Pull a version string out of raw ``--version`` output.

    Raises:
        MalformedVersion: if the rule finds nothing, or what it finds
            does not parse as a dotted version.
    """
    text = output.strip()
    if rule.first_line:
        text = text.splitlines()[0] if text else ""

    if rule.kind == "field":
        fields = text.split()
        if rule.index >= len(fields):
            raise MalformedVersion(
                f"no field {rule.index} in version output {text[:80]!r}"
            )
        raw = fields[rule.index]
    else:
        match = re.search(rule.pattern, text)
        if not match:
            raise MalformedVersion(
                f"pattern {rule.pattern!r} not found in version output {text[:80]!r}"
            )
        raw = match.group(1)

    for qualifier in rule.strip:
        raw = raw.replace(qualifier, "")

    parse_version(raw)
    return raw


def probe_version(
    requirement: Requirement,
    *,
    run: Runner = subprocess.run,
) -> str:
    """Run the requirement's version command and extract its version.

    Raises:
        RequirementUnavailable: the binary is missing, timed out, or
            exited non-zero.
        MalformedVersion: the output did not yield a version.
    """
    cmd = requirement.command
    try:
        result = run(cmd, capture_output=True, text=True, timeout=PROBE_TIMEOUT)
    except FileNotFoundError:
        raise RequirementUnavailable(requirement.binary, "not installed") from None
    except subprocess.TimeoutExpired:
        raise RequirementUnavailable(
            requirement.binary, f"timed out after {PROBE_TIMEOUT}s"
        ) from None
    except OSError as e:
        raise RequirementUnavailable(requirement.binary, str(e)) from e

    if result.returncode != 0:
        raise RequirementUnavailable(requirement.binary, f"exit {result.returncode}")

    # Some tools print their version on stderr
    output = result.stdout or result.stderr or ""
    return extract_version(requirement.rule, output)


def ensure_minimum(
    requirement: Requirement,
    *,
    run: Runner = subprocess.run,
) -> str | None:
    """Enforce ``requirement.min_version`` on the installed tool.

    Returns:
        The detected version, or ``None`` when the tool is unavailable
        (logged as a warning, install continues).

    Raises:
        RequirementTooOld: the tool is present but older than required.
        MalformedVersion: the tool's output could not be parsed.
    """
    try:
        found = probe_version(requirement, run=run)
    except RequirementUnavailable as e:
        logger.warning("%s", e)
        return None

    logger.debug(
        "requirement %s: found %s, need >= %s",
        requirement.binary, found, requirement.min_version,
    )
    if not is_at_least(found, requirement.min_version):
        raise RequirementTooOld(requirement.binary, found, requirement.min_version)
    return found


def check_requirements(
    requirements: Iterable[Requirement],
    *,
    run: Runner = subprocess.run,
) -> dict[str, str | None]:
    """Check every requirement in declaration order; stop at the first fatal one."""
    return {req.binary: ensure_minimum(req, run=run) for req in requirements}
