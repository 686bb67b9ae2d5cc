"""
Detection — host profile probe and support gate.

The gate is strict about values it could read (platform, kernel,
architecture) and lenient when ``uname`` itself could not be read:
that case is logged and the install proceeds.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable

from docker_prebuilt.core.domain.version import Ordering, compare, parse_version
from docker_prebuilt.core.errors import HostUnsupported, MalformedVersion
from docker_prebuilt.core.models.host import HostPolicy, HostProfile

logger = logging.getLogger(__name__)


def _normalize_platform(platform: str) -> str:
    # sys.platform was "linux2" on old interpreters
    return "linux" if platform.startswith("linux") else platform


def probe_host(
    uname: Callable[[], os.uname_result] = os.uname,
    platform: str = sys.platform,
) -> HostProfile:
    """Derive the host profile.

    The kernel release is cut at its first ``-`` (``5.15.0-91-generic``
    becomes ``5.15.0``). If ``uname`` fails, or the release does not
    parse, the profile records ``introspection_error`` instead.
    """
    platform = _normalize_platform(platform)
    try:
        info = uname()
        kernel = info.release.split("-")[0]
        parse_version(kernel)
    except (OSError, AttributeError, MalformedVersion) as e:
        return HostProfile(platform=platform, introspection_error=str(e))

    return HostProfile(
        platform=platform,
        kernel_version=kernel,
        architecture=info.machine,
    )


def check_host(profile: HostProfile, policy: HostPolicy | None = None) -> None:
    """Reject hosts the runtime cannot run on.

    Raises:
        HostUnsupported: wrong platform, kernel older than
            ``policy.min_kernel``, or wrong architecture.
    """
    policy = policy or HostPolicy()

    if profile.platform != policy.platform:
        raise HostUnsupported(f"unsupported platform: {profile.platform}")

    if not profile.introspected:
        logger.warning("could not check kernel version with uname: %s", profile.introspection_error)
        return

    assert profile.kernel_version is not None
    if compare(profile.kernel_version, policy.min_kernel) == Ordering.LESS:
        raise HostUnsupported(
            f"unsupported kernel version: {profile.kernel_version} "
            f"(need >= {policy.min_kernel})"
        )

    if profile.architecture != policy.architecture:
        raise HostUnsupported(
            f"docker requires a 64-bit {policy.platform} installation "
            f"(found {profile.architecture})"
        )

    logger.debug(
        "host ok: %s kernel %s on %s",
        profile.platform, profile.kernel_version, profile.architecture,
    )
