"""
Tests for host detection and the host support gate.
"""

import logging
import os

import pytest

from docker_prebuilt.core.detection.host import check_host, probe_host
from docker_prebuilt.core.errors import HostUnsupported
from docker_prebuilt.core.models import HostPolicy, HostProfile


def _uname(release: str = "5.15.0-91-generic", machine: str = "x86_64"):
    return lambda: os.uname_result(("Linux", "box", release, "#1 SMP", machine))


class TestProbeHost:
    def test_kernel_suffix_cut(self):
        profile = probe_host(uname=_uname(), platform="linux")
        assert profile.kernel_version == "5.15.0"
        assert profile.architecture == "x86_64"
        assert profile.introspected

    def test_legacy_platform_name(self):
        assert probe_host(uname=_uname(), platform="linux2").platform == "linux"

    def test_uname_failure_recorded(self):
        def broken():
            raise OSError("uname unavailable")

        profile = probe_host(uname=broken, platform="linux")
        assert not profile.introspected
        assert profile.kernel_version is None
        assert "uname unavailable" in profile.introspection_error

    def test_unparseable_release_recorded(self):
        profile = probe_host(uname=_uname(release="weird"), platform="linux")
        assert not profile.introspected


class TestCheckHost:
    def test_supported(self):
        check_host(HostProfile(platform="linux", kernel_version="4.19.0", architecture="x86_64"))

    def test_wrong_platform(self):
        with pytest.raises(HostUnsupported, match="platform"):
            check_host(HostProfile(platform="darwin", kernel_version="22.1.0", architecture="x86_64"))

    def test_old_kernel(self):
        profile = HostProfile(platform="linux", kernel_version="3.8.0", architecture="x86_64")
        with pytest.raises(HostUnsupported, match="kernel") as exc:
            check_host(profile, HostPolicy(min_kernel="3.10"))
        assert exc.value.exit_code == 2

    def test_minimum_kernel_two_segments(self):
        check_host(HostProfile(platform="linux", kernel_version="3.10", architecture="x86_64"))

    def test_wrong_architecture(self):
        with pytest.raises(HostUnsupported, match="64-bit"):
            check_host(HostProfile(platform="linux", kernel_version="5.4.0", architecture="i686"))

    def test_introspection_failure_is_lenient(self, caplog):
        profile = HostProfile(platform="linux", introspection_error="no uname")
        with caplog.at_level(logging.WARNING):
            check_host(profile)
        assert "could not check kernel version" in caplog.text

    def test_platform_strict_even_without_introspection(self):
        with pytest.raises(HostUnsupported):
            check_host(HostProfile(platform="win32", introspection_error="no uname"))
