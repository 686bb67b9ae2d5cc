"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import io
import subprocess
import tarfile
from pathlib import Path

import pytest

from docker_prebuilt.adapters.mock import MockExecutor
from docker_prebuilt.core.models import (
    HostProfile,
    InstallConfig,
    InstallTarget,
    Requirement,
    VersionRule,
)

# Real-world ``--version`` outputs
VERSION_OUTPUTS = {
    "git": "git version 2.34.1\n",
    "iptables": "iptables v1.8.7 (nf_tables)\n",
    "xz": "xz (XZ Utils) 5.2.5\nliblzma 5.2.5\n",
    "ps": "ps from procps-ng 3.3.17\n",
}


class FakeRunner:
    """``subprocess.run`` stand-in keyed by program name.

    Programs without a scripted response raise ``FileNotFoundError``,
    like a binary that is not installed.
    """

    def __init__(self, responses: dict[str, tuple[int, str]] | None = None):
        self.responses: dict[str, tuple[int, str]] = dict(responses or {})
        self.calls: list[list[str]] = []

    def set(self, program: str, stdout: str, returncode: int = 0) -> None:
        self.responses[program] = (returncode, stdout)

    @property
    def programs(self) -> list[str]:
        return [Path(c[0]).name for c in self.calls]

    def __call__(self, cmd, **kwargs) -> subprocess.CompletedProcess:
        self.calls.append(list(cmd))
        program = Path(cmd[0]).name
        if program not in self.responses:
            raise FileNotFoundError(2, "No such file or directory", cmd[0])
        returncode, stdout = self.responses[program]
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr="")


def build_release(path: Path, *, gzip: bool = True, files: dict[str, bytes] | None = None) -> Path:
    """Write a release tarball shaped like the upstream ``docker-X.tgz``."""
    files = files or {
        "docker/docker": b"#!/bin/sh\necho 'Docker version 1.10.0, build 590d510'\n",
        "docker/docker-containerd": b"#!/bin/sh\n",
    }
    mode = "w:gz" if gzip else "w"
    with tarfile.open(path, mode) as tf:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tf.addfile(info, io.BytesIO(data))
    return path


@pytest.fixture
def fake_run() -> FakeRunner:
    """Runner with all default requirements satisfied and no docker."""
    return FakeRunner({name: (0, out) for name, out in VERSION_OUTPUTS.items()})


@pytest.fixture
def executor() -> MockExecutor:
    return MockExecutor()


@pytest.fixture
def host() -> HostProfile:
    return HostProfile(platform="linux", kernel_version="5.15.0", architecture="x86_64")


@pytest.fixture
def target(tmp_path: Path) -> InstallTarget:
    """Target rooted in a temp dir with no supervisor directory."""
    return InstallTarget(
        version="1.10.0",
        install_root=tmp_path / "root",
        bin_dirs={"linux": str(tmp_path / "bin")},
        supervisor_dir=tmp_path / "no-systemd",
    )


@pytest.fixture
def requirements() -> list[Requirement]:
    return [
        Requirement(binary="git", min_version="1.7", rule=VersionRule.field(2)),
        Requirement(binary="iptables", min_version="1.4", rule=VersionRule.regex(r"v(\d+(?:\.\d+)*)")),
        Requirement(
            binary="xz", min_version="4.9",
            rule=VersionRule.field(3, first_line=True, strip=("alpha", "beta")),
        ),
        Requirement(binary="ps", min_version="0.0", rule=VersionRule.regex(r"(\d+(?:\.\d+)+)")),
    ]


@pytest.fixture
def config(target: InstallTarget, requirements: list[Requirement]) -> InstallConfig:
    return InstallConfig(target=target, requirements=requirements)


@pytest.fixture
def release_archive(tmp_path: Path) -> Path:
    return build_release(tmp_path / "docker-1.10.0.tgz")
