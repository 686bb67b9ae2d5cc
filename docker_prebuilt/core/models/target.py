"""
InstallTarget and InstallConfig — what to install and where.

Resolved once from ``install.yml`` before the pipeline starts and
immutable afterwards.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from docker_prebuilt import __version__
from docker_prebuilt.core.errors import ConfigError
from docker_prebuilt.core.models.host import HostPolicy
from docker_prebuilt.core.models.requirement import Requirement

DEFAULT_INSTALL_ROOT = "~/.local/share/docker-prebuilt"


class InstallTarget(BaseModel):
    """The Docker release to install and the host paths it lands in."""

    model_config = ConfigDict(frozen=True)

    name: str = "docker"
    version: str = __version__
    filename: str = "{name}-{version}.tgz"
    url: str = "https://get.docker.com/builds/{platform}/{arch}/{filename}"

    # per-platform paths
    extract_paths: dict[str, str] = Field(default_factory=lambda: {"linux": "dist/docker"})
    bin_dirs: dict[str, str] = Field(default_factory=lambda: {"linux": "/usr/local/bin"})

    install_root: Path = Field(default=Path(DEFAULT_INSTALL_ROOT), validate_default=True)
    daemon_process: str = "docker"
    service_name: str = "docker"
    group: str = "docker"
    supervisor_dir: Path = Path("/etc/systemd/system")

    @field_validator("version")
    @classmethod
    def strip_prerelease(cls, v: str) -> str:
        return re.sub(r"-.*", "", v.strip())

    @field_validator("install_root", mode="after")
    @classmethod
    def expand_root(cls, v: Path) -> Path:
        return v.expanduser()

    @property
    def archive_name(self) -> str:
        return self.filename.format(name=self.name, version=self.version)

    @property
    def cache_dir(self) -> Path:
        return self.install_root / "cache"

    def extract_path(self, platform: str) -> str:
        try:
            return self.extract_paths[platform]
        except KeyError:
            raise ConfigError(f"no extraction path configured for platform {platform!r}") from None

    def bin_dir(self, platform: str) -> Path:
        try:
            return Path(self.bin_dirs[platform])
        except KeyError:
            raise ConfigError(f"no binary directory configured for platform {platform!r}") from None


class InstallConfig(BaseModel):
    """Root configuration document (``install.yml``)."""

    model_config = ConfigDict(frozen=True)

    target: InstallTarget = Field(default_factory=InstallTarget)
    host: HostPolicy = Field(default_factory=HostPolicy)
    requirements: list[Requirement] = Field(default_factory=list)
