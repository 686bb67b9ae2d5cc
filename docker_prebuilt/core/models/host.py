"""
HostProfile — what the installer learned about the machine it runs on.

Derived once at start-up and never mutated; every component receives
it explicitly instead of reading platform globals.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class HostProfile(BaseModel):
    """Platform, kernel and CPU architecture of the host.

    ``kernel_version`` and ``architecture`` are ``None`` when host
    introspection failed; ``introspection_error`` then says why.
    """

    model_config = ConfigDict(frozen=True)

    platform: str                       # e.g. "linux"
    kernel_version: str | None = None   # release with local suffix cut, e.g. "5.15.0"
    architecture: str | None = None     # e.g. "x86_64"
    introspection_error: str | None = None

    @property
    def introspected(self) -> bool:
        return self.introspection_error is None


class HostPolicy(BaseModel):
    """The single platform family the installer supports."""

    model_config = ConfigDict(frozen=True)

    platform: str = "linux"
    min_kernel: str = "3.10"
    architecture: str = "x86_64"
