"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from docker_prebuilt.core.models import HostProfile, InstallTarget, Requirement
"""

from docker_prebuilt.core.models.command import CommandResult, PrivilegedCommand
from docker_prebuilt.core.models.host import HostPolicy, HostProfile
from docker_prebuilt.core.models.requirement import Requirement, VersionRule
from docker_prebuilt.core.models.target import InstallConfig, InstallTarget

__all__ = [
    # command.py
    "CommandResult",
    "PrivilegedCommand",
    # host.py
    "HostPolicy",
    "HostProfile",
    # target.py
    "InstallConfig",
    "InstallTarget",
    # requirement.py
    "Requirement",
    "VersionRule",
]
