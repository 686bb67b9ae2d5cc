"""
Error taxonomy — every failure the install pipeline knows how to report.

Components raise these unchanged; ``InstallPipeline`` is the only place
that turns them into a terminal state and an exit status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docker_prebuilt.core.models.command import CommandResult


class InstallError(Exception):
    """Base class for failures that abort the install pipeline."""

    exit_code: int = 2

    def __init__(self, message: str, *, step: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.step = step

    def __str__(self) -> str:
        return self.message


class ConfigError(InstallError):
    """Raised when the install configuration is invalid or missing."""


class HostUnsupported(InstallError):
    """Host platform, kernel or architecture is not supported."""


class RequirementTooOld(InstallError):
    """A required host tool is older than its declared minimum."""

    def __init__(self, binary: str, found: str, minimum: str) -> None:
        super().__init__(f"docker requires {binary} >= {minimum} (found {found})")
        self.binary = binary
        self.found = found
        self.minimum = minimum


class MalformedVersion(InstallError, ValueError):
    """A version string could not be parsed into integer segments."""


class DownloadError(InstallError):
    """Network or HTTP failure while fetching the release archive."""


class ExtractError(InstallError):
    """The archive could not be decompressed or unpacked."""


class PrivilegedExecError(InstallError):
    """Privilege elevation itself failed (cancelled, wrong credential, no sudo).

    Never raised for a non-zero exit of the command being elevated;
    that is reported through ``CommandResult``.
    """


class CommandFailed(InstallError):
    """A privileged command exited non-zero where that cannot be ignored."""

    def __init__(self, message: str, result: CommandResult, *, step: str = "") -> None:
        detail = result.stderr.strip() or f"exit {result.returncode}"
        super().__init__(f"{message}: {detail}", step=step)
        self.result = result


class RequirementUnavailable(Exception):
    """A required tool could not be invoked.

    Advisory only: the checker logs it and the pipeline carries on,
    since not every host needs every optional tool.
    """

    def __init__(self, binary: str, reason: str) -> None:
        super().__init__(f"could not check version of required binary {binary}: {reason}")
        self.binary = binary
        self.reason = reason
