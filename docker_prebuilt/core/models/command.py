"""
PrivilegedCommand and CommandResult — the elevation contract.

A ``PrivilegedCommand`` is built fresh for each privileged step. The
executor answers with a ``CommandResult`` describing how the *target*
command exited; elevation failures are raised, never returned.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PrivilegedCommand(BaseModel):
    """A command to run with elevated privilege."""

    model_config = ConfigDict(frozen=True)

    argv: tuple[str, ...] = ()
    shell: str | None = None     # run through ``sh -c`` instead of argv
    prompt: str = "Enter sudo password:"
    cache_credential: bool = True

    @property
    def args(self) -> list[str]:
        """Argument vector actually handed to the process."""
        if self.shell is not None:
            return ["sh", "-c", self.shell]
        return list(self.argv)

    @property
    def display(self) -> str:
        return self.shell if self.shell is not None else " ".join(self.argv)


class CommandResult(BaseModel):
    """Outcome of the elevated command itself."""

    argv: list[str] = Field(default_factory=list)
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0
