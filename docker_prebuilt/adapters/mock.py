"""
Mock executor — test double for privileged operations.

Records every command it receives and answers with scripted results,
so pipeline runs are deterministic and never touch the host.
"""

from __future__ import annotations

from docker_prebuilt.adapters.privileged import PrivilegedExecutor
from docker_prebuilt.core.errors import PrivilegedExecError
from docker_prebuilt.core.models.command import CommandResult, PrivilegedCommand


class MockExecutor(PrivilegedExecutor):
    """Universal privileged-executor mock.

    By default every command succeeds. Responses are keyed by the
    command's first argument (``"killall"``, ``"cp"``, ...).
    """

    def __init__(self) -> None:
        self._results: dict[str, CommandResult] = {}
        self._elevation_failures: dict[str, str] = {}
        self._call_log: list[PrivilegedCommand] = []

    @property
    def call_log(self) -> list[PrivilegedCommand]:
        """All commands this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def programs(self) -> list[str]:
        """First argument of every command run, in order."""
        return [c.args[0] for c in self._call_log]

    def set_exit(self, program: str, returncode: int, stderr: str = "") -> None:
        """Make ``program`` exit with ``returncode``."""
        self._results[program] = CommandResult(
            argv=[program], returncode=returncode, stderr=stderr,
        )

    def fail_elevation(self, program: str, error: str = "Mock elevation failure") -> None:
        """Make elevation fail when ``program`` is run."""
        self._elevation_failures[program] = error

    def run(self, command: PrivilegedCommand) -> CommandResult:
        self._call_log.append(command)
        program = command.args[0]

        if program in self._elevation_failures:
            raise PrivilegedExecError(self._elevation_failures[program])

        scripted = self._results.get(program)
        if scripted is not None:
            return scripted.model_copy(update={"argv": command.args})
        return CommandResult(argv=command.args)

    def reset(self) -> None:
        """Clear call log and scripted responses."""
        self._call_log.clear()
        self._results.clear()
        self._elevation_failures.clear()
