"""
Privileged executor — the protocol between install steps and elevation.

Steps never call ``sudo`` themselves: they hand a ``PrivilegedCommand``
to an injected ``PrivilegedExecutor`` and get back a ``CommandResult``.

The central contract is the split between two kinds of failure:

- elevation failed (no sudo, wrong password, prompt cancelled)
  → ``PrivilegedExecError`` is raised;
- elevation worked but the command exited non-zero
  → a ``CommandResult`` with that exit code is returned, and the
  calling step decides whether it matters.

Security invariants (carried over from the subprocess runner):
- Password piped via stdin only (``sudo -S``)
- Password never logged, never written to disk
- Password never appears in command args
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from abc import ABC, abstractmethod
from collections.abc import Callable

import click

from docker_prebuilt.core.errors import PrivilegedExecError
from docker_prebuilt.core.models.command import CommandResult, PrivilegedCommand

logger = logging.getLogger(__name__)

PromptFn = Callable[[str], str]


def _click_prompt(text: str) -> str:
    return click.prompt(text, hide_input=True, prompt_suffix=" ", err=True)


class PrivilegedExecutor(ABC):
    """Runs commands with elevated privilege.

    One executor instance is one credential session: it is shared by
    every privileged step of a single pipeline run and never reused
    across runs.
    """

    @abstractmethod
    def run(self, command: PrivilegedCommand) -> CommandResult:
        """Run ``command`` elevated.

        Returns:
            How the target command exited (non-zero is not an error here).

        Raises:
            PrivilegedExecError: elevation itself failed.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class SudoExecutor(PrivilegedExecutor):
    """Elevate through ``sudo -S``, prompting once per credential session.

    When ``command.cache_credential`` is true the password is kept in
    memory for the lifetime of this executor, so later steps reuse it
    without prompting again.
    """

    def __init__(
        self,
        *,
        prompt: PromptFn = _click_prompt,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        is_root: Callable[[], bool] | None = None,
    ) -> None:
        self._prompt = prompt
        self._runner = runner
        self._is_root = is_root or (lambda: os.geteuid() == 0)
        self._password: str | None = None

    @property
    def has_cached_credential(self) -> bool:
        return self._password is not None

    def forget(self) -> None:
        """Drop the cached credential."""
        self._password = None

    def run(self, command: PrivilegedCommand) -> CommandResult:
        args = command.args
        if not args:
            raise PrivilegedExecError("empty privileged command")

        if self._is_root():
            # already root, run directly
            logger.debug("Running as root: %s", command.display)
            return self._execute(args)

        if shutil.which("sudo") is None:
            raise PrivilegedExecError("sudo is not available on this host")

        password = self._credential(command)
        self._validate(password)

        logger.debug("sudo: %s", command.display)
        result = self._execute(
            ["sudo", "-S", "-k", "-p", "", "--", *args],
            stdin=password + "\n",
        )
        # Report the target command, not the sudo wrapper
        return result.model_copy(update={"argv": args})

    # ── internals ───────────────────────────────────────────────

    def _credential(self, command: PrivilegedCommand) -> str:
        if command.cache_credential and self._password is not None:
            return self._password

        try:
            password = self._prompt(command.prompt)
        except (click.Abort, EOFError, KeyboardInterrupt) as e:
            raise PrivilegedExecError("password prompt cancelled") from e

        if command.cache_credential:
            self._password = password
        return password

    def _validate(self, password: str) -> None:
        """Check the credential with ``sudo -v`` before running anything."""
        try:
            result = self._runner(
                ["sudo", "-S", "-k", "-p", "", "-v"],
                input=password + "\n",
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise PrivilegedExecError(f"could not run sudo: {e}") from e

        if result.returncode != 0:
            self.forget()
            detail = (result.stderr or "").strip() or f"exit {result.returncode}"
            raise PrivilegedExecError(f"sudo authentication failed: {detail}")

    def _execute(self, args: list[str], stdin: str | None = None) -> CommandResult:
        start = time.monotonic()
        try:
            result = self._runner(args, input=stdin, capture_output=True, text=True)
        except FileNotFoundError as e:
            return CommandResult(argv=args, returncode=127, stderr=str(e))
        except OSError as e:
            raise PrivilegedExecError(f"could not run {args[0]}: {e}") from e

        return CommandResult(
            argv=args,
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            duration_ms=int((time.monotonic() - start) * 1000),
        )
