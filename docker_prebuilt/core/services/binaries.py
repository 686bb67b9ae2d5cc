"""
Services — copy extracted binaries into the system binary directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

from docker_prebuilt.adapters.privileged import PrivilegedExecutor
from docker_prebuilt.core.errors import CommandFailed, ExtractError
from docker_prebuilt.core.models.command import PrivilegedCommand

logger = logging.getLogger(__name__)


def install_binaries(
    binary_dir: Path,
    bin_dir: Path,
    executor: PrivilegedExecutor,
) -> list[str]:
    """Copy every file in ``binary_dir`` into ``bin_dir`` (privileged).

    Returns:
        Names of the installed files.

    Raises:
        ExtractError: nothing was extracted to copy.
        CommandFailed: ``cp`` exited non-zero.
        PrivilegedExecError: elevation failed.
    """
    try:
        files = sorted(p for p in binary_dir.iterdir() if p.is_file())
    except OSError as e:
        raise ExtractError(f"cannot read extracted binaries in {binary_dir}: {e}") from e
    if not files:
        raise ExtractError(f"no binaries found in {binary_dir}")

    command = PrivilegedCommand(
        argv=("cp", *(str(p) for p in files), str(bin_dir)),
        prompt=f"Enter sudo password to copy binaries to {bin_dir}:",
        cache_credential=True,
    )
    result = executor.run(command)
    if not result.ok:
        raise CommandFailed(f"could not copy binaries to {bin_dir}", result)

    names = [p.name for p in files]
    logger.info("Installed %s into %s", ", ".join(names), bin_dir)
    return names
