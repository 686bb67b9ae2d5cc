"""
Services — daemon and service-supervisor reconciliation.

Stops any running daemon, then, on hosts with a systemd unit
directory, installs the bundled unit files and restarts the service.
Hosts without one are left alone.
"""

from __future__ import annotations

import logging
from pathlib import Path

from docker_prebuilt.adapters.privileged import PrivilegedExecutor
from docker_prebuilt.core.errors import CommandFailed
from docker_prebuilt.core.models.command import PrivilegedCommand
from docker_prebuilt.core.models.target import InstallTarget
from docker_prebuilt.data import UNIT_DIR

logger = logging.getLogger(__name__)


def _privileged(argv: tuple[str, ...], prompt: str) -> PrivilegedCommand:
    return PrivilegedCommand(argv=argv, prompt=prompt, cache_credential=True)


def stop_daemon(process: str, executor: PrivilegedExecutor) -> bool:
    """Terminate a running daemon.

    ``killall`` exits non-zero when nothing matched; that is the
    normal case on a fresh host and not an error.

    Returns:
        True if a running daemon was signalled.
    """
    result = executor.run(_privileged(
        ("killall", process),
        f"Enter sudo password to kill {process} daemon:",
    ))
    if result.ok:
        logger.info("Stopped running %s daemon", process)
        return True

    logger.info("No running %s daemon to stop (%s)", process, result.stderr.strip() or f"exit {result.returncode}")
    return False


def unit_files(unit_dir: Path = UNIT_DIR) -> list[Path]:
    """Bundled systemd unit definitions."""
    return sorted(p for p in unit_dir.iterdir() if p.suffix in (".service", ".socket"))


def register_service(
    target: InstallTarget,
    executor: PrivilegedExecutor,
    unit_dir: Path = UNIT_DIR,
) -> bool:
    """Install unit files and restart the service under systemd.

    Returns:
        False when the host has no supervisor directory (skipped).

    Raises:
        CommandFailed: copying the units or restarting the service failed.
    """
    if not target.supervisor_dir.is_dir():
        logger.debug("No supervisor directory at %s, skipping service setup", target.supervisor_dir)
        return False

    units = unit_files(unit_dir)
    prompt = f"Enter sudo password to register the {target.service_name} service:"
    steps = [
        ("cp", *(str(u) for u in units), str(target.supervisor_dir)),
        ("systemctl", "daemon-reload"),
        ("systemctl", "restart", target.service_name),
    ]
    for argv in steps:
        result = executor.run(_privileged(argv, prompt))
        if not result.ok:
            raise CommandFailed(f"service setup step '{' '.join(argv[:2])}' failed", result)

    logger.info("Registered %s with systemd (%s)", target.service_name, ", ".join(u.name for u in units))
    return True


def reconcile(
    target: InstallTarget,
    executor: PrivilegedExecutor,
    unit_dir: Path = UNIT_DIR,
) -> bool:
    """Stop the daemon, then (re)register it with the supervisor if present.

    Returns:
        True if the service was registered with the supervisor.
    """
    stop_daemon(target.daemon_process, executor)
    return register_service(target, executor, unit_dir)
