"""
Services — group membership for the invoking user.
"""

from __future__ import annotations

import getpass
import logging
import os

from docker_prebuilt.adapters.privileged import PrivilegedExecutor
from docker_prebuilt.core.errors import CommandFailed
from docker_prebuilt.core.models.command import PrivilegedCommand

logger = logging.getLogger(__name__)

# groupadd: "group already exists"
_GROUPADD_EXISTS = 9


def current_username() -> str:
    """The human behind the install, even when run under sudo."""
    return os.environ.get("SUDO_USER") or getpass.getuser()


def provision(username: str, group: str, executor: PrivilegedExecutor) -> None:
    """Ensure ``group`` exists and ``username`` belongs to it.

    Raises:
        CommandFailed: the group could not be created or the user added.
        PrivilegedExecError: elevation failed.
    """
    prompt = f"Enter sudo password to add user to {group} group:"

    created = executor.run(PrivilegedCommand(argv=("groupadd", "-f", group), prompt=prompt))
    if not created.ok and created.returncode != _GROUPADD_EXISTS:
        raise CommandFailed(f"could not create group {group}", created)

    added = executor.run(PrivilegedCommand(argv=("usermod", "-aG", group, username), prompt=prompt))
    if not added.ok:
        raise CommandFailed(f"could not add {username} to group {group}", added)

    logger.info("User %s is a member of %s", username, group)
