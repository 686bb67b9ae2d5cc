"""
Adapters — the installer's boundary with privileged host operations.

    from docker_prebuilt.adapters.privileged import PrivilegedExecutor, SudoExecutor
    from docker_prebuilt.adapters.mock import MockExecutor
"""
