"""
Marker file persistence — where the extracted executable lives.

``<install_root>/path.txt`` records the platform-specific path of the
extracted executable directory, relative to the install root.
Writes are atomic (write to temp file, then rename).
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

MARKER_FILE = "path.txt"


def marker_path(install_root: Path) -> Path:
    return install_root / MARKER_FILE


def write_marker(install_root: Path, relative_path: str) -> Path:
    """Record ``relative_path`` in the marker file (atomic write).

    Returns:
        Path of the marker file.
    """
    path = marker_path(install_root)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".path_", suffix=".tmp")
    tmp = Path(tmp_path)
    try:
        with open(fd, "w", encoding="utf-8") as f:
            f.write(relative_path)
        tmp.replace(path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise

    logger.debug("Marker %s -> %s", path, relative_path)
    return path


def read_marker(install_root: Path) -> str | None:
    """Return the recorded relative path, or ``None`` if there is none."""
    path = marker_path(install_root)
    if not path.is_file():
        return None
    try:
        value = path.read_text(encoding="utf-8").strip()
    except OSError as e:
        logger.warning("Cannot read marker %s: %s", path, e)
        return None
    return value or None
