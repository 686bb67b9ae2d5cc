"""
Services — archive extraction.

Unpacks the release tarball as a stream (read, decompress, unpack)
without loading it into memory. Compression is auto-detected, so
plain and gzipped tarballs both work. After extraction the marker
file records where the executable landed.
"""

from __future__ import annotations

import logging
import tarfile
from pathlib import Path

from docker_prebuilt.core.errors import ExtractError
from docker_prebuilt.core.persistence.marker import write_marker

logger = logging.getLogger(__name__)


def extract(archive_path: Path, destination_dir: Path) -> int:
    """Unpack ``archive_path`` into ``destination_dir``.

    Returns:
        Number of members extracted.

    Raises:
        ExtractError: the archive is corrupt, truncated, not a tarball,
            or could not be written out.
    """
    count = 0
    try:
        destination_dir.mkdir(parents=True, exist_ok=True)
        with open(archive_path, "rb") as raw:
            # "r|*" = forward-only stream with transparent decompression
            with tarfile.open(fileobj=raw, mode="r|*") as tf:
                for member in tf:
                    tf.extract(member, destination_dir, filter="data")
                    count += 1
    except (tarfile.TarError, EOFError, OSError) as e:
        raise ExtractError(f"could not extract {archive_path}: {e}") from e

    if count == 0:
        raise ExtractError(f"archive {archive_path} is empty")

    logger.debug("Extracted %d entries from %s into %s", count, archive_path, destination_dir)
    return count


def install_archive(
    archive_path: Path,
    install_root: Path,
    extract_path: str,
) -> Path:
    """Extract the release under ``install_root`` and record the executable path.

    ``extract_path`` is the platform-specific location of the executable
    directory relative to ``install_root`` (e.g. ``dist/docker``); its
    first component is the extraction directory.

    Returns:
        Absolute path of the extracted executable directory.
    """
    relative = Path(extract_path)
    extract_root = install_root / relative.parts[0]

    logger.info("Extracting %s", archive_path)
    extract(archive_path, extract_root)

    binary_dir = install_root / relative
    if not binary_dir.is_dir():
        raise ExtractError(f"archive did not contain {extract_path}")

    try:
        write_marker(install_root, relative.as_posix())
    except OSError as e:
        raise ExtractError(f"could not record install path under {install_root}: {e}") from e
    return binary_dir
