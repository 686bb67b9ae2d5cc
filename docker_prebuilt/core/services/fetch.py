"""
Services — prebuilt archive download.

Resolves the release URL for the host (architecture and platform
naming differ between the host and the release server) and downloads
the archive into the install cache. A complete archive already in the
cache is reused, so re-running with the same target downloads nothing.
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from collections.abc import Callable
from pathlib import Path

from docker_prebuilt import __version__
from docker_prebuilt.core.errors import DownloadError
from docker_prebuilt.core.models.host import HostProfile
from docker_prebuilt.core.models.target import InstallTarget

logger = logging.getLogger(__name__)

_ARCH_ALIASES = {
    "ia32": "i386",
    "x64": "x86_64",
}

USER_AGENT = f"docker-prebuilt/{__version__}"
CHUNK_SIZE = 8192
DOWNLOAD_TIMEOUT = 60

Transport = Callable[[str, Path], None]


def _fmt_size(n: int | float) -> str:
    """Format byte count to human-readable string."""
    for unit in ("B", "KB", "MB", "GB"):
        if n < 1024:
            return f"{n:.1f} {unit}"
        n /= 1024
    return f"{n:.1f} TB"


def map_arch(arch: str) -> str:
    """Translate a host architecture alias to the release server's token."""
    return _ARCH_ALIASES.get(arch, arch)


def map_platform(platform: str) -> str:
    """Release server directories use the capitalized platform name."""
    return platform.capitalize()


def resolve_url(target: InstallTarget, profile: HostProfile) -> str:
    """Fill the target's URL template for this host."""
    # No architecture when uname failed; the gate only admits x86_64 hosts
    arch = map_arch(profile.architecture or "x86_64")
    return target.url.format(
        name=target.name,
        version=target.version,
        platform=map_platform(profile.platform),
        arch=arch,
        filename=target.archive_name,
    )


def download_file(url: str, dest: Path) -> None:
    """Stream ``url`` into ``dest``.

    Writes to ``<dest>.part`` and renames on completion so an
    interrupted download never looks like a cached archive.

    Raises:
        DownloadError: on any HTTP or network failure.
    """
    part = dest.with_name(dest.name + ".part")
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DownloadError(f"cannot create download directory {dest.parent}: {e}") from e

    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    try:
        with urllib.request.urlopen(req, timeout=DOWNLOAD_TIMEOUT) as resp:
            total = int(resp.headers.get("Content-Length", 0) or 0)
            downloaded = 0
            last_progress = -1
            with open(part, "wb") as f:
                while True:
                    chunk = resp.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    f.write(chunk)
                    downloaded += len(chunk)

                    # Progress tracking (log every 10%)
                    if total > 0:
                        pct = int(downloaded * 100 / total)
                        if pct >= last_progress + 10:
                            last_progress = pct
                            logger.info(
                                "Download progress: %d%% (%s / %s)",
                                pct, _fmt_size(downloaded), _fmt_size(total),
                            )
        part.replace(dest)
    except urllib.error.HTTPError as e:
        part.unlink(missing_ok=True)
        raise DownloadError(f"HTTP {e.code} fetching {url}") from e
    except (urllib.error.URLError, OSError) as e:
        part.unlink(missing_ok=True)
        raise DownloadError(f"Download failed for {url}: {e}") from e

    logger.info("Downloaded %s to %s", _fmt_size(downloaded), dest)


def fetch(
    target: InstallTarget,
    profile: HostProfile,
    *,
    cache_dir: Path | None = None,
    transport: Transport = download_file,
) -> Path:
    """Return a local path to the release archive, downloading if needed.

    Raises:
        DownloadError: the archive could not be retrieved.
    """
    url = resolve_url(target, profile)
    dest = (cache_dir or target.cache_dir) / target.archive_name

    if dest.is_file() and dest.stat().st_size > 0:
        logger.info("Using cached archive %s", dest)
        return dest

    logger.info("Downloading %s", url)
    transport(url, dest)

    if not dest.is_file():
        raise DownloadError(f"Download of {url} produced no file at {dest}")
    return dest
