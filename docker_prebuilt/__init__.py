"""
docker-prebuilt — install a prebuilt Docker release onto a Linux host.

The package version doubles as the default Docker version to install
(any ``-prerelease`` suffix is dropped when the target is resolved).
"""

__version__ = "1.10.0"
