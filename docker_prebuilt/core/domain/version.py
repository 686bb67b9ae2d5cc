"""
Domain — dotted version parsing and comparison (pure).

Versions of unequal length compare after right-padding the shorter one
with zeros, so a kernel reporting ``3.10`` meets a ``3.10.0`` minimum.
No I/O, no subprocess.
"""

from __future__ import annotations

from enum import IntEnum

from docker_prebuilt.core.errors import MalformedVersion


class Ordering(IntEnum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


def parse_version(version: str) -> tuple[int, ...]:
    """Split a dotted string into integer segments.

    Raises:
        MalformedVersion: on an empty string or any non-numeric segment.
    """
    text = version.strip()
    if not text:
        raise MalformedVersion("empty version string")

    parts: list[int] = []
    for segment in text.split("."):
        if not (segment.isascii() and segment.isdigit()):
            raise MalformedVersion(f"malformed version {version!r}: bad segment {segment!r}")
        parts.append(int(segment))
    return tuple(parts)


def pad(parts: tuple[int, ...], length: int) -> tuple[int, ...]:
    """Right-pad with zeros up to ``length``. Never truncates."""
    return parts + (0,) * max(0, length - len(parts))


def compare(a: str, b: str) -> Ordering:
    """Compare two dotted version strings.

    >>> compare("3.10", "3.10.0")
    <Ordering.EQUAL: 0>
    """
    pa, pb = parse_version(a), parse_version(b)
    width = max(len(pa), len(pb))
    pa, pb = pad(pa, width), pad(pb, width)
    if pa < pb:
        return Ordering.LESS
    if pa > pb:
        return Ordering.GREATER
    return Ordering.EQUAL


def is_at_least(version: str, minimum: str) -> bool:
    return compare(version, minimum) != Ordering.LESS
