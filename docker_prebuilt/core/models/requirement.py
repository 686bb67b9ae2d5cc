"""
Requirement models — host tools the runtime depends on.

Each tool prints ``--version`` differently, so every requirement carries
a ``VersionRule`` describing how to pull the version out of that output.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class VersionRule(BaseModel):
    """How to extract a version string from raw command output.

    Two kinds:
        - ``field``: trim, split on whitespace, take ``index``.
        - ``regex``: take capture group 1 of ``pattern``.

    ``first_line`` restricts the input to the first output line and
    ``strip`` removes qualifier substrings (``alpha``, ``beta``, ``v``)
    from the result.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["field", "regex"] = "field"
    index: int = 0
    pattern: str = ""
    first_line: bool = False
    strip: tuple[str, ...] = ()

    @model_validator(mode="after")
    def check_kind(self) -> VersionRule:
        if self.kind == "regex" and not self.pattern:
            raise ValueError("regex rule requires a 'pattern'")
        if self.kind == "field" and self.index < 0:
            raise ValueError("field rule requires a non-negative 'index'")
        return self

    @classmethod
    def field(cls, index: int, *, first_line: bool = False, strip: tuple[str, ...] = ()) -> VersionRule:
        return cls(kind="field", index=index, first_line=first_line, strip=strip)

    @classmethod
    def regex(cls, pattern: str, *, strip: tuple[str, ...] = ()) -> VersionRule:
        return cls(kind="regex", pattern=pattern, strip=strip)


class Requirement(BaseModel):
    """A host binary that must be at least ``min_version`` when present."""

    model_config = ConfigDict(frozen=True)

    binary: str
    min_version: str
    rule: VersionRule = Field(default_factory=VersionRule)
    args: tuple[str, ...] = ("--version",)

    @property
    def command(self) -> list[str]:
        return [self.binary, *self.args]
