"""Semantic versions and task priorities."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering

_U32_MAX = 2**32 - 1
_NUMBER = re.compile(r"\+?[0-9]+")


def _parse_component(text: str, name: str) -> int:
    if not _NUMBER.fullmatch(text):
        raise ValueError(f"Invalid {name}")
    value = int(text)
    if value > _U32_MAX:
        raise ValueError(f"Invalid {name}")
    return value


@total_ordering
@dataclass(frozen=True)
class Version:
    """A major.minor.patch version; a prerelease sorts before its release."""

    major: int
    minor: int
    patch: int
    is_prerelease: bool = False

    def _key(self) -> tuple[int, int, int, bool]:
        return (self.major, self.minor, self.patch, not self.is_prerelease)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        return f"{text}-pre" if self.is_prerelease else text

    def is_newer_than(self, other: Version) -> bool:
        """Return True if this version sorts strictly after ``other``."""
        return self._key() > other._key()

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse ``[v]MAJOR[.MINOR[.PATCH]]``; missing parts default to 0."""
        stripped = text.strip()
        if not stripped:
            raise ValueError("Cannot parse empty version")
        if stripped[0] in "vV":
            stripped = stripped[1:]
        parts = stripped.split(".")
        if len(parts) > 3:
            raise ValueError("Invalid version format")
        numbers = [
            _parse_component(part, name)
            for part, name in zip(parts, ("major", "minor", "patch"))
        ]
        numbers.extend([0] * (3 - len(numbers)))
        return cls(*numbers, is_prerelease=False)


@total_ordering
class Priority(Enum):
    """Task priority, ordered low < medium < high."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def _rank(self) -> int:
        return list(type(self)).index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Priority):
            return NotImplemented
        return self._rank < other._rank

    def __str__(self) -> str:
        return self.value.lower()

    @classmethod
    def parse(cls, text: str) -> Priority:
        """Parse a priority name such as ``high``, case-insensitively."""
        wanted = text.strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        raise ValueError(
            f"invalid priority {text!r} (expected low, medium or high)"
        )