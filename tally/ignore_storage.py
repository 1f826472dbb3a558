"""Rules in .tally/ignore that keep tasks out of commit scans."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable


class _RuleKind(Enum):
    SUBSTRING = "substring"
    GLOB = "glob"
    TAG = "tag"


@dataclass(frozen=True)
class _IgnoreRule:
    kind: _RuleKind
    pattern: str

    @classmethod
    def parse(cls, line: str) -> _IgnoreRule:
        if line.startswith("#"):
            return cls(_RuleKind.TAG, line[1:].lower())
        if "*" in line:
            return cls(_RuleKind.GLOB, line.lower())
        return cls(_RuleKind.SUBSTRING, line.lower())

    def matches(self, description: str, tags: list[str]) -> bool:
        if self.kind is _RuleKind.SUBSTRING:
            return self.pattern in description
        if self.kind is _RuleKind.GLOB:
            return glob_match(self.pattern, description)
        return any(tag.lower() == self.pattern for tag in tags)


def glob_match(pattern: str, text: str) -> bool:
    """Match ``text`` against ``pattern`` where ``*`` stands for any run of characters."""
    parts = pattern.split("*")
    if len(parts) == 1:
        return text == pattern

    pos = 0
    for i, part in enumerate(parts):
        if not part:
            continue
        idx = text.find(part, pos)
        if idx < 0:
            return False
        if i == 0 and idx != pos:
            return False
        pos = idx + len(part)

    if not pattern.endswith("*"):
        return pos == len(text)
    return True


class IgnoreStorage:
    """A set of ignore rules: substrings, ``*`` globs and ``#tag`` rules."""

    def __init__(self, rules: Iterable[_IgnoreRule] = ()) -> None:
        self._rules = list(rules)

    @classmethod
    def load(cls, ignore_file: str | Path) -> IgnoreStorage:
        """Read rules from a file; a missing or unreadable file gives no rules."""
        try:
            content = Path(ignore_file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return cls()
        lines = (line.strip() for line in content.splitlines())
        return cls(
            _IgnoreRule.parse(line)
            for line in lines
            if line and not line.startswith("#")
        )

    def __len__(self) -> int:
        return len(self._rules)

    def is_ignored(self, description: str, tags: Iterable[str]) -> bool:
        """True if any rule matches the description or one of the tags."""
        lowered = description.lower()
        tag_list = list(tags)
        return any(rule.matches(lowered, tag_list) for rule in self._rules)