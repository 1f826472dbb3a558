"""Rendering changelogs as markdown and JSON."""

from __future__ import annotations

import json
from datetime import datetime, timezone

from .changes import Change, Log, Release
from .version import Priority

_SECTIONS = (
    (Priority.HIGH, "High Priority"),
    (Priority.MEDIUM, "Changes"),
    (Priority.LOW, "Minor Changes"),
)


def _format_date(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d")


def _change_line(change: Change) -> str:
    tags = f" `{'`, `'.join(change.tags)}`" if change.tags else ""
    commit = f" ([`{change.commit[:7]}`])" if change.commit is not None else ""
    return f"- {change.description}{tags}{commit}\n"


def _release_to_markdown(release: Release) -> str:
    parts = [f"## {release.version} — {_format_date(release.date)}\n\n"]
    for priority, section_name in _SECTIONS:
        changes = release.changes_by_priority.get(priority)
        if changes:
            parts.append(f"### {section_name}\n\n")
            parts.extend(_change_line(change) for change in changes)
            parts.append("\n")
    return "".join(parts)


def to_markdown(changelog: Log) -> str:
    """Render a changelog as markdown, releases in the order given."""
    parts = [
        f"# Changelog — {changelog.project_name}\n\n",
        f"*Generated on {_format_date(changelog.generated_at)}*\n\n",
    ]
    for release in changelog.releases:
        parts.append(_release_to_markdown(release))
        parts.append("\n")
    return "".join(parts)


def to_json(changelog: Log) -> str:
    """Render a changelog as pretty-printed JSON."""
    return json.dumps(changelog.to_dict(), indent=2, ensure_ascii=False)