"""Task tracking in TODO.md with versions, changelogs and git commit scanning."""

__version__ = "0.5.2"