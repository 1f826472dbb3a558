"""Command-line interface: argument parsing and command dispatch."""

from __future__ import annotations

import argparse
import sys
from importlib import metadata
from typing import Sequence

from .commands.add import cmd_add
from .commands.changelog import cmd_changelog
from .commands.config_cmd import cmd_config_get, cmd_config_list, cmd_config_set
from .commands.done import cmd_done
from .commands.init import cmd_init
from .commands.listing import cmd_list
from .commands.prune import cmd_prune
from .commands.remove import cmd_remove
from .commands.scan import cmd_scan
from .commands.semver import cmd_semver, cmd_tag
from .commands.status import cmd_status
from .version import Priority

_FALLBACK_VERSION = "0.5.2"

_DESCRIPTION = (
    "tally is a command-line task manager that uses TODO.md as its storage format.\n\n"
    "Track tasks, generate changelogs, and integrate with git commits for automatic "
    "task completion detection.\n\n"
    "EXAMPLES:\n"
    '  tally add "Fix parsing error" --priority high --tags bug,parser\n'
    '  tally done "Fix parsing error" --commit abc123f\n'
    "  tally list --tags bug\n"
    "  tally release v0.2.3 --summary"
)


def _program_version() -> str:
    try:
        return metadata.version("tally")
    except metadata.PackageNotFoundError:
        return _FALLBACK_VERSION


def _priority(text: str) -> Priority:
    try:
        return Priority.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _tag_list(text: str) -> list[str]:
    return text.split(",")


def _non_negative(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number {text!r}") from exc
    if not 0 <= value < 2**32:
        raise argparse.ArgumentTypeError(f"number out of range: {text!r}")
    return value


def _add_flag(parser: argparse.ArgumentParser, name: str, help_text: str) -> None:
    parser.add_argument(name, action="store_true", default=False, help=help_text)


def _subparser(subparsers, name: str, help_text: str, description: str):
    return subparsers.add_parser(
        name,
        help=help_text,
        description=description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )


def _add_parsers(subparsers) -> None:
    init = _subparser(subparsers, "init", "Initialize tally in the CWD", "Initialize tally in the CWD.")
    init.set_defaults(handler=lambda a: cmd_init())

    add = _subparser(
        subparsers,
        "add",
        "Add a new task",
        "Add a new task to TODO.md.\n\n"
        "Creates a task with optional priority and tags. Use --dry-run to preview "
        "the task before adding it.",
    )
    add.add_argument("description", help="Text of the task to add")
    add.add_argument(
        "-p", "--priority", type=_priority, default=Priority.MEDIUM,
        help="Priority level for the task (low, medium, high)",
    )
    add.add_argument(
        "-t", "--tags", type=_tag_list, action="extend", default=None,
        help="Comma-separated tags (e.g., bug,frontend)",
    )
    _add_flag(add, "--dry-run", "Show what would be added without modifying TODO.md")
    _add_flag(add, "--auto", "Automatically commit TODO.md after adding a task")
    add.set_defaults(
        handler=lambda a: cmd_add(a.description, a.priority, a.tags, a.dry_run, a.auto)
    )

    done = _subparser(
        subparsers,
        "done",
        "Mark a task as completed",
        "Mark a task as completed in TODO.md.\n\n"
        "Fuzzy-matches the description against existing tasks and marks the match "
        "as done. Optionally associate a git commit or version.",
    )
    done.add_argument("description", help="Text to fuzzy-match against existing tasks")
    done.add_argument("-c", "--commit", default=None, help="Git commit hash associated with completion")
    done.add_argument("-v", "--version", default=None, help="Release version (e.g., v0.2.3)")
    _add_flag(done, "--dry-run", "Show changes without writing to TODO.md")
    _add_flag(done, "--auto", "Automatically commit TODO.md after completing task")
    done.set_defaults(
        handler=lambda a: cmd_done(a.description, a.commit, a.version, a.dry_run, a.auto)
    )

    listing = _subparser(
        subparsers,
        "list",
        "Display tasks",
        "Display tasks with optional filtering and formatting.\n\n"
        "View all tasks, or filter by tags or priority. "
        "Output as human-readable text or raw JSON.",
    )
    listing.add_argument(
        "-t", "--tags", type=_tag_list, action="extend", default=None,
        help="Filter by tags (comma-separated)",
    )
    listing.add_argument("-p", "--priority", type=_priority, default=None, help="Filter by priority level")
    _add_flag(listing, "--json", "Output in JSON format")
    listing.set_defaults(handler=lambda a: cmd_list(a.tags, a.priority, a.json))

    semver = _subparser(
        subparsers,
        "semver",
        "Assign version to completed tasks",
        "Assign a version to all completed tasks without a version.\n\n"
        "Additionally sets the project version in the TODO list itself.",
    )
    semver.add_argument("version", help="Version string to assign (e.g., v0.2.3)")
    _add_flag(semver, "--dry-run", "Show what would be assigned without modifying tasks")
    _add_flag(semver, "--summary", "Show number of tasks assigned to this version")
    _add_flag(semver, "--auto", "Automatically commit TODO.md after setting version")
    semver.set_defaults(
        handler=lambda a: cmd_semver(a.version, a.dry_run, a.summary, a.auto)
    )

    tag = _subparser(
        subparsers,
        "tag",
        "Release and create a git tag",
        "Assign a version to completed tasks and create a git tag.\n\n"
        "The tag name will always be prefixed with 'v' if not already.",
    )
    tag.add_argument("version", help="Version string (e.g., v0.2.3)")
    tag.add_argument("-m", "--message", default=None, help="Custom tag message")
    _add_flag(tag, "--dry-run", "Show what would happen without making changes")
    _add_flag(tag, "--summary", "Show tasks assigned to this version")
    _add_flag(tag, "--auto", "Automatically commit TODO.md after semver")
    tag.set_defaults(
        handler=lambda a: cmd_tag(a.version, a.message, a.dry_run, a.summary, a.auto)
    )

    changelog = _subparser(
        subparsers,
        "changelog",
        "Generate a changelog",
        "Generate a changelog from completed tasks.\n\n"
        "Create a changelog for a version range or until the current version.",
    )
    changelog.add_argument("--from", dest="start", default=None, help="Start version")
    changelog.add_argument("--to", dest="end", default=None, help="End version")
    changelog.set_defaults(handler=lambda a: cmd_changelog(a.start, a.end))

    remove = _subparser(
        subparsers,
        "remove",
        "Remove a task entirely",
        "Remove a task from TODO.md.\n\n"
        "Fuzzy-matches the description. If the task is completed, it will be "
        "saved to history.json before removal so it still appears in changelogs.",
    )
    remove.add_argument("description", help="Text to fuzzy-match against existing tasks")
    _add_flag(remove, "--dry-run", "Show what would be removed without modifying TODO.md")
    _add_flag(remove, "--auto", "Automatically commit TODO.md after removing a task")
    remove.set_defaults(handler=lambda a: cmd_remove(a.description, a.dry_run, a.auto))

    prune = _subparser(
        subparsers,
        "prune",
        "Prune old completed tasks",
        "Remove completed tasks older than a threshold (default: 30 days).\n\n"
        "Pruned tasks are saved to history.json before removal so they "
        "still appear in changelogs. Days and hours combine if both are given.",
    )
    prune.add_argument("--days", type=_non_negative, default=None, help="Number of days")
    prune.add_argument("--hours", type=_non_negative, default=None, help="Number of hours")
    _add_flag(prune, "--dry-run", "Show what would be pruned without modifying TODO.md")
    _add_flag(prune, "--auto", "Automatically commit TODO.md after pruning tasks")
    prune.set_defaults(
        handler=lambda a: cmd_prune(a.days, a.hours, a.dry_run, a.auto)
    )

    scan = _subparser(
        subparsers,
        "scan",
        "Detect completed tasks from git commits",
        "Scan git commit messages to automatically detect completed tasks.\n\n"
        "Uses fuzzy matching to find tasks that may have been completed based on "
        "commit messages. Can run automatically or prompt for confirmation.",
    )
    _add_flag(scan, "--auto", "Automatically mark matches as done without prompting")
    _add_flag(scan, "--dry-run", "Show suggested matches without modifying TODO.md")
    scan.set_defaults(handler=lambda a: cmd_scan(a.auto, a.dry_run))

    config = _subparser(
        subparsers,
        "config",
        "Manage preferences",
        "View and modify tally configuration.",
    )
    actions = config.add_subparsers(dest="action", metavar="ACTION", required=True)
    config_set = actions.add_parser("set", help="Set a configuration value")
    config_set.add_argument("key", help="Configuration key")
    config_set.add_argument("value", help="Configuration value")
    config_set.set_defaults(handler=lambda a: cmd_config_set(a.key, a.value))
    config_get = actions.add_parser("get", help="Get a configuration value")
    config_get.add_argument("key", help="Configuration key to retrieve")
    config_get.set_defaults(handler=lambda a: cmd_config_get(a.key))
    config_list = actions.add_parser("list", help="List all configuration keys and values")
    config_list.set_defaults(handler=lambda a: cmd_config_list())

    status = _subparser(
        subparsers,
        "status",
        "Display a summary for all tasks",
        "Display a summary dashboard of your project's tasks.",
    )
    status.set_defaults(handler=lambda a: cmd_status())


def build_parser() -> argparse.ArgumentParser:
    """Build the ``tally`` argument parser with all its subcommands."""
    parser = argparse.ArgumentParser(
        prog="tally",
        description=_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"tally {_program_version()}"
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)
    _add_parsers(subparsers)
    return parser


def _error_chain(error: BaseException) -> str:
    messages = [str(error)]
    cause = error.__cause__
    while cause is not None:
        text = str(cause)
        if text and not any(text in seen for seen in messages):
            messages.append(text)
        cause = cause.__cause__
    return "\n".join(messages)


def _report(message: str) -> None:
    if sys.stderr.isatty():
        message = f"\x1b[31m{message}\x1b[0m"
    print(message, file=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return 0 on success and 1 on failure."""
    args = build_parser().parse_args(argv)
    try:
        args.handler(args)
    except Exception as error:  # noqa: BLE001 - every failure is reported the same way
        _report(_error_chain(error))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())