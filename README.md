# tally

A command-line task manager that keeps its tasks in a plain `TODO.md` file.
It tracks tasks, assigns completed work to versions, generates Markdown
changelogs, and reads git commit messages to spot tasks you have already
finished.

## Installation

```
pip install .
```

This installs the `tally` command. `tally --version` prints the installed
version.

## Getting started

Run this inside your project directory:

```
tally init
```

It creates a `.tally/` directory (with an empty `history.json` and an empty
`hooks/` directory) and a `TODO.md` named after the directory, at version
`0.1.0`. Every other command looks for `.tally/` in the current directory
or any directory above it.

## Everyday use

```
tally add "Fix parsing error" --priority high --tags bug,parser
tally list
tally list --tags bug --priority high
tally list --json
tally done "parsing error" --commit abc123f
tally remove "old task" --dry-run
tally status
```

- `add` takes `--priority low|medium|high` (default `medium`) and
  comma-separated `--tags`.
- `list` shows tasks numbered from 1; `--tags` keeps tasks having any of the
  given tags, `--priority` keeps one priority, `--json` prints the tasks as
  JSON.
- `done` fuzzy-matches your text against the open tasks and completes the
  best match, optionally recording `--commit` and `--version`.
- `remove` fuzzy-matches against all tasks and removes the best match if it
  scores high enough. A completed task is saved to `.tally/history.json`
  first.
- `status` shows overall progress, open tasks by priority and the ten most
  used tags.

`add`, `done`, `remove`, `prune` and `semver` accept `--dry-run` to preview
the change, and `--auto` to commit `TODO.md` and `.tally/history.json` to
git afterwards.

## Versions, releases and changelogs

```
tally semver v0.2.3 --summary
tally tag v0.2.3 --message "First stable release"
tally changelog --from v0.2.2 --to v0.2.3
```

`semver` sets the project version and assigns it to every completed task
that has none, both in `TODO.md` and in the history. `tag` does the same and
then creates an annotated git tag, prefixed with `v` if it is not already;
the default message is `Release <tag>`. `changelog` prints a Markdown
changelog built from `.tally/history.json`, newest release first, so pruned
or removed tasks still appear. Versions are written `MAJOR[.MINOR[.PATCH]]`
with an optional leading `v`.

## Cleaning up

```
tally prune                      # completed tasks older than 30 days
tally prune --days 7
tally prune --days 1 --hours 12
```

Pruned tasks are saved to the history first.

## Finding finished work in git

Write a section like this in a commit message:

```
done:
- Fix parsing error
- Update docs
```

The section ends at a blank line or at the next line ending in `:`. Then
run:

```
tally scan
tally scan --auto
tally scan --dry-run
```

`scan` reads the last 50 commits, fuzzy-matches their finished items against
open tasks created before the commit, and asks for each match whether to
mark it done (`--auto` accepts them all). Tasks matched by a rule in
`.tally/ignore` are skipped: a line such as `#wip` ignores a tag, a line
with `*` is a wildcard pattern on the description, and any other line
ignores descriptions containing that text (all case-insensitive).

## Configuration

```
tally config list
tally config get git.done_prefix
tally config set preferences.auto_commit_todo true
```

Settings are read from `.tally/config.toml` if present, otherwise from
`tally/config.toml` in the user configuration directory; the file is written
with defaults if it does not exist.

- `preferences.auto_commit_todo` — commit after every change (default `false`)
- `preferences.auto_complete_tasks` — accept `scan` matches without asking (default `false`)
- `git.done_prefix` — line that starts the finished-work section of a commit message (default `done:`)

`config set` reads the value as a TOML literal where it can (`true`,
`42`, `"text"`) and as plain text otherwise. `config get` prints string
values only; use `config list` to see the others.

## Using it from Python

The pieces behind the command are importable: `tally.todo_format`
(`serialize`, `deserialize`) reads and writes `TODO.md`,
`tally.task_storage.ListStorage` and `tally.history_storage.HistoryStorage`
manage the project files, `tally.changelog_format` (`to_markdown`,
`to_json`) renders changelogs, and `tally.cli.main(argv)` runs the command
line and returns its exit code.

## What it does not do

`tally init` does not install git hooks or change the git configuration:
the `.tally/hooks/` directory is created but stays empty, so commits do not
complete tasks on their own. Run `tally scan` to pick up finished work from
commit messages.