"""Task contracts executed by the hook runner.

Two capability sets exist. File tasks run once per matching staged entry;
repo tasks run once over all matching entries. Every task declares its
``kind`` explicitly and the runner routes on it instead of on class hierarchy.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum
from typing import Protocol, runtime_checkable

from commit_gate.hooks.models import RepoEntry
from commit_gate.hooks.results import TaskResult


class TaskKind(str, Enum):
    """Capability set of a task."""

    FILE = "file"
    REPO = "repo"


@runtime_checkable
class FileTask(Protocol):
    """Task applied to one staged entry at a time."""

    kind: TaskKind
    task_name: str
    file_pattern: re.Pattern[str]

    def __call__(self, entry: RepoEntry) -> TaskResult:
        """Check or fix ``entry``; rewriting the file means returning ``MODIFIED``."""
        raise NotImplementedError


@runtime_checkable
class RepoTask(Protocol):
    """Task applied once to every matching staged entry together."""

    kind: TaskKind
    task_name: str
    file_pattern: re.Pattern[str]
    call_for_empty_entries: bool

    def __call__(self, entries: list[RepoEntry]) -> TaskResult:
        """Return one verdict for the whole filtered entry set."""
        raise NotImplementedError


Task = FileTask | RepoTask


def task_kind(task: object) -> TaskKind:
    kind = getattr(task, "kind", None)
    if not isinstance(kind, TaskKind):
        raise TypeError(f"Task {task!r} does not declare a valid TaskKind: {kind!r}")
    return kind


def file_tasks(tasks: Iterable[object]) -> list[FileTask]:
    return [task for task in tasks if task_kind(task) is TaskKind.FILE]  # type: ignore[misc]


def repo_tasks(tasks: Iterable[object]) -> list[RepoTask]:
    return [task for task in tasks if task_kind(task) is TaskKind.REPO]  # type: ignore[misc]


def can_process(task: FileTask | RepoTask, entry: RepoEntry) -> bool:
    """Pattern gate: anchored at the start of the POSIX path."""

    return task.file_pattern.match(entry.posix_path) is not None
