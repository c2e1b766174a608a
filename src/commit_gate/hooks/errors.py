"""Unrecoverable task failures.

Expected outcomes (accepted/modified/rejected) are ``TaskResult`` values and
never raised. Everything in this module aborts the whole run.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from commit_gate.hooks.models import RepoEntry


class TaskError(Exception):
    """A task could not complete; attributed to the task and entry that failed."""

    def __init__(
        self,
        message: str,
        *,
        task_name: str | None = None,
        entry: RepoEntry | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.task_name = task_name
        self.entry = entry

    def __str__(self) -> str:
        prefix = ""
        if self.task_name is not None:
            prefix = f"[{self.task_name}] "
        if self.entry is not None:
            prefix = f"{prefix}{self.entry.posix_path}: "
        return f"{prefix}{self.message}"


class ProcessError(TaskError):
    """External program failed to start or exited with an unexpected code."""

    def __init__(
        self,
        message: str,
        *,
        command: str,
        args: Sequence[str],
        exit_code: int | None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.args_list = tuple(args)
        self.exit_code = exit_code


@contextmanager
def task_scope(task: Any, entry: RepoEntry | None = None) -> Iterator[None]:
    """Attribute failures raised inside the block to ``task`` and ``entry``.

    ``TaskError`` instances keep any attribution they already carry. Other
    ``OSError`` / ``ValueError`` failures are wrapped so callers only have to
    handle one exception family.
    """

    task_name = getattr(task, "task_name", type(task).__name__)
    try:
        yield
    except TaskError as error:
        if error.task_name is None:
            error.task_name = task_name
        if error.entry is None:
            error.entry = entry
        raise
    except (OSError, ValueError) as error:
        raise TaskError(str(error), task_name=task_name, entry=entry) from error
