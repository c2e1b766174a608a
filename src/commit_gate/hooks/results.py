"""Ranked result scales for task and hook outcomes.

Both scales form a small lattice: merging two results keeps the higher-ranked
one, so folding any sequence of results yields the same verdict regardless of
evaluation order. Only the order of side effects (logging, re-staging) depends
on how tasks are scheduled.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import TypeVar


class TaskResult(str, Enum):
    """Outcome of a single task invocation."""

    ACCEPTED = "accepted"
    MODIFIED = "modified"
    REJECTED = "rejected"

    @property
    def rank(self) -> int:
        return _TASK_RESULT_RANKS[self]


class HookResult(str, Enum):
    """Outcome of one entry, one repo task, or a whole run."""

    CLEAN = "clean"
    HAS_CHANGES = "has_changes"
    HAS_UNSTAGED_CHANGES = "has_unstaged_changes"
    REJECTED = "rejected"

    @property
    def rank(self) -> int:
        return _HOOK_RESULT_RANKS[self]

    @property
    def is_success(self) -> bool:
        """Only clean runs and runs with fully re-staged fixes let a commit through.

        ``HAS_UNSTAGED_CHANGES`` fails because the fix touched a partially staged
        file that could not be re-staged without staging unrelated lines.
        """

        return self.rank <= HookResult.HAS_CHANGES.rank

    @property
    def exit_code(self) -> int:
        return 0 if self.is_success else 1

    def to_status(self) -> TaskStatus:
        return _HOOK_RESULT_STATUSES[self]


class TaskStatus(str, Enum):
    """Progress marker rendered by status loggers."""

    SCANNING = "scanning"
    CLEAN = "clean"
    HAS_CHANGES = "has_changes"
    HAS_UNSTAGED_CHANGES = "has_unstaged_changes"
    REJECTED = "rejected"


_TASK_RESULT_RANKS = {
    TaskResult.ACCEPTED: 0,
    TaskResult.MODIFIED: 1,
    TaskResult.REJECTED: 2,
}

_HOOK_RESULT_RANKS = {
    HookResult.CLEAN: 0,
    HookResult.HAS_CHANGES: 1,
    HookResult.HAS_UNSTAGED_CHANGES: 2,
    HookResult.REJECTED: 3,
}

_HOOK_RESULT_STATUSES = {
    HookResult.CLEAN: TaskStatus.CLEAN,
    HookResult.HAS_CHANGES: TaskStatus.HAS_CHANGES,
    HookResult.HAS_UNSTAGED_CHANGES: TaskStatus.HAS_UNSTAGED_CHANGES,
    HookResult.REJECTED: TaskStatus.REJECTED,
}

ResultT = TypeVar("ResultT", TaskResult, HookResult)


def raise_to(current: ResultT, candidate: ResultT) -> ResultT:
    """Return the higher-ranked of two results on the same scale."""

    if type(current) is not type(candidate):
        raise TypeError(
            f"Cannot merge {type(current).__name__} with {type(candidate).__name__}",
        )
    return candidate if candidate.rank > current.rank else current


def fold_results(results: Iterable[ResultT], base: ResultT) -> ResultT:
    """Merge a sequence of results into ``base``.

    Pass the lowest value of the scale (``TaskResult.ACCEPTED`` or
    ``HookResult.CLEAN``) as ``base`` to get the plain aggregate.
    """

    merged = base
    for result in results:
        merged = raise_to(merged, result)
    return merged
