"""Per-tool handling of process exit codes."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Set as AbstractSet

from commit_gate.hooks.errors import TaskError
from commit_gate.hooks.results import TaskResult

ExitCodeMapping = Mapping[int, TaskResult]

# --set-exit-if-changed makes the formatter exit with 1 after rewriting a file.
FORMAT_EXIT_CODES: ExitCodeMapping = {
    0: TaskResult.ACCEPTED,
    1: TaskResult.MODIFIED,
}

# dart analyze exits with the highest severity found: 1 infos (only with
# --fatal-infos), 2 warnings, 3 errors. The verdict comes from the parsed
# diagnostics, since only lints in staged files count.
ANALYZE_TOLERATED_EXIT_CODES: AbstractSet[int] = frozenset({0, 1, 2, 3})


def map_exit_code(exit_code: int, mapping: ExitCodeMapping, *, command: str) -> TaskResult:
    """Translate ``exit_code``; codes outside the mapping are unrecoverable."""

    try:
        return mapping[exit_code]
    except KeyError:
        raise TaskError(f"{command} failed with unexpected exit code {exit_code}") from None


def check_exit_code(exit_code: int, tolerated: AbstractSet[int], *, command: str) -> None:
    if exit_code not in tolerated:
        raise TaskError(f"{command} failed with unexpected exit code {exit_code}")
