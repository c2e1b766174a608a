"""Run all configured tasks over the staged files and aggregate one verdict."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Protocol

from commit_gate.hooks.errors import task_scope
from commit_gate.hooks.models import RepoEntry
from commit_gate.hooks.results import HookResult, TaskResult, TaskStatus, fold_results, raise_to
from commit_gate.hooks.status import StatusLogger
from commit_gate.hooks.tasks import (
    FileTask,
    RepoTask,
    can_process,
    file_tasks,
    repo_tasks,
)
from commit_gate.process import ProgramRunner

_FILE_MESSAGES = {
    HookResult.CLEAN: "Accepted file {path}",
    HookResult.HAS_CHANGES: "Fixed up {path}",
    HookResult.HAS_UNSTAGED_CHANGES: "Fixed up partially staged file {path}",
    HookResult.REJECTED: "Rejected file {path}",
}

_REPO_MESSAGES = {
    HookResult.CLEAN: "Completed {task}",
    HookResult.HAS_CHANGES: "Completed {task}, fixed up some files",
    HookResult.HAS_UNSTAGED_CHANGES: "Completed {task}, fixed up some partially staged files",
    HookResult.REJECTED: "Completed {task}, found problems",
}


class EntryCollector(Protocol):
    def collect(self) -> Iterable[RepoEntry]:
        """Yield staged entries whose files currently exist."""
        raise NotImplementedError


class _RejectedError(Exception):
    """Internal abort signal for the first rejection when not continuing."""


class Hooks:
    """Callable hook run over the staged files of the current repository.

    File tasks run per entry, then repo tasks run over the matching subset of
    all entries, both strictly in registration order so later tasks see the
    files as rewritten by earlier ones.

    A ``REJECTED`` task result aborts the run immediately unless
    ``continue_on_rejected`` is set; the verdict is ``REJECTED`` either way.
    ``TaskError`` always propagates to the caller.
    """

    def __init__(
        self,
        *,
        logger: StatusLogger,
        collector: EntryCollector,
        program_runner: ProgramRunner,
        tasks: Sequence[FileTask | RepoTask],
        continue_on_rejected: bool = False,
    ) -> None:
        self.logger = logger
        self.continue_on_rejected = continue_on_rejected
        self._collector = collector
        self._program_runner = program_runner
        self._file_tasks = file_tasks(tasks)
        self._repo_tasks = repo_tasks(tasks)

    def __call__(self) -> HookResult:
        try:
            entries = list(self._collector.collect())
            result = fold_results(
                (self._scan_entry(entry) for entry in entries),
                HookResult.CLEAN,
            )
            return fold_results(
                (self._evaluate_repo_task(task, entries) for task in self._repo_tasks),
                result,
            )
        except _RejectedError:
            return HookResult.REJECTED
        finally:
            self.logger.complete_status()

    def _scan_entry(self, entry: RepoEntry) -> HookResult:
        self.logger.update_status(
            message=f"Scanning {entry.posix_path}...",
            status=TaskStatus.SCANNING,
        )
        try:
            scan_result = TaskResult.ACCEPTED
            for task in self._file_tasks:
                if not can_process(task, entry):
                    continue
                with task_scope(task, entry):
                    scan_result = raise_to(scan_result, self._run_file_task(task, entry))
            hook_result = self._process_task_result(scan_result, entry)
        except _RejectedError:
            self._log_file_result(HookResult.REJECTED, entry)
            raise
        self._log_file_result(hook_result, entry)
        return hook_result

    def _run_file_task(self, task: FileTask, entry: RepoEntry) -> TaskResult:
        self.logger.update_status(detail=f"[{task.task_name}]")
        task_result = task(entry)
        self._check_rejected(task_result)
        return task_result

    def _evaluate_repo_task(self, task: RepoTask, entries: list[RepoEntry]) -> HookResult:
        with task_scope(task):
            filtered = [entry for entry in entries if can_process(task, entry)]
            if not filtered and not task.call_for_empty_entries:
                return HookResult.CLEAN
            return self._run_repo_task(task, filtered)

    def _run_repo_task(self, task: RepoTask, entries: list[RepoEntry]) -> HookResult:
        self.logger.update_status(
            message=f"Running {task.task_name}...",
            status=TaskStatus.SCANNING,
        )
        try:
            task_result = task(entries)
            self._check_rejected(task_result)
            hook_result = fold_results(
                self._process_multi_task_result(task_result, entries),
                HookResult.CLEAN,
            )
        except _RejectedError:
            self._log_repo_result(HookResult.REJECTED, task)
            raise
        self._log_repo_result(hook_result, task)
        return hook_result

    def _check_rejected(self, result: TaskResult) -> None:
        if result is TaskResult.REJECTED and not self.continue_on_rejected:
            raise _RejectedError

    def _process_multi_task_result(
        self,
        task_result: TaskResult,
        entries: list[RepoEntry],
    ) -> Iterator[HookResult]:
        if not entries:
            yield self._process_task_result(task_result, None)
            return
        for entry in entries:
            yield self._process_task_result(task_result, entry)

    def _process_task_result(self, task_result: TaskResult, entry: RepoEntry | None) -> HookResult:
        if task_result is TaskResult.ACCEPTED:
            return HookResult.CLEAN
        if task_result is TaskResult.MODIFIED:
            if entry is not None and entry.partially_staged:
                return HookResult.HAS_UNSTAGED_CHANGES
            if entry is not None:
                self._program_runner.drain("git", ["add", entry.posix_path])
            return HookResult.HAS_CHANGES
        if not self.continue_on_rejected:
            raise AssertionError("Rejected results must abort before being processed")
        return HookResult.REJECTED

    def _log_file_result(self, hook_result: HookResult, entry: RepoEntry) -> None:
        self.logger.update_status(
            status=hook_result.to_status(),
            message=_FILE_MESSAGES[hook_result].format(path=entry.posix_path),
            clear=True,
        )

    def _log_repo_result(self, hook_result: HookResult, task: RepoTask) -> None:
        self.logger.update_status(
            status=hook_result.to_status(),
            message=_REPO_MESSAGES[hook_result].format(task=task.task_name),
            clear=True,
        )
