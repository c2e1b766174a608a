"""Controllers for hook CLI commands."""

from __future__ import annotations

import stat
from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path

from commit_gate.config import Settings
from commit_gate.hooks.discovery import StagedFileCollector
from commit_gate.hooks.errors import TaskError, task_scope
from commit_gate.hooks.results import HookResult
from commit_gate.hooks.runner import Hooks
from commit_gate.hooks.status import StatusLogger, configure_logging, select_status_logger
from commit_gate.hooks.tasks import FileTask, RepoTask
from commit_gate.process import ProgramRunner
from commit_gate.tasks import AnalyzeTask, FixImportsTask, FormatTask, PullUpDependenciesTask

TASK_ERROR_EXIT_CODE = 2

HOOK_SCRIPT = """#!/bin/sh
# Installed by commit-gate.
exec commit-gate run "$@"
"""

_SUMMARIES = {
    HookResult.CLEAN: "All staged files passed.",
    HookResult.HAS_CHANGES: "Staged files were fixed up and re-staged.",
    HookResult.HAS_UNSTAGED_CHANGES: (
        "Partially staged files were fixed up. "
        "Review and stage the changes, then commit again."
    ),
    HookResult.REJECTED: "Commit rejected. Fix the reported problems and try again.",
}


@dataclass(slots=True)
class HooksRunCommand:
    """CLI input for one hook run; ``None`` keeps the environment setting."""

    fix_imports: bool | None = None
    format: bool | None = None
    analyze: bool | None = None
    pull_up_dependencies: bool | None = None
    continue_on_rejected: bool | None = None
    log_level: str | None = None


@dataclass(slots=True)
class HooksInstallCommand:
    """CLI input for installing the git pre-commit hook."""

    force: bool = False


@dataclass(slots=True)
class HooksRunOutcome:
    """Verdict and process exit status of a hook run."""

    result: HookResult | None
    exit_code: int
    lines: list[str]


class HooksCliController:
    """Builds the configured hook pipeline and runs it."""

    def __init__(
        self,
        *,
        logger_factory: Callable[[], StatusLogger] = select_status_logger,
        runner_factory: Callable[[StatusLogger], ProgramRunner] = ProgramRunner,
    ) -> None:
        self._logger_factory = logger_factory
        self._runner_factory = runner_factory

    def run(self, command: HooksRunCommand) -> HooksRunOutcome:
        settings = _apply_overrides(Settings.from_env(), command)
        settings.validate()
        configure_logging(settings.log_level)

        logger = self._logger_factory()
        program_runner = self._runner_factory(logger)
        try:
            hooks = Hooks(
                logger=logger,
                collector=StagedFileCollector(program_runner),
                program_runner=program_runner,
                tasks=build_tasks(settings, logger=logger, program_runner=program_runner),
                continue_on_rejected=settings.continue_on_rejected,
            )
            result = hooks()
        except TaskError as error:
            logger.error(str(error))
            return HooksRunOutcome(
                result=None,
                exit_code=TASK_ERROR_EXIT_CODE,
                lines=["Hook run aborted by an unrecoverable task error."],
            )

        return HooksRunOutcome(
            result=result,
            exit_code=result.exit_code,
            lines=[_SUMMARIES[result]],
        )

    def install(self, command: HooksInstallCommand) -> list[str]:
        logger = self._logger_factory()
        program_runner = self._runner_factory(logger)
        hooks_dir = Path(program_runner.first_line("git", ["rev-parse", "--git-path", "hooks"]))
        hook_path = hooks_dir / "pre-commit"

        if hook_path.exists() and not command.force:
            if hook_path.read_text("utf-8") == HOOK_SCRIPT:
                return [f"Hook already installed: {hook_path}"]
            raise ValueError(
                f"A different pre-commit hook already exists at {hook_path}. "
                "Use --force to replace it.",
            )

        hooks_dir.mkdir(parents=True, exist_ok=True)
        hook_path.write_text(HOOK_SCRIPT, "utf-8")
        mode = hook_path.stat().st_mode
        hook_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return [f"Installed pre-commit hook: {hook_path}"]


def build_tasks(
    settings: Settings,
    *,
    logger: StatusLogger,
    program_runner: ProgramRunner,
) -> list[FileTask | RepoTask]:
    """Instantiate enabled tasks in execution order."""

    tasks: list[FileTask | RepoTask] = []
    executable = settings.tools.dart_executable
    if settings.tasks.fix_imports:
        # An unreadable pubspec is a task failure, not a configuration error.
        with task_scope(FixImportsTask):
            fix_imports = FixImportsTask.current(
                logger=logger,
                pubspec_path=settings.tools.pubspec_path,
                lib_dir=settings.tools.lib_dir,
            )
        tasks.append(fix_imports)
    if settings.tasks.format:
        tasks.append(FormatTask(program_runner=program_runner, executable=executable))
    if settings.tasks.analyze:
        tasks.append(
            AnalyzeTask(program_runner=program_runner, logger=logger, executable=executable),
        )
    if settings.tasks.pull_up_dependencies:
        tasks.append(
            PullUpDependenciesTask(
                program_runner=program_runner,
                logger=logger,
                pubspec_path=settings.tools.pubspec_path,
                executable=executable,
            ),
        )
    return tasks


def _apply_overrides(settings: Settings, command: HooksRunCommand) -> Settings:
    task_overrides = {
        name: value
        for name, value in (
            ("fix_imports", command.fix_imports),
            ("format", command.format),
            ("analyze", command.analyze),
            ("pull_up_dependencies", command.pull_up_dependencies),
        )
        if value is not None
    }
    settings = replace(settings, tasks=replace(settings.tasks, **task_overrides))
    if command.continue_on_rejected is not None:
        settings = replace(settings, continue_on_rejected=command.continue_on_rejected)
    if command.log_level is not None:
        settings = replace(settings, log_level=command.log_level.upper())
    return settings
