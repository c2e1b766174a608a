"""Format staged Dart files with ``dart format``."""

from __future__ import annotations

import re

from commit_gate.hooks.models import RepoEntry
from commit_gate.hooks.results import TaskResult
from commit_gate.hooks.tasks import TaskKind
from commit_gate.process import ProgramRunner
from commit_gate.tasks.exit_codes import FORMAT_EXIT_CODES, ExitCodeMapping, map_exit_code


class FormatTask:
    """File task running ``dart format --fix`` on each staged Dart file."""

    kind = TaskKind.FILE
    task_name = "format"
    file_pattern = re.compile(r"^.*\.dart$")

    def __init__(
        self,
        *,
        program_runner: ProgramRunner,
        executable: str = "dart",
        exit_codes: ExitCodeMapping = FORMAT_EXIT_CODES,
    ) -> None:
        self._program_runner = program_runner
        self._executable = executable
        self._exit_codes = exit_codes

    def __call__(self, entry: RepoEntry) -> TaskResult:
        exit_code = self._program_runner.run(
            self._executable,
            ["format", "--fix", "--set-exit-if-changed", entry.posix_path],
        )
        return map_exit_code(exit_code, self._exit_codes, command=f"{self._executable} format")
