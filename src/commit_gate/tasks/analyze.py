"""Report analyzer diagnostics for staged Dart files."""

from __future__ import annotations

import re
from collections.abc import Set as AbstractSet
from dataclasses import dataclass
from pathlib import Path

from commit_gate.hooks.errors import ProcessError
from commit_gate.hooks.models import RepoEntry
from commit_gate.hooks.results import TaskResult
from commit_gate.hooks.status import StatusLogger
from commit_gate.hooks.tasks import TaskKind
from commit_gate.process import ProgramRunner
from commit_gate.tasks.exit_codes import ANALYZE_TOLERATED_EXIT_CODES, check_exit_code

_DIAGNOSTIC_LINE = re.compile(
    r"^\s*(?P<severity>\w+)\s+-\s+(?P<path>.+?):(?P<line>\d+):(?P<column>\d+)\s+-\s+"
    r"(?P<message>.+?)\s+-\s+(?P<code>[\w_]+)\s*$",
)


@dataclass(slots=True, frozen=True)
class AnalyzerDiagnostic:
    """One diagnostic printed by ``dart analyze``."""

    severity: str
    path: Path
    line: int
    column: int
    message: str
    code: str

    def render(self) -> str:
        return (
            f"{self.severity} - {self.path.as_posix()}:{self.line}:{self.column}"
            f" - {self.message} - {self.code}"
        )


def parse_diagnostic(line: str) -> AnalyzerDiagnostic | None:
    match = _DIAGNOSTIC_LINE.match(line)
    if match is None:
        return None
    return AnalyzerDiagnostic(
        severity=match["severity"],
        path=Path(match["path"]),
        line=int(match["line"]),
        column=int(match["column"]),
        message=match["message"],
        code=match["code"],
    )


class AnalyzeTask:
    """Repo task: reject the commit when staged files have analyzer issues.

    Diagnostics in files that are not staged are ignored.
    """

    kind = TaskKind.REPO
    task_name = "analyze"
    file_pattern = re.compile(r"^.*\.dart$")
    call_for_empty_entries = False

    def __init__(
        self,
        *,
        program_runner: ProgramRunner,
        logger: StatusLogger,
        executable: str = "dart",
        tolerated_exit_codes: AbstractSet[int] = ANALYZE_TOLERATED_EXIT_CODES,
    ) -> None:
        self._program_runner = program_runner
        self._logger = logger
        self._executable = executable
        self._tolerated_exit_codes = tolerated_exit_codes

    def __call__(self, entries: list[RepoEntry]) -> TaskResult:
        staged = {_normalize(entry.file): entry for entry in entries}
        lints: list[AnalyzerDiagnostic] = []

        self._logger.debug("Running dart analyze...")
        try:
            for line in self._program_runner.stream(
                self._executable,
                ["analyze", "--fatal-infos"],
            ):
                diagnostic = parse_diagnostic(line)
                if diagnostic is not None and _normalize(diagnostic.path) in staged:
                    lints.append(diagnostic)
        except ProcessError as error:
            if error.exit_code is None:
                raise
            check_exit_code(
                error.exit_code,
                self._tolerated_exit_codes,
                command=f"{self._executable} analyze",
            )

        for lint in lints:
            self._logger.info(f"  {lint.render()}")
        if lints:
            self._logger.info(f"{len(lints)} issue(s) found.")
            return TaskResult.REJECTED
        return TaskResult.ACCEPTED


def _normalize(path: Path) -> str:
    return path.resolve().as_posix()
