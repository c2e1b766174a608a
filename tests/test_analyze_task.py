from __future__ import annotations

from pathlib import Path

import allure
import pytest

from commit_gate.hooks.errors import TaskError
from commit_gate.hooks.models import RepoEntry
from commit_gate.hooks.results import TaskResult
from commit_gate.tasks import AnalyzeTask
from commit_gate.tasks.analyze import parse_diagnostic

pytestmark = [
    allure.epic("Tasks"),
    allure.feature("Analyze"),
]

_COMMAND = ("dart", "analyze", "--fatal-infos")


@pytest.fixture()
def task(program_runner, status_logger) -> AnalyzeTask:
    return AnalyzeTask(program_runner=program_runner, logger=status_logger)


def test_parse_diagnostic_line() -> None:
    diagnostic = parse_diagnostic(
        "  info - lib/src/a.dart:3:8 - Unused import: 'dart:io'. - unused_import",
    )

    assert diagnostic is not None
    assert diagnostic.severity == "info"
    assert diagnostic.path == Path("lib/src/a.dart")
    assert (diagnostic.line, diagnostic.column) == (3, 8)
    assert diagnostic.message == "Unused import: 'dart:io'."
    assert diagnostic.code == "unused_import"
    assert diagnostic.render() == (
        "info - lib/src/a.dart:3:8 - Unused import: 'dart:io'. - unused_import"
    )


def test_parse_diagnostic_ignores_other_output() -> None:
    assert parse_diagnostic("Analyzing app...") is None
    assert parse_diagnostic("No issues found!") is None
    assert parse_diagnostic("") is None


def test_accepts_clean_analysis(
    tmp_path: Path,
    monkeypatch,
    program_runner,
    status_logger,
    task: AnalyzeTask,
) -> None:
    monkeypatch.chdir(tmp_path)
    program_runner.outputs[_COMMAND] = ["Analyzing app...", "No issues found!"]

    assert task([RepoEntry(file=Path("lib/a.dart"))]) is TaskResult.ACCEPTED
    assert status_logger.texts("info") == []


def test_rejects_lints_in_staged_files_only(
    tmp_path: Path,
    monkeypatch,
    program_runner,
    status_logger,
    task: AnalyzeTask,
) -> None:
    monkeypatch.chdir(tmp_path)
    program_runner.outputs[_COMMAND] = [
        "Analyzing app...",
        "warning - lib/a.dart:1:1 - Dead code. - dead_code",
        "error - lib/other.dart:2:4 - Undefined name 'x'. - undefined_identifier",
        "info - lib/a.dart:5:2 - Missing const. - prefer_const_constructors",
        "3 issues found.",
    ]
    program_runner.exit_codes[_COMMAND] = 3

    assert task([RepoEntry(file=Path("lib/a.dart"))]) is TaskResult.REJECTED
    assert status_logger.texts("info") == [
        "  warning - lib/a.dart:1:1 - Dead code. - dead_code",
        "  info - lib/a.dart:5:2 - Missing const. - prefer_const_constructors",
        "2 issue(s) found.",
    ]


def test_accepts_when_only_unstaged_files_have_lints(
    tmp_path: Path,
    monkeypatch,
    program_runner,
    task: AnalyzeTask,
) -> None:
    monkeypatch.chdir(tmp_path)
    program_runner.outputs[_COMMAND] = [
        "info - lib/other.dart:1:1 - Missing const. - prefer_const_constructors",
    ]
    program_runner.exit_codes[_COMMAND] = 1

    assert task([RepoEntry(file=Path("lib/a.dart"))]) is TaskResult.ACCEPTED


def test_unexpected_exit_code_is_task_error(program_runner, task: AnalyzeTask) -> None:
    program_runner.exit_codes[_COMMAND] = 64

    with pytest.raises(TaskError, match="unexpected exit code 64"):
        task([RepoEntry(file=Path("lib/a.dart"))])


def test_tolerated_exit_codes_are_configurable(program_runner, status_logger) -> None:
    program_runner.exit_codes[_COMMAND] = 2
    task = AnalyzeTask(
        program_runner=program_runner,
        logger=status_logger,
        tolerated_exit_codes=frozenset({0, 1}),
    )

    with pytest.raises(TaskError, match="unexpected exit code 2"):
        task([RepoEntry(file=Path("lib/a.dart"))])
