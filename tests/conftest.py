"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Any

import pytest

from commit_gate.hooks.errors import ProcessError
from commit_gate.hooks.results import TaskStatus


class RecordingStatusLogger:
    """Status logger that keeps every call for assertions."""

    def __init__(self) -> None:
        self.updates: list[dict[str, Any]] = []
        self.messages: list[tuple[str, str]] = []
        self.completed = 0

    def update_status(
        self,
        *,
        message: str | None = None,
        detail: str | None = None,
        status: TaskStatus | None = None,
        clear: bool = False,
    ) -> None:
        self.updates.append(
            {"message": message, "detail": detail, "status": status, "clear": clear},
        )

    def complete_status(self) -> None:
        self.completed += 1

    def debug(self, message: str) -> None:
        self.messages.append(("debug", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warn(self, message: str) -> None:
        self.messages.append(("warn", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def pipe_stderr(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.messages.append(("stderr", line))

    def cleared_messages(self) -> list[str]:
        return [update["message"] for update in self.updates if update["clear"]]

    def texts(self, level: str) -> list[str]:
        return [text for kind, text in self.messages if kind == level]


class FakeProgramRunner:
    """In-memory program runner keyed by the full command line."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.exit_codes: dict[tuple[str, ...], int] = {}
        self.outputs: dict[tuple[str, ...], list[str]] = {}

    def run(self, command: str, args: Sequence[str]) -> int:
        key = (command, *args)
        self.calls.append(key)
        return self.exit_codes.get(key, 0)

    def stream(self, command: str, args: Sequence[str]) -> Iterator[str]:
        key = (command, *args)
        self.calls.append(key)
        yield from self.outputs.get(key, [])
        exit_code = self.exit_codes.get(key, 0)
        if exit_code != 0:
            raise ProcessError(
                f"{' '.join(key)} failed with exit code {exit_code}",
                command=command,
                args=args,
                exit_code=exit_code,
            )

    def drain(self, command: str, args: Sequence[str]) -> None:
        for _ in self.stream(command, args):
            pass

    def first_line(self, command: str, args: Sequence[str]) -> str:
        lines = list(self.stream(command, args))
        return lines[0] if lines else ""


@pytest.fixture()
def status_logger() -> RecordingStatusLogger:
    return RecordingStatusLogger()


@pytest.fixture()
def program_runner() -> FakeProgramRunner:
    return FakeProgramRunner()
