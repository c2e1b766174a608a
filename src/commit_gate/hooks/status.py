"""Progress and diagnostic output for hook runs.

The runner talks to a ``StatusLogger``: one live status line plus free-form
messages. Diagnostic messages also go through stdlib ``logging`` so the CLI
``--log-level`` controls how much tracing is shown.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from typing import IO, Protocol

import click

from commit_gate.hooks.results import TaskStatus

logger = logging.getLogger(__name__)

_STATUS_STYLES: dict[TaskStatus, tuple[str, str]] = {
    TaskStatus.SCANNING: ("…", "blue"),
    TaskStatus.CLEAN: ("✓", "green"),
    TaskStatus.HAS_CHANGES: ("±", "yellow"),
    TaskStatus.HAS_UNSTAGED_CHANGES: ("!", "magenta"),
    TaskStatus.REJECTED: ("✗", "red"),
}


class StatusLogger(Protocol):
    """Logger collaborator used by the runner, tasks and process runner."""

    def update_status(
        self,
        *,
        message: str | None = None,
        detail: str | None = None,
        status: TaskStatus | None = None,
        clear: bool = False,
    ) -> None:
        """Update the live status line; ``clear`` commits it and starts a new one."""

    def complete_status(self) -> None:
        """Flush the live status line. Called on every exit path of a run."""

    def debug(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def pipe_stderr(self, lines: Iterable[str]) -> None:
        """Forward stderr output of an external program."""


class _BaseStatusLogger:
    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream
        self._message = ""
        self._detail = ""
        self._status: TaskStatus | None = None

    def _merge(
        self,
        message: str | None,
        detail: str | None,
        status: TaskStatus | None,
    ) -> None:
        if message is not None:
            self._message = message
            self._detail = ""
        if detail is not None:
            self._detail = detail
        if status is not None:
            self._status = status

    def _reset(self) -> None:
        self._message = ""
        self._detail = ""
        self._status = None

    def _echo(self, text: str, *, nl: bool = True, err: bool = False) -> None:
        click.echo(text, file=self._stream, nl=nl, err=err and self._stream is None)

    def debug(self, message: str) -> None:
        logger.debug(message)

    def info(self, message: str) -> None:
        logger.info(message)
        self._emit_line(message)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self._emit_line(click.style(message, fg="yellow"))

    def error(self, message: str) -> None:
        logger.error(message)
        self._emit_line(click.style(message, fg="red"), err=True)

    def pipe_stderr(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.debug(line.rstrip())

    def _emit_line(self, text: str, *, err: bool = False) -> None:
        raise NotImplementedError


class SimpleStatusLogger(_BaseStatusLogger):
    """Line-per-update output for pipes, CI logs and dumb terminals."""

    def update_status(
        self,
        *,
        message: str | None = None,
        detail: str | None = None,
        status: TaskStatus | None = None,
        clear: bool = False,
    ) -> None:
        self._merge(message, detail, status)
        if message is not None or clear:
            self._echo(self._render())
        if clear:
            self._reset()

    def complete_status(self) -> None:
        self._reset()

    def _render(self) -> str:
        parts = []
        if self._status is not None:
            parts.append(f"[{self._status.value.upper()}]")
        if self._message:
            parts.append(self._message)
        if self._detail:
            parts.append(self._detail)
        return " ".join(parts)

    def _emit_line(self, text: str, *, err: bool = False) -> None:
        self._echo(click.unstyle(text), err=err)


class ConsoleStatusLogger(_BaseStatusLogger):
    """Single live status line rewritten in place on an ANSI terminal."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        super().__init__(stream)
        self._live = False

    def update_status(
        self,
        *,
        message: str | None = None,
        detail: str | None = None,
        status: TaskStatus | None = None,
        clear: bool = False,
    ) -> None:
        self._merge(message, detail, status)
        self._echo(f"\r\x1b[2K{self._render()}", nl=False)
        self._live = True
        if clear:
            self._echo("")
            self._live = False
            self._reset()

    def complete_status(self) -> None:
        if self._live:
            self._echo("\r\x1b[2K", nl=False)
            self._live = False
        self._reset()

    def _render(self) -> str:
        marker = ""
        if self._status is not None:
            symbol, colour = _STATUS_STYLES[self._status]
            marker = click.style(f"[{symbol}] ", fg=colour, bold=True)
        detail = f" {click.style(self._detail, dim=True)}" if self._detail else ""
        return f"{marker}{self._message}{detail}"

    def _emit_line(self, text: str, *, err: bool = False) -> None:
        if self._live:
            self._echo("\r\x1b[2K", nl=False)
        self._echo(text, err=err)
        if self._live:
            self._echo(self._render(), nl=False)


def select_status_logger(stream: IO[str] | None = None) -> StatusLogger:
    """Use the live console renderer only when attached to a terminal."""

    target = stream if stream is not None else sys.stdout
    isatty = getattr(target, "isatty", None)
    if callable(isatty) and isatty():
        return ConsoleStatusLogger(stream)
    return SimpleStatusLogger(stream)


def configure_logging(level: str = "WARNING") -> None:
    """Route diagnostic logging to stderr at ``level``."""

    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(level.upper())
