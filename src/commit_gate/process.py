"""Subprocess runner used by discovery and tool-backed tasks."""

from __future__ import annotations

import subprocess
import tempfile
from collections.abc import Callable, Iterator, Sequence
from typing import IO, cast

from commit_gate.hooks.errors import ProcessError
from commit_gate.hooks.status import StatusLogger


class ProgramRunner:
    """Run external programs, exposing exit codes or output lines."""

    def __init__(
        self,
        logger: StatusLogger,
        *,
        runner: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
        popen: Callable[..., subprocess.Popen[str]] = subprocess.Popen,
    ) -> None:
        self._logger = logger
        self._runner = runner
        self._popen = popen

    def run(self, command: str, args: Sequence[str]) -> int:
        """Run to completion and return the exit code; stdout is discarded."""

        self._logger.debug(f"Running: {_render(command, args)}")
        try:
            completed = self._runner(  # noqa: S603
                [command, *args],
                check=False,
                text=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except FileNotFoundError as error:
            raise ProcessError(
                f"Executable not found in PATH: {command}",
                command=command,
                args=args,
                exit_code=None,
            ) from error
        self._logger.pipe_stderr((completed.stderr or "").splitlines())
        self._logger.debug(f"{command} exited with code {completed.returncode}")
        return completed.returncode

    def stream(self, command: str, args: Sequence[str]) -> Iterator[str]:
        """Yield trimmed stdout lines lazily.

        The exit code is checked once the output is exhausted, so callers only
        see ``ProcessError`` after consuming every line. Stopping early
        terminates the process. Stderr is spooled to a temporary file and
        never held in a pipe.
        """

        self._logger.debug(f"Streaming: {_render(command, args)}")
        with tempfile.TemporaryFile(
            mode="w+",
            encoding="utf-8",
            errors="replace",
        ) as stderr_handle:
            try:
                process = self._popen(  # noqa: S603
                    [command, *args],
                    text=True,
                    stdout=subprocess.PIPE,
                    stderr=stderr_handle,
                )
            except FileNotFoundError as error:
                raise ProcessError(
                    f"Executable not found in PATH: {command}",
                    command=command,
                    args=args,
                    exit_code=None,
                ) from error

            finished = False
            try:
                yield from (line.strip() for line in cast(IO[str], process.stdout))
                finished = True
            finally:
                if not finished:
                    process.kill()
                process.communicate()
            stderr_handle.seek(0)
            self._logger.pipe_stderr(stderr_handle.read().splitlines())

        exit_code = process.returncode
        self._logger.debug(f"{command} exited with code {exit_code}")
        if exit_code != 0:
            raise ProcessError(
                f"{_render(command, args)} failed with exit code {exit_code}",
                command=command,
                args=args,
                exit_code=exit_code,
            )

    def drain(self, command: str, args: Sequence[str]) -> None:
        """Consume ``stream`` fully, keeping its exit-code check."""

        for _ in self.stream(command, args):
            pass

    def first_line(self, command: str, args: Sequence[str]) -> str:
        """Return the first output line (empty if none) after a checked run."""

        lines = list(self.stream(command, args))
        return lines[0] if lines else ""


def _render(command: str, args: Sequence[str]) -> str:
    return " ".join([command, *args])
