"""Collect staged files of the git repository containing the working directory."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from commit_gate.hooks.models import RepoEntry
from commit_gate.process import ProgramRunner


class StagedFileCollector:
    """Yield a ``RepoEntry`` per staged file below the current directory.

    Paths are reported relative to ``cwd``. Files that were staged for
    deletion (and therefore no longer exist) are skipped.
    """

    def __init__(self, program_runner: ProgramRunner, *, cwd: Path | None = None) -> None:
        self._program_runner = program_runner
        self._cwd = cwd

    def collect(self) -> Iterator[RepoEntry]:
        current = (self._cwd or Path.cwd()).resolve()
        git_root = self._git_root()
        unstaged = set(self._git_files(git_root, current, ["diff", "--name-only"]))

        for path in self._git_files(git_root, current, ["diff", "--name-only", "--cached"]):
            if not (current / path).is_file():
                continue
            yield RepoEntry(file=path, partially_staged=path in unstaged)

    def _git_root(self) -> Path:
        top_level = self._program_runner.first_line("git", ["rev-parse", "--show-toplevel"])
        return Path(top_level).resolve()

    def _git_files(self, git_root: Path, current: Path, arguments: list[str]) -> Iterator[Path]:
        for line in self._program_runner.stream("git", arguments):
            if not line:
                continue
            absolute = git_root / line
            if not absolute.is_relative_to(current):
                continue
            yield absolute.relative_to(current)
