"""Domain models shared by discovery, tasks and the hook runner."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class RepoEntry:
    """One staged file for the duration of a hook run.

    ``partially_staged`` is set when the file also has unstaged modifications;
    fixes applied to such a file must not be re-staged automatically.
    """

    file: Path
    partially_staged: bool = False

    @property
    def posix_path(self) -> str:
        return self.file.as_posix()
