"""Detect dependency constraints lagging behind the resolved lock file."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from commit_gate.hooks.errors import TaskError
from commit_gate.hooks.models import RepoEntry
from commit_gate.hooks.results import TaskResult
from commit_gate.hooks.status import StatusLogger
from commit_gate.hooks.tasks import TaskKind
from commit_gate.process import ProgramRunner
from commit_gate.pubspec import read_dependency_constraints

_VERSION = re.compile(
    r"^(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)(?:-(?P<pre>[0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?$",
)
_LOWER_BOUND = re.compile(r"^(?:\^|>=)\s*(?P<version>\S+)")


@dataclass(slots=True, frozen=True, order=True)
class Version:
    """Semantic version ordered by precedence; build metadata is ignored."""

    major: int
    minor: int
    patch: int
    release: int
    pre: tuple[tuple[int, int | str], ...]

    @classmethod
    def parse(cls, value: str) -> Version | None:
        match = _VERSION.match(value.strip())
        if match is None:
            return None
        pre = match["pre"]
        return cls(
            major=int(match["major"]),
            minor=int(match["minor"]),
            patch=int(match["patch"]),
            release=0 if pre else 1,
            pre=tuple(_identifier(part) for part in pre.split(".")) if pre else (),
        )


def _identifier(part: str) -> tuple[int, int | str]:
    # Numeric identifiers rank numerically and below alphanumeric ones.
    return (0, int(part)) if part.isdigit() else (1, part)


def constraint_lower_bound(constraint: str) -> Version | None:
    """Lower bound of a ``^x.y.z`` or ``>=x.y.z`` constraint, else ``None``."""

    match = _LOWER_BOUND.match(constraint.strip())
    if match is None:
        return None
    return Version.parse(match["version"])


def resolved_versions(outdated_json: str) -> dict[str, str]:
    """Extract ``package -> current version`` from ``dart pub outdated --json``."""

    try:
        payload = json.loads(outdated_json)
    except json.JSONDecodeError as error:
        raise TaskError(f"Invalid JSON from dart pub outdated: {error}") from error
    packages = payload.get("packages") if isinstance(payload, dict) else None
    if not isinstance(packages, list):
        raise TaskError("Unexpected dart pub outdated output: missing packages list")

    versions: dict[str, str] = {}
    for package in packages:
        if not isinstance(package, dict):
            continue
        name = package.get("package")
        current = package.get("current")
        if isinstance(name, str) and isinstance(current, dict):
            version = current.get("version")
            if isinstance(version, str):
                versions[name] = version
    return versions


class PullUpDependenciesTask:
    """Repo task: reject when a locked version is newer than its constraint allows for.

    Runs when ``pubspec.lock`` is staged. If the lock file is git-ignored it
    can never be staged, so the task runs on every commit instead.
    """

    kind = TaskKind.REPO
    task_name = "pull-up-dependencies"
    file_pattern = re.compile(r"^pubspec\.lock$")

    def __init__(
        self,
        *,
        program_runner: ProgramRunner,
        logger: StatusLogger,
        pubspec_path: Path = Path("pubspec.yaml"),
        executable: str = "dart",
    ) -> None:
        self._program_runner = program_runner
        self._logger = logger
        self._pubspec_path = pubspec_path
        self._executable = executable
        self._lock_ignored: bool | None = None

    @property
    def call_for_empty_entries(self) -> bool:
        if self._lock_ignored is None:
            lock_path = self._pubspec_path.with_name("pubspec.lock")
            exit_code = self._program_runner.run(
                "git",
                ["check-ignore", "-q", lock_path.as_posix()],
            )
            self._lock_ignored = exit_code == 0
        return self._lock_ignored

    def __call__(self, entries: list[RepoEntry]) -> TaskResult:
        self._logger.debug("Checking for updated dependencies...")
        output = "\n".join(
            self._program_runner.stream(
                self._executable,
                ["pub", "outdated", "--show-all", "--json"],
            ),
        )
        resolved = resolved_versions(output)
        constraints = read_dependency_constraints(self._pubspec_path)

        updates = 0
        for name, constraint in constraints.items():
            lower_bound = constraint_lower_bound(constraint)
            current = resolved.get(name)
            locked = Version.parse(current) if current is not None else None
            if lower_bound is None or locked is None:
                continue
            if locked > lower_bound:
                self._logger.info(f"  {name}: {constraint} -> {current}")
                updates += 1

        if updates:
            self._logger.info(f"{updates} dependencies can be pulled up to newer versions!")
            return TaskResult.REJECTED
        return TaskResult.ACCEPTED
