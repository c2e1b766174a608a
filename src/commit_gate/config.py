"""Runtime configuration for hook runs."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class TaskSettings:
    """Which tasks run, in their fixed execution order."""

    fix_imports: bool = True
    format: bool = True
    analyze: bool = True
    pull_up_dependencies: bool = False

    def any_enabled(self) -> bool:
        return self.fix_imports or self.format or self.analyze or self.pull_up_dependencies


@dataclass(slots=True)
class ToolSettings:
    """Locations of the package metadata and external tooling."""

    dart_executable: str = "dart"
    lib_dir: Path = Path("lib")
    pubspec_path: Path = Path("pubspec.yaml")


@dataclass(slots=True)
class Settings:
    """Application settings grouped by concern."""

    tasks: TaskSettings = field(default_factory=TaskSettings)
    tools: ToolSettings = field(default_factory=ToolSettings)
    continue_on_rejected: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from ``COMMIT_GATE_*`` environment variables."""

        return cls(
            tasks=TaskSettings(
                fix_imports=_env_bool("COMMIT_GATE_FIX_IMPORTS", default=True),
                format=_env_bool("COMMIT_GATE_FORMAT", default=True),
                analyze=_env_bool("COMMIT_GATE_ANALYZE", default=True),
                pull_up_dependencies=_env_bool(
                    "COMMIT_GATE_PULL_UP_DEPENDENCIES",
                    default=False,
                ),
            ),
            tools=ToolSettings(
                dart_executable=os.getenv("COMMIT_GATE_DART_EXECUTABLE", "dart").strip(),
                lib_dir=Path(os.getenv("COMMIT_GATE_LIB_DIR", "lib")),
                pubspec_path=Path(os.getenv("COMMIT_GATE_PUBSPEC_PATH", "pubspec.yaml")),
            ),
            continue_on_rejected=_env_bool("COMMIT_GATE_CONTINUE_ON_REJECTED", default=False),
            log_level=os.getenv("COMMIT_GATE_LOG_LEVEL", "WARNING").strip().upper(),
        )

    def validate(self) -> None:
        """Raise configuration error for unusable settings."""

        if not self.tools.dart_executable:
            raise ValueError("COMMIT_GATE_DART_EXECUTABLE must not be empty.")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Invalid COMMIT_GATE_LOG_LEVEL: {self.log_level!r}")
        if not self.tasks.any_enabled():
            raise ValueError("At least one task must be enabled.")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
