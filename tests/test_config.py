from __future__ import annotations

from pathlib import Path

import allure
import pytest

from commit_gate.config import Settings, TaskSettings, ToolSettings

pytestmark = [
    allure.epic("Configuration"),
    allure.feature("Environment Settings"),
]

_ENV_NAMES = (
    "COMMIT_GATE_FIX_IMPORTS",
    "COMMIT_GATE_FORMAT",
    "COMMIT_GATE_ANALYZE",
    "COMMIT_GATE_PULL_UP_DEPENDENCIES",
    "COMMIT_GATE_CONTINUE_ON_REJECTED",
    "COMMIT_GATE_LIB_DIR",
    "COMMIT_GATE_PUBSPEC_PATH",
    "COMMIT_GATE_DART_EXECUTABLE",
    "COMMIT_GATE_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_from_env_defaults() -> None:
    settings = Settings.from_env()

    assert settings.tasks == TaskSettings()
    assert settings.tasks.pull_up_dependencies is False
    assert settings.tools.dart_executable == "dart"
    assert settings.tools.lib_dir == Path("lib")
    assert settings.tools.pubspec_path == Path("pubspec.yaml")
    assert settings.continue_on_rejected is False
    assert settings.log_level == "WARNING"
    settings.validate()


def test_from_env_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMMIT_GATE_FORMAT", "off")
    monkeypatch.setenv("COMMIT_GATE_PULL_UP_DEPENDENCIES", "YES")
    monkeypatch.setenv("COMMIT_GATE_CONTINUE_ON_REJECTED", "1")
    monkeypatch.setenv("COMMIT_GATE_LIB_DIR", "src/lib")
    monkeypatch.setenv("COMMIT_GATE_PUBSPEC_PATH", "app/pubspec.yaml")
    monkeypatch.setenv("COMMIT_GATE_DART_EXECUTABLE", " /opt/dart/bin/dart ")
    monkeypatch.setenv("COMMIT_GATE_LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.tasks.format is False
    assert settings.tasks.pull_up_dependencies is True
    assert settings.continue_on_rejected is True
    assert settings.tools.lib_dir == Path("src/lib")
    assert settings.tools.pubspec_path == Path("app/pubspec.yaml")
    assert settings.tools.dart_executable == "/opt/dart/bin/dart"
    assert settings.log_level == "DEBUG"


def test_from_env_rejects_invalid_boolean(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMMIT_GATE_ANALYZE", "sometimes")

    with pytest.raises(ValueError, match="Invalid boolean value for COMMIT_GATE_ANALYZE"):
        Settings.from_env()


def test_validate_requires_an_enabled_task() -> None:
    settings = Settings(
        tasks=TaskSettings(fix_imports=False, format=False, analyze=False),
    )

    with pytest.raises(ValueError, match="At least one task"):
        settings.validate()


def test_validate_rejects_empty_executable() -> None:
    settings = Settings(tools=ToolSettings(dart_executable=""))

    with pytest.raises(ValueError, match="DART_EXECUTABLE"):
        settings.validate()


def test_validate_rejects_unknown_log_level() -> None:
    settings = Settings(log_level="CHATTY")

    with pytest.raises(ValueError, match="Invalid COMMIT_GATE_LOG_LEVEL"):
        settings.validate()
