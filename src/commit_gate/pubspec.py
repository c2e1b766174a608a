"""Read package metadata from ``pubspec.yaml``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_pubspec(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text("utf-8"))
    except OSError as error:
        raise ValueError(f"Cannot read {path}: {error}") from error
    except yaml.YAMLError as error:
        raise ValueError(f"Invalid YAML in {path}: {error}") from error
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top of {path}.")
    return data


def read_package_name(path: Path) -> str:
    name = load_pubspec(path).get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"Missing package name in {path}.")
    return name.strip()


def read_dependency_constraints(path: Path) -> dict[str, str]:
    """Map every hosted dependency (regular and dev) to its version constraint.

    Path, git and sdk dependencies are skipped since they have no version to
    pull up.
    """

    pubspec = load_pubspec(path)
    constraints: dict[str, str] = {}
    for section in ("dependencies", "dev_dependencies"):
        entries = pubspec.get(section) or {}
        if not isinstance(entries, dict):
            raise ValueError(f"Expected a mapping for {section!r} in {path}.")
        for name, requirement in entries.items():
            if isinstance(requirement, str):
                constraints[str(name)] = requirement.strip()
            elif isinstance(requirement, dict) and isinstance(requirement.get("version"), str):
                constraints[str(name)] = requirement["version"].strip()
    return constraints
