"""Built-in hook tasks."""

from commit_gate.tasks.analyze import AnalyzeTask
from commit_gate.tasks.fix_imports import FixImportsTask
from commit_gate.tasks.format import FormatTask
from commit_gate.tasks.pull_up_dependencies import PullUpDependenciesTask

__all__ = [
    "AnalyzeTask",
    "FixImportsTask",
    "FormatTask",
    "PullUpDependenciesTask",
]
