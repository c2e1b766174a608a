"""Pre-commit quality gate for Dart packages."""

__version__ = "0.1.0"
