"""Relativize and organize the imports of staged Dart files.

The transform is a chain of pure line stages:

1. ``relativize``: ``package:<self>/...`` imports inside the library directory
   become relative imports.
2. ``organize_imports``: imports are grouped into ``dart:``, ``package:`` and
   relative blocks, each sorted ordinally and followed by one blank line.
3. ``with_newlines``: every line gets a ``\\n`` terminator.

A SHA-512 digest of the raw input bytes is compared against a digest of the
emitted output; the file is only rewritten when they differ. Import
statements spanning several physical lines are not recognized and are kept
as code.
"""

from __future__ import annotations

import hashlib
import os
import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from commit_gate.hooks.errors import TaskError
from commit_gate.hooks.models import RepoEntry
from commit_gate.hooks.results import TaskResult
from commit_gate.hooks.status import StatusLogger
from commit_gate.hooks.tasks import TaskKind
from commit_gate.pubspec import read_package_name

_LINE_BREAK = re.compile(r"\r\n|\r|\n")

_DART_IMPORT = re.compile(r"""^\s*import\s+(?:"|')dart:[^;]+;\s*(?://.*)?$""")
_PACKAGE_IMPORT = re.compile(r"""^\s*import\s+(?:"|')package:[^;]+;\s*(?://.*)?$""")
_RELATIVE_IMPORT = re.compile(
    r"""^\s*import\s+(?:"|')(?!package:|dart:)[^;]+;\s*(?://.*)?$""",
)


def split_lines(content: str) -> list[str]:
    """Split on ``\\n``, ``\\r\\n`` and ``\\r``; a final terminator adds no empty line."""

    if not content:
        return []
    lines = _LINE_BREAK.split(content)
    if lines[-1] == "":
        lines.pop()
    return lines


def relativize(
    lines: Iterable[str],
    *,
    package_name: str,
    file: Path,
    lib_dir: Path,
    logger: StatusLogger | None = None,
) -> Iterator[str]:
    """Rewrite self-package imports of a library file into relative imports.

    Files outside ``lib_dir`` pass through untouched.
    """

    if not _is_within(lib_dir, file):
        yield from lines
        return

    pattern = re.compile(
        r"""^\s*import\s*(['"])package:"""
        + re.escape(package_name)
        + r"""/([^'"]*)['"]([^;]*);\s*(//.*)?$""",
    )
    for line in lines:
        trimmed = line.strip()
        match = pattern.match(trimmed)
        if match is None:
            yield line
            continue

        if logger is not None:
            logger.debug(f"Relativizing {trimmed}")
        quote, import_path, postfix, comment = match.groups()
        relative_import = os.path.relpath(
            lib_dir / import_path,
            start=file.parent,
        ).replace("\\", "/")
        suffix = f" {comment}" if comment else ""
        yield f"import {quote}{relative_import}{quote}{postfix};{suffix}"


def organize_imports(lines: Iterable[str], logger: StatusLogger | None = None) -> Iterator[str]:
    """Group and sort imports; the only stage that buffers its whole input."""

    prefix_code: list[str] = []
    dart_imports: list[str] = []
    package_imports: list[str] = []
    relative_imports: list[str] = []
    code: list[str] = []

    for line in lines:
        if _DART_IMPORT.match(line):
            dart_imports.append(line.strip())
        elif _PACKAGE_IMPORT.match(line):
            package_imports.append(line.strip())
        elif _RELATIVE_IMPORT.match(line):
            relative_imports.append(line.strip())
        elif not dart_imports and not package_imports and not relative_imports:
            prefix_code.append(line)
        else:
            code.append(line)

    start = 0
    while start < len(code) and not code[start].strip():
        start += 1
    end = len(code)
    while end > start and not code[end - 1].strip():
        end -= 1
    code = code[start:end]

    if logger is not None:
        logger.debug("Sorting imports...")
    dart_imports.sort()
    package_imports.sort()
    relative_imports.sort()

    yield from prefix_code
    for block in (dart_imports, package_imports, relative_imports):
        if block:
            yield from block
            yield ""
    yield from code


def with_newlines(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        yield f"{line}\n"


def digest_chunks(chunks: Iterable[str], sink: hashlib._Hash) -> Iterator[str]:
    """Pass ``chunks`` through while feeding their UTF-8 bytes into ``sink``."""

    for chunk in chunks:
        sink.update(chunk.encode("utf-8"))
        yield chunk


def transform_lines(
    content: str,
    *,
    package_name: str,
    file: Path,
    lib_dir: Path,
    logger: StatusLogger | None = None,
) -> Iterator[str]:
    """Run the relativize and organize stages over ``content``."""

    return organize_imports(
        relativize(
            split_lines(content),
            package_name=package_name,
            file=file,
            lib_dir=lib_dir,
            logger=logger,
        ),
        logger,
    )


def fix_imports_content(
    content: str,
    *,
    package_name: str,
    file: Path,
    lib_dir: Path,
    logger: StatusLogger | None = None,
) -> str:
    """Apply every stage to ``content`` and return the new file text."""

    lines = transform_lines(
        content,
        package_name=package_name,
        file=file,
        lib_dir=lib_dir,
        logger=logger,
    )
    return "".join(with_newlines(lines))


class FixImportsTask:
    """File task: relativize self-package imports and sort all imports."""

    kind = TaskKind.FILE
    task_name = "fix-imports"
    file_pattern = re.compile(r"^.*\.dart$")

    def __init__(self, *, package_name: str, lib_dir: Path, logger: StatusLogger) -> None:
        self.package_name = package_name
        self.lib_dir = lib_dir
        self.logger = logger

    @classmethod
    def current(
        cls,
        *,
        logger: StatusLogger,
        pubspec_path: Path = Path("pubspec.yaml"),
        lib_dir: Path = Path("lib"),
    ) -> FixImportsTask:
        """Configure the task for the package described by ``pubspec_path``."""

        return cls(
            package_name=read_package_name(pubspec_path),
            lib_dir=lib_dir,
            logger=logger,
        )

    def __call__(self, entry: RepoEntry) -> TaskResult:
        raw = entry.file.read_bytes()
        in_digest = hashlib.sha512(raw)
        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError as error:
            raise TaskError(f"File is not valid UTF-8: {error}", entry=entry) from error

        out_digest = hashlib.sha512()
        lines = transform_lines(
            content,
            package_name=self.package_name,
            file=entry.file,
            lib_dir=self.lib_dir,
            logger=self.logger,
        )
        result = "".join(digest_chunks(with_newlines(lines), out_digest))

        if in_digest.digest() == out_digest.digest():
            self.logger.debug("No imports modified, keeping file as is")
            return TaskResult.ACCEPTED

        self.logger.debug("File has been modified, writing changes...")
        entry.file.write_bytes(result.encode("utf-8"))
        self.logger.debug("Write successful")
        return TaskResult.MODIFIED


def _is_within(parent: Path, child: Path) -> bool:
    parent_abs = Path(os.path.abspath(parent))
    child_abs = Path(os.path.abspath(child))
    return child_abs != parent_abs and child_abs.is_relative_to(parent_abs)
