"""Batch validation of JSON files."""

from __future__ import annotations

import json
import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence, Union

APP_DESCRIPTION = (
    "Utility for batch JSON file validation. "
    "Drag JSON files or folders onto executable (the file) to validate"
)

UTF8_BOM = b"\xef\xbb\xbf"
_SOURCE = "<stream>"

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class ValidationFailure:
    """Why one file did not validate."""

    path: Path
    line: int
    column: int
    text: str
    source: str = _SOURCE
    likely_bom: bool = False

    def format(self) -> str:
        lines = [
            f"validation failed: {self.path}",
            f"line {self.line} column {self.column}",
            self.text,
            f"source: {self.source}",
        ]
        if self.likely_bom:
            lines.append(
                'likely incorrect encoding. re-save the file using "UTF-8 without BOM" encoding format'
            )
        return "\n".join(lines) + "\n"


@dataclass
class ValidationReport:
    failures: list[ValidationFailure] = field(default_factory=list)
    files_total: int = 0

    @property
    def errors(self) -> int:
        return len(self.failures)

    def summary(self) -> str:
        return f"{self.errors} errors found. {self.files_total} files total"


class _DuplicateKey(ValueError):
    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key


def _reject_duplicates(pairs: list[tuple[str, object]]) -> dict:
    result: dict = {}
    for key, value in pairs:
        if key in result:
            raise _DuplicateKey(key)
        result[key] = value
    return result


def _line_column(text: str, pos: int) -> tuple[int, int]:
    line = text.count("\n", 0, pos) + 1
    column = pos - (text.rfind("\n", 0, pos) + 1) + 1
    return line, column


def is_likely_utf8_bom(data: bytes) -> bool:
    """True if ``data`` starts with a UTF-8 byte order mark."""
    return data[:3] == UTF8_BOM


def _check(data: bytes) -> Optional[tuple[int, int, str]]:
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as ex:
        prefix = data[: ex.start].decode("utf-8", errors="replace")
        line, column = _line_column(prefix, len(prefix))
        return line, column, f"unable to decode byte 0x{data[ex.start]:x}"

    stripped = text.lstrip(" \t\r\n")
    if not stripped:
        line, column = _line_column(text, len(text))
        return line, column, "'[' or '{' expected near end of file"
    if stripped[0] not in "[{":
        pos = len(text) - len(stripped)
        line, column = _line_column(text, pos)
        return line, column, f"'[' or '{{' expected near '{stripped[0]}'"

    try:
        json.loads(text, object_pairs_hook=_reject_duplicates)
    except _DuplicateKey as dup:
        pattern = re.escape(json.dumps(dup.key)) + r"\s*:"
        matches = list(re.finditer(pattern, text))
        pos = matches[1].start() if len(matches) > 1 else 0
        line, column = _line_column(text, pos)
        return line, column, f"duplicate object key near '{dup.key}'"
    except json.JSONDecodeError as ex:
        return ex.lineno, ex.colno, ex.msg
    return None


def validate_file(path: PathLike) -> Optional[ValidationFailure]:
    """Validate one file; return the failure, or None if it holds valid JSON.

    Raises OSError if the file cannot be read.
    """
    data = Path(path).read_bytes()
    problem = _check(data)
    if problem is None:
        return None
    line, column, text = problem
    return ValidationFailure(
        path=Path(path),
        line=line,
        column=column,
        text=text,
        likely_bom=is_likely_utf8_bom(data),
    )


def iter_files(path: PathLike) -> Iterator[Path]:
    """Yield ``path`` if it is a file, or every regular file below it if a directory."""
    root = Path(path)
    if not root.exists():
        return
    if root.is_file():
        yield root
        return
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            candidate = Path(dirpath) / name
            if candidate.is_file():
                yield candidate


def validate_paths(paths: Iterable[PathLike]) -> ValidationReport:
    """Validate every file named or found below the given paths.

    Missing paths and unreadable files are skipped and not counted.
    """
    report = ValidationReport()
    for path in paths:
        for file_path in iter_files(path):
            try:
                failure = validate_file(file_path)
            except OSError:
                continue
            if failure is not None:
                report.failures.append(failure)
            report.files_total += 1
    return report


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if args:
        report = validate_paths(args)
        for failure in report.failures:
            print(failure.format())
        print(report.summary())
    else:
        print(APP_DESCRIPTION)

    print("press any key to close")
    if sys.stdin is not None and sys.stdin.isatty():
        try:
            input()
        except EOFError:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())