"""Terminal report: renders parse diagnostics and a TraDiff as text."""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from dataclasses import dataclass

from tradiff.diff import Duplicate, TraDiff
from tradiff.parser import RecoveredError
from tradiff.position import LineLocator

DEFAULT_WIDTH = 60


@dataclass(frozen=True, slots=True)
class Palette:
    """ANSI escape sequences, all empty when color is disabled."""

    red: str = ""
    green: str = ""
    orange: str = ""
    bold: str = ""
    reset: str = ""


PLAIN = Palette()
COLOR = Palette(
    red="\033[31m",
    green="\033[32m",
    orange="\033[38;2;255;165;0m",
    bold="\033[1m",
    reset="\033[0m",
)


@dataclass(frozen=True, slots=True)
class FileReport:
    """What the report needs to know about one compared file."""

    ordinal: str  # "first" / "second"
    path: str
    source: str
    errors: tuple[RecoveredError, ...]


def terminal_width(default: int = DEFAULT_WIDTH) -> int:
    return shutil.get_terminal_size((default, 24)).columns


def format_recovered_error(recovered: RecoveredError, locator: LineLocator) -> str:
    """One line: kind, line:column and description of a recovered error."""
    error = recovered.error
    pos = locator.locate_clamped(error.offset)
    return f"{error.kind.value} at {pos}: {error.describe()}"


def render_report(
    first: FileReport,
    second: FileReport,
    diff: TraDiff,
    palette: Palette = PLAIN,
    width: int = DEFAULT_WIDTH,
) -> str:
    """Render syntax errors, duplicates and the id difference."""
    p = palette
    parts: list[str] = []

    for file in (first, second):
        if file.errors:
            locator = LineLocator(file.source)
            items = [format_recovered_error(e, locator) for e in file.errors]
            parts.append(
                f"{p.red}ERROR{p.reset} The {file.ordinal} file ({file.path}) "
                f"contains syntax errors\n{_bullets(items)}\n"
            )

    if diff.has_duplicates:
        rule = f"{p.orange}{'━' * width}{p.reset}\n"
        parts.append("\n" + rule)
        for file, dups in (
            (first, diff.first_duplicates),
            (second, diff.second_duplicates),
        ):
            if dups:
                parts.append(
                    f"{p.orange}WARN{p.reset} The {file.ordinal} file ({file.path}) "
                    f"contains duplicated entries\n{_bullets(_dup_items(dups))}\n"
                )
        parts.append(rule + "\n")

    ids = diff.ids
    if ids.same_entries:
        parts.append(f"{p.green}Both files contain the same entries.{p.reset}\n")
    if ids.added:
        parts.append(
            f"{p.green}{p.bold}+{p.reset} Entries in the second file but not in the first file:\n"
            f"{_bullets(str(i) for i in ids.added)}\n"
        )
    if ids.removed:
        parts.append(
            f"{p.red}{p.bold}-{p.reset} Entries in the first file but not in the second file:\n"
            f"{_bullets(str(i) for i in ids.removed)}\n"
        )

    return "".join(parts)


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"  - {item}" for item in items)


def _dup_items(dups: tuple[Duplicate, ...]) -> list[str]:
    return [f"{d.id} ({d.count} times)" for d in dups]
