"""Entry-level diff of WeiDU translation (TRA) files."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tradiff.diff import TraDiff

__version__ = "0.1.0"


def compare_sources(first: str, second: str) -> TraDiff:
    """Parse two TRA sources and compare their entry ids.

    Raises ParseError if either source has a fatal error.
    """
    from tradiff.diff import compare, extract_entries
    from tradiff.parser import parse

    first_entries = extract_entries(parse(first).fragments)
    second_entries = extract_entries(parse(second).fragments)
    return compare(first_entries, second_entries)
