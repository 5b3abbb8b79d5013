"""--debug fragment dump to stderr."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from tradiff.ast import (
    Concat,
    EnclosedComment,
    EndOfLineComment,
    EntryAt,
    EntryTlk,
    ErrorFragment,
    ExplicitTraEntry,
    TraEntry,
    TraFragment,
)
from tradiff.strings import flatten, to_source


def dump_fragments(
    fragments: Iterable[TraFragment], title: str = "File", *, file: TextIO = sys.stderr
) -> None:
    """Print a human-readable fragment tree to *file*."""
    file.write(f"{title}\n")
    for frag in fragments:
        _dump_fragment(frag, 1, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_fragment(frag: TraFragment, depth: int, f: TextIO) -> None:
    if isinstance(frag, TraEntry):
        _dump_entry(frag, depth, f)
    elif isinstance(frag, EndOfLineComment):
        f.write(f"{_indent(depth)}EndOfLineComment({frag.text!r})\n")
    elif isinstance(frag, EnclosedComment):
        f.write(f"{_indent(depth)}EnclosedComment({frag.text!r})\n")
    elif isinstance(frag, ErrorFragment):
        f.write(f"{_indent(depth)}Error\n")


def _dump_entry(entry: TraEntry, depth: int, f: TextIO) -> None:
    content = entry.content
    if isinstance(content, EntryAt):
        f.write(f"{_indent(depth)}Entry @{entry.id} = At(@{content.id})\n")
    elif isinstance(content, EntryTlk):
        f.write(f"{_indent(depth)}Entry @{entry.id} = Tlk(#{content.index})\n")
    elif isinstance(content, ExplicitTraEntry):
        f.write(f"{_indent(depth)}Entry @{entry.id}\n")
        f.write(f"{_indent(depth + 1)}value {to_source(content.value)}\n")
        if isinstance(content.value, Concat):
            f.write(f"{_indent(depth + 2)}text {flatten(content.value)!r}\n")
        if content.sound is not None:
            f.write(f"{_indent(depth + 1)}sound [{content.sound}]\n")
        if content.alt_value is not None:
            f.write(f"{_indent(depth + 1)}alt_value {to_source(content.alt_value)}\n")
        if content.alt_sound is not None:
            f.write(f"{_indent(depth + 1)}alt_sound [{content.alt_sound}]\n")
