"""Entry projection and id-level comparison of two TRA files."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from tradiff.ast import TraEntry, TraFragment


@dataclass(frozen=True, slots=True)
class Duplicate:
    """An id defined more than once in one file."""

    id: int
    count: int


@dataclass(frozen=True, slots=True)
class IdDiff:
    """Set difference of entry ids, each tuple ascending."""

    added: tuple[int, ...]
    removed: tuple[int, ...]
    unchanged: tuple[int, ...]

    @property
    def same_entries(self) -> bool:
        return not self.added and not self.removed


@dataclass(frozen=True, slots=True)
class TraDiff:
    """Full comparison of a first (old) and second (new) file."""

    first_duplicates: tuple[Duplicate, ...]
    second_duplicates: tuple[Duplicate, ...]
    ids: IdDiff

    @property
    def has_duplicates(self) -> bool:
        return bool(self.first_duplicates or self.second_duplicates)


def extract_entries(fragments: Iterable[TraFragment]) -> tuple[TraEntry, ...]:
    """Keep only the entries, sorted by id; equal ids keep their file order."""
    entries = [frag for frag in fragments if isinstance(frag, TraEntry)]
    return tuple(sorted(entries, key=lambda entry: entry.id))


def find_duplicates(entries: Iterable[TraEntry]) -> tuple[Duplicate, ...]:
    """Return ids occurring more than once, ascending by id."""
    counts = Counter(entry.id for entry in entries)
    return tuple(
        Duplicate(entry_id, count)
        for entry_id, count in sorted(counts.items())
        if count > 1
    )


def diff_ids(first: Iterable[TraEntry], second: Iterable[TraEntry]) -> IdDiff:
    """Compare the distinct ids of two entry lists."""
    first_ids = {entry.id for entry in first}
    second_ids = {entry.id for entry in second}
    return IdDiff(
        added=tuple(sorted(second_ids - first_ids)),
        removed=tuple(sorted(first_ids - second_ids)),
        unchanged=tuple(sorted(first_ids & second_ids)),
    )


def compare(first: Sequence[TraEntry], second: Sequence[TraEntry]) -> TraDiff:
    """Compute duplicates for each file and the id set difference between them."""
    return TraDiff(
        first_duplicates=find_duplicates(first),
        second_duplicates=find_duplicates(second),
        ids=diff_ids(first, second),
    )
