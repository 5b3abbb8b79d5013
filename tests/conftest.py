"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from tradiff.ast import ExplicitTraEntry, Literal, TraEntry, TraFragment, WeiduStringLit
from tradiff.lexer import tokenize
from tradiff.parser import ParseResult, parse
from tradiff.strings import tilde
from tradiff.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns a ParseResult."""

    def _parse(source: str) -> ParseResult:
        return parse(source)

    return _parse


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str | int]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def entry(entry_id: int, lit: WeiduStringLit, **kwargs) -> TraEntry:
    """Build an explicit entry whose value is a single literal."""
    return TraEntry(entry_id, ExplicitTraEntry(Literal(lit), **kwargs))


def entries_with_ids(*ids: int) -> tuple[TraEntry, ...]:
    """Build placeholder entries carrying the given ids, in the given order."""
    return tuple(entry(i, tilde(f"text {i}")) for i in ids)


def entry_ids(fragments: tuple[TraFragment, ...]) -> list[int]:
    """Ids of the entry fragments, in file order."""
    return [f.id for f in fragments if isinstance(f, TraEntry)]
