"""Tests for entry values: concatenation, @ aliases and #tlk references."""

from __future__ import annotations

from tradiff.ast import (
    At,
    Concat,
    EntryAt,
    EntryTlk,
    ExplicitTraEntry,
    Literal,
    Ref,
    TraEntry,
)
from tradiff.strings import dquote, percent, tilde


class TestConcat:
    def test_single_concat(self, parse_source):
        result = parse_source('@1 = ~value~ ^ "suffix"')
        (parsed,) = result.fragments
        assert parsed.content == ExplicitTraEntry(
            Concat(Literal(tilde("value")), dquote("suffix"))
        )

    def test_chain_nests_innermost_first(self, parse_source):
        result = parse_source('@1 = ~value~ ^ "suffix" ^ "more"')
        (parsed,) = result.fragments
        value = parsed.content.value
        assert isinstance(value, Concat)
        assert value.right == dquote("more")
        assert isinstance(value.left, Concat)
        assert value.left.right == dquote("suffix")
        assert value.left.left == Literal(tilde("value"))

    def test_chain_of_n_literals_has_n_minus_one_nodes(self, parse_source):
        result = parse_source("@1 = ~a~ ^ ~b~ ^ ~c~ ^ ~d~")
        value = result.fragments[0].content.value
        depth = 0
        while isinstance(value, Concat):
            depth += 1
            value = value.left
        assert depth == 3

    def test_concat_with_sound(self, parse_source):
        result = parse_source("@1 = ~a~ ^ %b% [SND]")
        content = result.fragments[0].content
        assert content.sound == "SND"
        assert content.value == Concat(Literal(tilde("a")), percent("b"))

    def test_concat_in_alt_value(self, parse_source):
        result = parse_source("@1 = ~a~ ~b~ ^ ~c~")
        content = result.fragments[0].content
        assert content.value == Literal(tilde("a"))
        assert content.alt_value == Concat(Literal(tilde("b")), tilde("c"))


class TestAliasEntries:
    def test_bare_at(self, parse_source):
        result = parse_source("@1 = @2")
        assert result.fragments == (TraEntry(1, EntryAt(2)),)

    def test_bare_tlk(self, parse_source):
        result = parse_source("@1 = #1234")
        assert result.fragments == (TraEntry(1, EntryTlk(1234)),)

    def test_bare_at_followed_by_entry(self, parse_source):
        result = parse_source("@1 = @2 @3 = ~c~")
        assert result.fragments[0] == TraEntry(1, EntryAt(2))
        assert result.fragments[1].id == 3

    def test_at_with_sound_is_explicit(self, parse_source):
        result = parse_source("@1 = @2 [SND]")
        assert result.fragments == (
            TraEntry(1, ExplicitTraEntry(At(2), sound="SND")),
        )

    def test_tlk_with_alt_is_explicit(self, parse_source):
        result = parse_source("@1 = #10 #11")
        assert result.fragments == (
            TraEntry(1, ExplicitTraEntry(Ref(10), alt_value=Ref(11))),
        )

    def test_at_as_alt_value(self, parse_source):
        result = parse_source("@1 = ~a~ @7")
        assert result.fragments == (
            TraEntry(1, ExplicitTraEntry(Literal(tilde("a")), alt_value=At(7))),
        )

    def test_id_followed_by_equals_starts_new_entry(self, parse_source):
        result = parse_source("@1 = ~a~ @7 = ~b~")
        assert [f.id for f in result.fragments] == [1, 7]
        assert result.fragments[0].content == ExplicitTraEntry(Literal(tilde("a")))
