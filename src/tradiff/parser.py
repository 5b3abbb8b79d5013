"""TRA parser: converts the token stream into fragments, recovering from errors."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from tradiff.ast import (
    At,
    Concat,
    EnclosedComment,
    EndOfLineComment,
    EntryAt,
    EntryTlk,
    ErrorFragment,
    ExplicitTraEntry,
    Literal,
    Ref,
    StringKind,
    TraEntry,
    TraEntryContent,
    TraFragment,
    WeiduString,
    WeiduStringLit,
)
from tradiff.errors import LexError, LexErrorKind, ParseError, ParseErrorKind
from tradiff.lexer import Lexer
from tradiff.tokens import COMMENT_TOKENS, STRING_TOKENS, Span, Token, TokenType, display_name


@dataclass(frozen=True, slots=True)
class RecoveredError:
    """A parse error the parser resynchronised past, with the tokens it skipped."""

    error: ParseError
    dropped_tokens: tuple[Token, ...]


@dataclass(frozen=True, slots=True)
class ParseResult:
    fragments: tuple[TraFragment, ...]
    errors: tuple[RecoveredError, ...]


class Parser:
    """Recursive descent parser for TRA files.

    Parsing continues past malformed entries: each one is replaced by an
    ErrorFragment and its error is recorded, then the parser skips ahead to
    the next token that can start a fragment. End of input inside an entry,
    an unclosed delimiter, or any error before the first fragment is fatal
    and raised as ParseError.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._lexer = Lexer(source)
        self._offset = 0
        self._lookahead: list[Token] = []

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        while len(self._lookahead) <= offset:
            if self._lookahead:
                last = self._lookahead[-1]
                if last.type == TokenType.EOF:
                    return last
                start = last.span.end
            else:
                start = self._offset
            self._lookahead.append(self._lexer.next_token(start))
        return self._lookahead[offset]

    def _at(self, *types: TokenType) -> bool:
        return self._peek().type in types

    def _check(self, *types: TokenType) -> bool:
        """Like _at, but a lexical error at the cursor counts as no match.

        Used where the next token is optional, so a bad token after a complete
        entry is reported on its own instead of discarding that entry.
        """
        try:
            return self._peek().type in types
        except LexError:
            return False

    def _advance(self) -> Token:
        tok = self._peek()
        if tok.type != TokenType.EOF:
            self._lookahead.pop(0)
            self._offset = tok.span.end
        return tok

    def _expect(self, tt: TokenType) -> Token:
        tok = self._peek()
        if tok.type != tt:
            raise self._unexpected(tok, (display_name(tt),))
        return self._advance()

    def _id_starts_entry(self) -> bool:
        """True when the @id at the cursor is followed by '=' and so begins a new entry."""
        try:
            return self._peek(1).type == TokenType.EQUALS
        except LexError:
            # Read the id as a value; the bad token is reported once, after the entry
            return False

    # ------------------------------------------------------------------
    # File level
    # ------------------------------------------------------------------

    def parse(self, errors: Sequence[RecoveredError] = ()) -> ParseResult:
        fragments: list[TraFragment] = []
        recovered: list[RecoveredError] = list(errors)

        while True:
            try:
                if self._at(TokenType.EOF):
                    break
                fragments.append(self._parse_fragment())
                continue
            except LexError as exc:
                error = self._wrap_lex_error(exc)
                if exc.unterminated or not fragments:
                    raise error from exc
                if not self._lookahead:
                    self._offset = exc.span.end
            except ParseError as exc:
                if exc.kind == ParseErrorKind.UNRECOGNIZED_EOF or not fragments:
                    raise
                error = exc

            dropped = self._synchronize()
            recovered.append(RecoveredError(error, dropped))
            fragments.append(ErrorFragment())

        return ParseResult(tuple(fragments), tuple(recovered))

    def _synchronize(self) -> tuple[Token, ...]:
        """Skip input up to the next token that can start a fragment."""
        dropped: list[Token] = []
        while True:
            try:
                tok = self._peek()
            except LexError as exc:
                if exc.unterminated:
                    raise self._wrap_lex_error(exc) from exc
                # Unmatched input inside the skipped region is part of the same error
                self._offset = exc.span.end
                continue
            if tok.type in _FRAGMENT_START or tok.type == TokenType.EOF:
                return tuple(dropped)
            dropped.append(self._advance())

    def _parse_fragment(self) -> TraFragment:
        tok = self._peek()

        if tok.type == TokenType.ID:
            return self._parse_entry()

        if tok.type == TokenType.EOL_COMMENT:
            self._advance()
            return EndOfLineComment(str(tok.value))

        if tok.type == TokenType.ENCLOSED_COMMENT:
            self._advance()
            return EnclosedComment(str(tok.value))

        raise ParseError(
            ParseErrorKind.EXTRA_TOKEN,
            f"unexpected {_describe(tok)} outside of an entry",
            tok.span,
            self._source,
            token=tok,
        )

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def _parse_entry(self) -> TraEntry:
        id_tok = self._advance()  # consume ID
        self._expect(TokenType.EQUALS)
        content = self._parse_entry_body()
        return TraEntry(int(id_tok.value), content, Span(id_tok.span.start, self._offset))

    def _parse_entry_body(self) -> TraEntryContent:
        value = self._parse_weidu_string()
        sound = self._parse_optional_sound()

        alt_value: WeiduString | None = None
        alt_sound: str | None = None
        if self._at_weidu_string_start():
            alt_value = self._parse_weidu_string()
            alt_sound = self._parse_optional_sound()

        # A lone reference is an alias entry, not an explicit value
        if sound is None and alt_value is None:
            if isinstance(value, At):
                return EntryAt(value.id)
            if isinstance(value, Ref):
                return EntryTlk(value.index)

        return ExplicitTraEntry(value, sound, alt_value, alt_sound)

    def _parse_optional_sound(self) -> str | None:
        if self._check(TokenType.SOUND_REF):
            return str(self._advance().value)
        return None

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def _at_weidu_string_start(self) -> bool:
        if self._check(*STRING_TOKENS, TokenType.TLK_REF):
            return True
        if self._check(TokenType.ID):
            return not self._id_starts_entry()
        return False

    def _parse_weidu_string(self) -> WeiduString:
        tok = self._peek()

        if tok.type == TokenType.ID and not self._id_starts_entry():
            self._advance()
            return At(int(tok.value))

        if tok.type == TokenType.TLK_REF:
            self._advance()
            return Ref(int(tok.value))

        if tok.type in STRING_TOKENS:
            value: WeiduString = Literal(self._parse_literal())
            while self._check(TokenType.CONCAT):
                self._advance()
                value = Concat(value, self._parse_literal())
            return value

        raise self._unexpected(tok, _EXPECTED_VALUE)

    def _parse_literal(self) -> WeiduStringLit:
        tok = self._peek()
        if tok.type not in STRING_TOKENS:
            raise self._unexpected(tok, _EXPECTED_LITERAL)
        self._advance()
        return WeiduStringLit(_LITERAL_KINDS[tok.type], str(tok.value))

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _unexpected(self, tok: Token, expected: tuple[str, ...]) -> ParseError:
        if tok.type == TokenType.EOF:
            return ParseError(
                ParseErrorKind.UNRECOGNIZED_EOF,
                "reached the end of file but the entry is incomplete",
                tok.span,
                self._source,
                expected=expected,
            )
        return ParseError(
            ParseErrorKind.UNRECOGNIZED_TOKEN,
            f"unexpected {_describe(tok)}",
            tok.span,
            self._source,
            token=tok,
            expected=expected,
        )

    def _wrap_lex_error(self, exc: LexError) -> ParseError:
        if exc.kind == LexErrorKind.INVALID_TOKEN and not exc.unterminated:
            kind = ParseErrorKind.INVALID_TOKEN
        else:
            kind = ParseErrorKind.USER
        return ParseError(kind, exc.message, exc.span, self._source, lex_error=exc)


# Module-level constants
_FRAGMENT_START: frozenset[TokenType] = frozenset({TokenType.ID}) | COMMENT_TOKENS
_LITERAL_KINDS: dict[TokenType, StringKind] = {
    TokenType.TILDE_STRING: StringKind.TILDE,
    TokenType.DOUBLE_QUOTE_STRING: StringKind.DOUBLE_QUOTE,
    TokenType.PERCENT_STRING: StringKind.PERCENT,
    TokenType.FIVE_TILDE_STRING: StringKind.FIVE_TILDES,
}
_EXPECTED_LITERAL: tuple[str, ...] = tuple(display_name(tt) for tt in _LITERAL_KINDS)
_EXPECTED_VALUE: tuple[str, ...] = _EXPECTED_LITERAL + (
    display_name(TokenType.ID),
    display_name(TokenType.TLK_REF),
)


def _describe(tok: Token) -> str:
    raw = tok.raw if len(tok.raw) <= 24 else tok.raw[:21] + "..."
    return f"{display_name(tok.type)} {raw!r}"


def parse(source: str, errors: Sequence[RecoveredError] = ()) -> ParseResult:
    """Convenience function: parse TRA source text.

    *errors* seeds the recovered-error accumulator; the result carries it
    extended with the errors of this parse. Raises ParseError on fatal errors.
    """
    return Parser(source).parse(errors)
