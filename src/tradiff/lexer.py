"""TRA lexer: converts source text into a lazy token stream."""

from __future__ import annotations

from collections.abc import Iterator

from tradiff.errors import LexError, LexErrorKind
from tradiff.tokens import Span, Token, TokenType

_WHITESPACE = frozenset(" \t\n\f\r")
_DIGITS = frozenset("0123456789")

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_U64_MAX = 2**64 - 1

_FIVE_TILDES = "~~~~~"

_SIMPLE_STRINGS: dict[str, tuple[TokenType, str]] = {
    "~": (TokenType.TILDE_STRING, "tilde string"),
    '"': (TokenType.DOUBLE_QUOTE_STRING, "double-quoted string"),
    "%": (TokenType.PERCENT_STRING, "percent string"),
}


class Lexer:
    """Tokenize TRA source text one token at a time.

    The lexer holds no state between calls to next_token(), so it can be
    restarted at any offset. The parser relies on this to resynchronise
    after an error.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0

    def next_token(self, offset: int) -> Token:
        """Return the first token at or after *offset*.

        Whitespace is skipped. At end of input an EOF token is returned.
        The token's span end is the offset to resume from.
        """
        self._pos = offset
        self._skip_ws()
        if self._pos >= len(self._source):
            end = len(self._source)
            return Token(TokenType.EOF, "", "", Span(end, end))

        ch = self._peek()

        if ch == "@":
            return self._lex_number(TokenType.ID, signed=True)

        if ch == "#":
            return self._lex_number(TokenType.TLK_REF, signed=False)

        if ch == "=":
            return self._emit(TokenType.EQUALS, "=", self._pos, self._pos + 1)

        if ch == "^":
            return self._emit(TokenType.CONCAT, "^", self._pos, self._pos + 1)

        if ch == "~" and self._source.startswith(_FIVE_TILDES, self._pos):
            tok = self._lex_five_tilde_string()
            if tok is not None:
                return tok
            # No closing run, fall through to the single-tilde rule

        if ch in _SIMPLE_STRINGS:
            return self._lex_simple_string(ch)

        if ch == "/":
            nxt = self._peek(1)
            if nxt == "/":
                return self._lex_eol_comment()
            if nxt == "*":
                return self._lex_enclosed_comment()

        if ch == "[":
            return self._lex_sound_ref()

        raise self._error(
            LexErrorKind.INVALID_TOKEN,
            f"unexpected character {ch!r}",
            self._pos,
            self._pos + 1,
        )

    def tokens(self, offset: int = 0) -> Iterator[Token]:
        """Yield tokens lazily from *offset*, ending with EOF."""
        while True:
            tok = self.next_token(offset)
            yield tok
            if tok.type == TokenType.EOF:
                return
            offset = tok.span.end

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _skip_ws(self) -> None:
        while self._pos < len(self._source) and self._source[self._pos] in _WHITESPACE:
            self._pos += 1

    def _emit(self, tt: TokenType, value: str | int, start: int, end: int) -> Token:
        return Token(tt, value, self._source[start:end], Span(start, end))

    def _error(
        self,
        kind: LexErrorKind,
        message: str,
        start: int,
        end: int,
        unterminated: bool = False,
    ) -> LexError:
        return LexError(kind, message, Span(start, end), self._source, unterminated)

    # ------------------------------------------------------------------
    # Numbers: @id and #tlk
    # ------------------------------------------------------------------

    def _lex_number(self, tt: TokenType, signed: bool) -> Token:
        start = self._pos
        idx = start + 1
        if idx < len(self._source) and self._source[idx] == "-":
            idx += 1
        digits_start = idx
        while idx < len(self._source) and self._source[idx] in _DIGITS:
            idx += 1

        if idx == digits_start:
            raise self._error(
                LexErrorKind.INVALID_TOKEN,
                f"expected digits after {self._source[start]!r}",
                start,
                start + 1,
            )

        text = self._source[start + 1 : idx]
        if text.startswith("-") and not signed:
            raise self._error(
                LexErrorKind.INVALID_DIGIT,
                f"invalid digit in {self._source[start:idx]!r}: string references are unsigned",
                start,
                idx,
            )
        value = int(text)
        low, high = (_I64_MIN, _I64_MAX) if signed else (0, _U64_MAX)
        if not low <= value <= high:
            raise self._error(
                LexErrorKind.INTEGER_OVERFLOW,
                f"integer {self._source[start:idx]!r} is out of range",
                start,
                idx,
            )
        return self._emit(tt, value, start, idx)

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def _lex_five_tilde_string(self) -> Token | None:
        """Scan ~~~~~body~~~~~, or return None when there is no closing run.

        The body may hold runs of up to four tildes. The string closes at the
        first run of five or more: up to four leading tildes of that run stay
        in the body and the next five are the delimiter. Any tildes after
        that are left for the following token.
        """
        start = self._pos
        body_start = start + len(_FIVE_TILDES)
        close = self._source.find(_FIVE_TILDES, body_start)
        if close == -1:
            return None
        run_end = close
        while run_end < len(self._source) and self._source[run_end] == "~":
            run_end += 1
        body_end = close + min(run_end - close - len(_FIVE_TILDES), 4)
        return self._emit(
            TokenType.FIVE_TILDE_STRING,
            self._source[body_start:body_end],
            start,
            body_end + len(_FIVE_TILDES),
        )

    def _lex_simple_string(self, delimiter: str) -> Token:
        tt, name = _SIMPLE_STRINGS[delimiter]
        start = self._pos
        close = self._source.find(delimiter, start + 1)
        if close == -1:
            raise self._error(
                LexErrorKind.INVALID_TOKEN,
                f"unterminated {name}",
                start,
                start + 1,
                unterminated=True,
            )
        return self._emit(tt, self._source[start + 1 : close], start, close + 1)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _lex_eol_comment(self) -> Token:
        start = self._pos
        end = self._source.find("\n", start)
        if end == -1:
            end = len(self._source)
        text = self._source[start + 2 : end].removesuffix("\r")
        return self._emit(TokenType.EOL_COMMENT, text, start, end)

    def _lex_enclosed_comment(self) -> Token:
        start = self._pos
        close = self._source.find("*/", start + 2)
        if close == -1:
            raise self._error(
                LexErrorKind.INVALID_TOKEN,
                "unterminated comment",
                start,
                start + 2,
                unterminated=True,
            )
        return self._emit(
            TokenType.ENCLOSED_COMMENT,
            self._source[start + 2 : close],
            start,
            close + 2,
        )

    # ------------------------------------------------------------------
    # Sound references
    # ------------------------------------------------------------------

    def _lex_sound_ref(self) -> Token:
        start = self._pos
        close = self._source.find("]", start + 1)
        if close == -1:
            raise self._error(
                LexErrorKind.INVALID_TOKEN,
                "unterminated sound reference",
                start,
                start + 1,
                unterminated=True,
            )
        if close == start + 1:
            raise self._error(
                LexErrorKind.INVALID_TOKEN,
                "empty sound reference",
                start,
                close + 1,
            )
        return self._emit(TokenType.SOUND_REF, self._source[start + 1 : close], start, close + 1)


def tokenize(source: str) -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return list(Lexer(source).tokens())
