"""Error types with formatted source context."""

from __future__ import annotations

from enum import Enum

from tradiff.position import LineLocator
from tradiff.tokens import Span, Token


class LexErrorKind(Enum):
    INTEGER_OVERFLOW = "integer overflow"
    INVALID_DIGIT = "invalid digit"
    INVALID_INTEGER = "invalid integer"
    INVALID_TOKEN = "invalid token"


class ParseErrorKind(Enum):
    INVALID_TOKEN = "invalid token"
    UNRECOGNIZED_EOF = "unrecognized end of file"
    UNRECOGNIZED_TOKEN = "unrecognized token"
    EXTRA_TOKEN = "extra token"
    USER = "lexical error"


def _format_context(message: str, span: Span, source: str, filename: str) -> str:
    locator = LineLocator(source)
    pos = locator.locate_clamped(span.start)
    col = pos.column

    lines = source.split("\n")
    line_idx = pos.line - 1
    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\r")
    else:
        source_line = ""

    # Underline the span on its first line, at least one caret
    line_remaining = max(1, len(source_line) - col + 1)
    underline_len = max(1, min(span.end - span.start, line_remaining))

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(pos.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{pos.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class LexError(Exception):
    """Raised when no token rule matches, or a numeric literal does not fit."""

    def __init__(
        self,
        kind: LexErrorKind,
        message: str,
        span: Span,
        source: str,
        unterminated: bool = False,
    ) -> None:
        self.kind = kind
        self.message = message
        self.span = span
        self.source = source
        # True when a string, comment or sound delimiter is never closed
        self.unterminated = unterminated
        super().__init__(message)

    def __str__(self) -> str:
        return self.format()

    def format(self, filename: str = "input.tra") -> str:
        return _format_context(self.message, self.span, self.source, filename)


class ParseError(Exception):
    """Raised on fatal parse errors; also recorded for recovered ones."""

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        span: Span,
        source: str,
        token: Token | None = None,
        expected: tuple[str, ...] = (),
        lex_error: LexError | None = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.span = span
        self.source = source
        self.token = token
        self.expected = expected
        self.lex_error = lex_error
        super().__init__(message)

    def __str__(self) -> str:
        return self.format()

    @property
    def offset(self) -> int:
        return self.span.start

    def describe(self) -> str:
        """One-line description: message plus the expected set, if any."""
        if self.expected:
            return f"{self.message} (expected one of {', '.join(self.expected)})"
        return self.message

    def format(self, filename: str = "input.tra") -> str:
        return _format_context(self.describe(), self.span, self.source, filename)
