"""Token types and data structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # References
    ID = auto()  # @123, @-5
    TLK_REF = auto()  # #123

    # Operators
    EQUALS = auto()  # =
    CONCAT = auto()  # ^

    # String literals, value is the text between the delimiters
    FIVE_TILDE_STRING = auto()  # ~~~~~...~~~~~
    TILDE_STRING = auto()  # ~...~
    DOUBLE_QUOTE_STRING = auto()  # "..."
    PERCENT_STRING = auto()  # %...%

    # Comments, value is the interior text
    EOL_COMMENT = auto()  # // ...
    ENCLOSED_COMMENT = auto()  # /* ... */

    SOUND_REF = auto()  # [SOUND]

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Span:
    """Source range as character offsets, end exclusive."""

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with resolved value and original source text."""

    type: TokenType
    value: str | int
    raw: str
    span: Span


STRING_TOKENS: frozenset[TokenType] = frozenset(
    {
        TokenType.FIVE_TILDE_STRING,
        TokenType.TILDE_STRING,
        TokenType.DOUBLE_QUOTE_STRING,
        TokenType.PERCENT_STRING,
    }
)

COMMENT_TOKENS: frozenset[TokenType] = frozenset(
    {TokenType.EOL_COMMENT, TokenType.ENCLOSED_COMMENT}
)

_DISPLAY_NAMES: dict[TokenType, str] = {
    TokenType.ID: "@id",
    TokenType.TLK_REF: "#tlk",
    TokenType.EQUALS: "'='",
    TokenType.CONCAT: "'^'",
    TokenType.FIVE_TILDE_STRING: "~~~~~string~~~~~",
    TokenType.TILDE_STRING: "~string~",
    TokenType.DOUBLE_QUOTE_STRING: '"string"',
    TokenType.PERCENT_STRING: "%string%",
    TokenType.EOL_COMMENT: "// comment",
    TokenType.ENCLOSED_COMMENT: "/* comment */",
    TokenType.SOUND_REF: "[sound]",
    TokenType.EOF: "end of file",
}


def display_name(tt: TokenType) -> str:
    """Return the human-readable name of a token type, as used in diagnostics."""
    return _DISPLAY_NAMES[tt]
