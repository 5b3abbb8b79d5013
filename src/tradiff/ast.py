"""AST node types for parsed TRA files."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from tradiff.tokens import Span


class StringKind(Enum):
    """Quoting convention a literal was written with."""

    TILDE = auto()  # ~text~
    DOUBLE_QUOTE = auto()  # "text"
    PERCENT = auto()  # %text%
    FIVE_TILDES = auto()  # ~~~~~text~~~~~


@dataclass(frozen=True, slots=True)
class WeiduStringLit:
    """String literal payload, tagged with its delimiter style."""

    kind: StringKind
    value: str


@dataclass(frozen=True, slots=True)
class Literal:
    """A plain string literal."""

    lit: WeiduStringLit


@dataclass(frozen=True, slots=True)
class At:
    """Reference to another entry of the same file: @id."""

    id: int


@dataclass(frozen=True, slots=True)
class Ref:
    """Reference into the game string table: #index."""

    index: int


@dataclass(frozen=True, slots=True)
class Concat:
    """Left-recursive concatenation: left ^ right."""

    left: WeiduString
    right: WeiduStringLit


WeiduString = Literal | At | Ref | Concat


@dataclass(frozen=True, slots=True)
class ExplicitTraEntry:
    """An entry value with optional sound and optional alternate (female) variant."""

    value: WeiduString
    sound: str | None = None
    alt_value: WeiduString | None = None
    alt_sound: str | None = None

    @classmethod
    def simplest(cls, value: WeiduString) -> ExplicitTraEntry:
        return cls(value)

    @classmethod
    def with_sound(cls, value: WeiduString, sound: str) -> ExplicitTraEntry:
        return cls(value, sound=sound)

    @classmethod
    def with_female(cls, value: WeiduString, alt_value: WeiduString) -> ExplicitTraEntry:
        return cls(value, alt_value=alt_value)


@dataclass(frozen=True, slots=True)
class EntryAt:
    """Entry whose whole body is an alias to another entry."""

    id: int


@dataclass(frozen=True, slots=True)
class EntryTlk:
    """Entry whose whole body is a string table reference."""

    index: int


TraEntryContent = ExplicitTraEntry | EntryAt | EntryTlk


@dataclass(frozen=True, slots=True)
class TraEntry:
    """A numbered entry: @id = content."""

    id: int
    content: TraEntryContent
    span: Span | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class EndOfLineComment:
    text: str


@dataclass(frozen=True, slots=True)
class EnclosedComment:
    text: str


TraComment = EndOfLineComment | EnclosedComment


@dataclass(frozen=True, slots=True)
class ErrorFragment:
    """Placeholder for a malformed region; details are in the recovered error list."""


TraFragment = TraComment | TraEntry | ErrorFragment
