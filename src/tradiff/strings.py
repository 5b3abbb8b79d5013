"""String literal builders, re-quoting and flattening."""

from __future__ import annotations

from tradiff.ast import At, Concat, Literal, Ref, StringKind, WeiduString, WeiduStringLit

_DELIMITERS: dict[StringKind, str] = {
    StringKind.TILDE: "~",
    StringKind.DOUBLE_QUOTE: '"',
    StringKind.PERCENT: "%",
    StringKind.FIVE_TILDES: "~~~~~",
}


def tilde(value: str) -> WeiduStringLit:
    return WeiduStringLit(StringKind.TILDE, value)


def dquote(value: str) -> WeiduStringLit:
    return WeiduStringLit(StringKind.DOUBLE_QUOTE, value)


def percent(value: str) -> WeiduStringLit:
    return WeiduStringLit(StringKind.PERCENT, value)


def ftildes(value: str) -> WeiduStringLit:
    return WeiduStringLit(StringKind.FIVE_TILDES, value)


def quote(lit: WeiduStringLit) -> str:
    """Return the literal as it was written, delimiters included."""
    delimiter = _DELIMITERS[lit.kind]
    return f"{delimiter}{lit.value}{delimiter}"


def to_source(value: WeiduString) -> str:
    """Render a WeiduString back to TRA syntax."""
    if isinstance(value, Literal):
        return quote(value.lit)
    if isinstance(value, At):
        return f"@{value.id}"
    if isinstance(value, Ref):
        return f"#{value.index}"
    return f"{to_source(value.left)} ^ {quote(value.right)}"


def flatten(value: WeiduString) -> str:
    """Return the display text of a WeiduString.

    Concatenations are joined; references are kept in their @id / #index form
    since their text lives elsewhere.
    """
    if isinstance(value, Literal):
        return value.lit.value
    if isinstance(value, Concat):
        return flatten(value.left) + value.right.value
    return to_source(value)
