"""Decoding of raw TRA file bytes into text."""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CHARSET = "utf-8"

# Checked longest first so a UTF-8 BOM is not mistaken for something shorter
_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


class DecodeError(Exception):
    """Raised when a charset label is not a known encoding."""


@dataclass(frozen=True, slots=True)
class Decoded:
    """Decoded text, the encoding actually used, and whether bytes were replaced."""

    text: str
    encoding: str
    lossy: bool


def resolve_charset(label: str) -> str:
    """Return the canonical codec name for a charset label."""
    try:
        return codecs.lookup(label.strip()).name
    except LookupError:
        raise DecodeError(f"unknown charset '{label}'") from None


def decode(data: bytes, charset: str | None = None) -> Decoded:
    """Decode *data* using *charset* (default UTF-8).

    A byte order mark wins over the label and is stripped. Malformed
    sequences are replaced with U+FFFD and reported through ``lossy``.
    """
    encoding = resolve_charset(charset or DEFAULT_CHARSET)
    for bom, bom_encoding in _BOMS:
        if data.startswith(bom):
            encoding = resolve_charset(bom_encoding)
            data = data[len(bom) :]
            break

    try:
        return Decoded(data.decode(encoding), encoding, False)
    except UnicodeDecodeError:
        return Decoded(data.decode(encoding, errors="replace"), encoding, True)


def read_tra(path: Path, charset: str | None = None) -> Decoded:
    """Read and decode a TRA file."""
    return decode(path.read_bytes(), charset)
