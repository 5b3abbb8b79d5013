"""Minimal LSP server for TRA files, diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from tradiff import __version__
from tradiff.ast import TraEntry
from tradiff.diff import find_duplicates
from tradiff.errors import ParseError
from tradiff.parser import parse
from tradiff.position import LineLocator
from tradiff.tokens import Span

server = LanguageServer(
    "tradiff-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _range(locator: LineLocator, span: Span) -> Range:
    start = locator.locate_clamped(span.start)
    end = locator.locate_clamped(max(span.start, span.end - 1))
    return Range(
        start=Position(line=start.line - 1, character=start.column - 1),
        end=Position(line=end.line - 1, character=end.column),
    )


def _error_diagnostic(locator: LineLocator, error: ParseError) -> Diagnostic:
    return Diagnostic(
        range=_range(locator, error.span),
        message=error.describe(),
        severity=DiagnosticSeverity.Error,
        source="tradiff",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Parse the TRA document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    locator = LineLocator(source)
    diagnostics: list[Diagnostic] = []

    try:
        result = parse(source)
    except ParseError as exc:
        diagnostics.append(_error_diagnostic(locator, exc))
    else:
        for recovered in result.errors:
            diagnostics.append(_error_diagnostic(locator, recovered.error))

        entries = [frag for frag in result.fragments if isinstance(frag, TraEntry)]
        duplicated = {dup.id for dup in find_duplicates(entries)}
        for entry in entries:
            if entry.id in duplicated and entry.span is not None:
                diagnostics.append(
                    Diagnostic(
                        range=_range(locator, entry.span),
                        message=f"entry @{entry.id} is defined more than once",
                        severity=DiagnosticSeverity.Warning,
                        source="tradiff",
                    )
                )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
