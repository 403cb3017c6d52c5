"""Minimal LSP server for crust — diagnostics only."""

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

from crust.errors import ParseError
from crust.lexer import Lexer
from crust.parser import Parser

server = LanguageServer("crust-lsp", "0.1.0", text_document_sync_kind=TextDocumentSyncKind.Full)


def _to_diagnostic(error: ParseError) -> Diagnostic:
    # Spans are 1-based, LSP positions 0-based
    start = error.span.start
    end = error.span.end
    end_col = end.column - 1
    if end.line == start.line and end.column == start.column:
        end_col += 1
    return Diagnostic(
        range=Range(
            start=Position(line=start.line - 1, character=start.column - 1),
            end=Position(line=end.line - 1, character=end_col),
        ),
        message=error.message,
        severity=DiagnosticSeverity.Error,
        source="crust",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Parse the document and publish one diagnostic per collected error."""
    doc = ls.workspace.get_text_document(uri)
    parser = Parser(Lexer(doc.source))
    parser.parse_program()

    diagnostics = [_to_diagnostic(error) for error in parser.diagnostics]
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
