"""Minimal LSP server for exprchain: hover shows the access chain."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_HOVER,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from exprchain.callstack import sanitize_call_stack
from exprchain.offsets import (
    byte_offset_to_char_offset,
    char_offset_to_byte_offset,
    decode,
    encode,
    line_at,
)
from exprchain.scanner import find_expression_start
from exprchain.tokens import is_name_char

server = LanguageServer("exprchain-lsp", "0.1.0", text_document_sync_kind=TextDocumentSyncKind.Full)


def _hover(ls: LanguageServer, params: HoverParams) -> Hover | None:
    """Describe the access chain that ends with the word under the cursor."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    source = doc.source

    end = doc.offset_at_position(params.position)
    while end < len(source) and is_name_char(source[end]):
        end += 1

    cursor = char_offset_to_byte_offset(end, source)
    start = find_expression_start(source, cursor)
    chain = sanitize_call_stack(decode(encode(source)[start:cursor]))
    if not chain:
        return None

    begin = byte_offset_to_char_offset(start, source)
    while begin < end and source[begin].isspace():
        begin += 1

    value = "**Access chain**\n\n" + " → ".join(f"`{segment}`" for segment in chain)
    return Hover(
        contents=MarkupContent(kind=MarkupKind.Markdown, value=value),
        range=Range(start=_position(source, begin), end=_position(source, end)),
    )


def _position(source: str, char_offset: int) -> Position:
    line = line_at(source, char_offset_to_byte_offset(char_offset, source)) - 1
    column = char_offset - (source.rfind("\n", 0, char_offset) + 1)
    return Position(line=line, character=column)


@server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls: LanguageServer, params: HoverParams) -> Hover | None:
    return _hover(ls, params)


def main() -> None:
    server.start_io()
