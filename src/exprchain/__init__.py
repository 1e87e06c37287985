"""Find the PHP member/static access chain that ends at a cursor."""

from __future__ import annotations

from exprchain.callstack import extract_access_chain, sanitize_call_stack
from exprchain.errors import InvalidOffsetError, SourceUnavailableError
from exprchain.lexer import tokenize
from exprchain.offsets import byte_offset_to_char_offset, char_offset_to_byte_offset, line_at
from exprchain.pairs import strip_pair_content
from exprchain.scanner import find_expression_start
from exprchain.tokens import DEFAULT_BOUNDARY_KINDS, Token, TokenKind

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_BOUNDARY_KINDS",
    "InvalidOffsetError",
    "SourceUnavailableError",
    "Token",
    "TokenKind",
    "byte_offset_to_char_offset",
    "char_offset_to_byte_offset",
    "extract_access_chain",
    "find_expression_start",
    "line_at",
    "sanitize_call_stack",
    "strip_pair_content",
    "tokenize",
]
