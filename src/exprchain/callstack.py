"""Reduce an expression to its access chain, e.g. ``$this->foo(1)->bar`` to
``["$this", "foo()", "bar"]``."""

from __future__ import annotations

import re
from collections.abc import Iterable

from exprchain.lexer import tokenize
from exprchain.offsets import decode, encode
from exprchain.pairs import find_matching_close, strip_pair_content
from exprchain.scanner import find_expression_start
from exprchain.tokens import COMMENT_KINDS, DEFAULT_BOUNDARY_KINDS, Tokenizer, TokenKind

_NEW_WRAPPER = re.compile(r"\(new\s")
_CLOSURE_SIGNATURE = re.compile(r"\bfunction\s*&?\s*(?:\w+\s*)?\(")

MEMBER_OPERATOR = "->"
STATIC_OPERATOR = "::"


def sanitize_call_stack(text: str, *, tokenizer: Tokenizer = tokenize) -> list[str]:
    """Split an expression into its access segments, left to right.

    Comments are dropped, call arguments and closure bodies are emptied, and
    the result is split on ``->`` and then on ``::``. Segments are trimmed but
    never dropped, so ``$foo->`` yields ``["$foo", ""]``.

    Comments are found by tokenizing, so ``//`` or ``/*`` inside a string
    literal is left alone.
    """
    text = _strip_comments(text.strip(), tokenizer).strip()
    text = _unwrap_instantiation(text)

    if _CLOSURE_SIGNATURE.search(text):
        text = strip_pair_content(text, "{", "}")

    text = strip_pair_content(text, "(", ")")

    if not text:
        return []

    return [
        segment.strip()
        for part in text.split(MEMBER_OPERATOR)
        for segment in part.split(STATIC_OPERATOR)
    ]


def extract_access_chain(
    source: str,
    cursor: int | None = None,
    *,
    boundary_kinds: Iterable[TokenKind] = DEFAULT_BOUNDARY_KINDS,
    tokenizer: Tokenizer = tokenize,
) -> list[str]:
    """Return the access chain of the expression ending at cursor (a byte offset).

    cursor defaults to the end of source.
    """
    data = encode(source)
    if cursor is None:
        cursor = len(data)

    start = find_expression_start(
        source, cursor, boundary_kinds=boundary_kinds, tokenizer=tokenizer
    )
    return sanitize_call_stack(decode(data[start:cursor]), tokenizer=tokenizer)


def _unwrap_instantiation(text: str) -> str:
    # In "(new Foo())->bar()" the outer parentheses are not part of the chain
    if not _NEW_WRAPPER.match(text):
        return text

    close = find_matching_close(text, 0, "(", ")")
    if close is None:
        return text
    return text[1:close] + text[close + 1 :]


def _strip_comments(text: str, tokenizer: Tokenizer) -> str:
    return "".join(tok.text for tok in tokenizer(text) if tok.kind not in COMMENT_KINDS)
