"""Backward scanner that finds where the expression ending at a cursor starts.

The scanner does not parse. It walks the bytes before the cursor from right to
left and stops as soon as it sees something that cannot belong to a member or
static access chain: an opening bracket that was never closed, a statement
delimiter, a keyword or operator from the boundary table, or the left edge of
a static class reference.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from exprchain.errors import InvalidOffsetError
from exprchain.lexer import tokenize
from exprchain.offsets import byte_length, decode, encode
from exprchain.tokens import (
    COMMENT_KINDS,
    DEFAULT_BOUNDARY_KINDS,
    Token,
    Tokenizer,
    TokenKind,
)

_OPENERS = {"(": "()", "[": "[]", "{": "{}"}
_CLOSERS = {")": "()", "]": "[]", "}": "{}"}

_DELIMITERS = frozenset(".,?;")

# Kinds that may make up a static class reference such as \Foo\Bar:: or static::
_STATIC_NAME_KINDS = frozenset(
    {
        TokenKind.DOUBLE_COLON,
        TokenKind.IDENTIFIER,
        TokenKind.NAMESPACE_SEPARATOR,
        TokenKind.STATIC,
    }
)


@dataclass(slots=True)
class BracketCounter:
    """Opened/closed counts for one kind of bracket."""

    opened: int = 0
    closed: int = 0

    @property
    def balanced(self) -> bool:
        return self.opened == self.closed


@dataclass(slots=True)
class _ScanState:
    token_index: int
    token_start: int
    brackets: dict[str, BracketCounter] = field(
        default_factory=lambda: {pair: BracketCounter() for pair in ("()", "[]", "{}")}
    )
    started_inside_string: bool | None = None
    started_static_name: bool = False

    def all_balanced(self) -> bool:
        return all(counter.balanced for counter in self.brackets.values())


def find_expression_start(
    source: str,
    cursor: int | None = None,
    *,
    boundary_kinds: Iterable[TokenKind] = DEFAULT_BOUNDARY_KINDS,
    tokenizer: Tokenizer = tokenize,
) -> int:
    """Return the byte offset at which the expression ending at cursor starts.

    cursor is a byte offset into the UTF-8 encoding of source and defaults to
    its end. The result is always between 0 and cursor.

    Raises InvalidOffsetError if cursor lies outside the source.
    """
    data = encode(source)
    if cursor is None:
        cursor = len(data)
    if not 0 <= cursor <= len(data):
        raise InvalidOffsetError(
            f"cursor offset {cursor} is outside the source (0..{len(data)})",
            cursor,
            len(data),
            source,
        )

    code = data[:cursor]
    if not code:
        return 0

    boundary = frozenset(boundary_kinds)
    tokens = tokenizer(decode(code))
    state = _ScanState(token_index=len(tokens), token_start=len(code))
    token: Token | None = None

    for i in range(len(code) - 1, -1, -1):
        if i < state.token_start and state.token_index > 0:
            state.token_index -= 1
            token = tokens[state.token_index]
            state.token_start = i + 1 - byte_length(token.text)

            if state.started_inside_string is None:
                state.started_inside_string = token.kind is TokenKind.STRING_LITERAL

        kind = token.kind if token is not None else None
        ch = chr(code[i])

        if kind in COMMENT_KINDS or (
            state.started_inside_string and kind is TokenKind.STRING_LITERAL
        ):
            # Comments can occur inside call stacks, skip over them
            pass
        elif ch in _CLOSERS:
            state.brackets[_CLOSERS[ch]].closed += 1

            if ch == "}" and state.brackets["()"].balanced:
                # A block outside of parentheses is not part of the call stack
                # (e.g. the end of an if statement), unless it is a dynamic
                # member access such as $foo->{$bar}.
                if _preceding_kind(tokens, state.token_index) is not TokenKind.VARIABLE:
                    return i + 1
        elif ch in _OPENERS:
            counter = state.brackets[_OPENERS[ch]]
            counter.opened += 1

            # Walking backwards, an opener that was never closed belongs to
            # an enclosing expression
            if counter.opened > counter.closed:
                return i + 1
        elif state.all_balanced():
            if (
                ch in _DELIMITERS
                or kind in boundary
                or (ch == ":" and kind is not TokenKind.DOUBLE_COLON)
            ):
                return i + 1
            if kind is TokenKind.DOUBLE_COLON:
                # Static class names (and self, parent, static) always start
                # the call stack
                state.started_static_name = True

        if state.started_static_name and kind not in _STATIC_NAME_KINDS:
            return i + 1

    return 0


def _preceding_kind(tokens: Sequence[Token], index: int) -> TokenKind | None:
    """Return the kind of the token just before tokens[index], if any."""
    if index > 0:
        return tokens[index - 1].kind
    return None
