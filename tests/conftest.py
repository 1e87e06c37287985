"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from exprchain.callstack import extract_access_chain
from exprchain.lexer import tokenize
from exprchain.scanner import find_expression_start
from exprchain.tokens import Token, TokenKind


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns the token list."""

    def _lex(source: str) -> list[Token]:
        return tokenize(source)

    return _lex


@pytest.fixture
def kinds():
    """Return a helper that tokenizes source and returns the kinds, minus whitespace."""

    def _kinds(source: str) -> list[TokenKind]:
        return [t.kind for t in tokenize(source) if t.kind != TokenKind.WHITESPACE]

    return _kinds


@pytest.fixture
def expression():
    """Return a helper giving the text of the expression that ends the source."""

    def _expression(source: str) -> str:
        data = source.encode("utf-8")
        return data[find_expression_start(source) :].decode("utf-8")

    return _expression


@pytest.fixture
def chain():
    """Return a helper giving the access chain that ends the source."""

    def _chain(source: str) -> list[str]:
        return extract_access_chain(source)

    return _chain
