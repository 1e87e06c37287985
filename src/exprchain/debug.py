"""--debug token dump to stderr."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TextIO

from exprchain.offsets import byte_length
from exprchain.tokens import Token


def dump_tokens(
    tokens: Sequence[Token], start: int | None = None, *, file: TextIO = sys.stderr
) -> None:
    """Print one line per token to *file*, marking the token where start falls."""
    file.write("Tokens\n")
    for tok in tokens:
        marker = ">" if start is not None and _contains(tok, start) else " "
        file.write(f"{marker} {tok.offset:>6}  {tok.kind.name:<20} {tok.text!r}\n")


def _contains(tok: Token, offset: int) -> bool:
    return tok.offset <= offset < tok.offset + byte_length(tok.text)
