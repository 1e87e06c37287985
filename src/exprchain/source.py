"""Reading PHP source from files or stdin and normalizing it to text."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import BinaryIO

from charset_normalizer import from_bytes

from exprchain.errors import SourceUnavailableError
from exprchain.offsets import decode


def get_source_code(
    path: Path | None,
    *,
    stdin: bool = False,
    stream: BinaryIO | None = None,
) -> str:
    """Return the source code of path, or of stdin when stdin is True.

    Reading stdin blocks until the stream is closed. It never raises
    SourceUnavailableError.
    """
    if stdin:
        raw = (stream if stream is not None else sys.stdin.buffer).read()
        return decode_source(raw)

    if path is None:
        raise SourceUnavailableError("no source file given", path)
    if not path.is_file():
        raise SourceUnavailableError("the specified file does not exist", path)

    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise SourceUnavailableError(f"cannot read file: {exc.strerror or exc}", path) from exc
    return decode_source(raw)


def decode_source(raw: bytes) -> str:
    """Decode raw source bytes, converting from a detected encoding if needed.

    UTF-8 (and therefore ASCII) input is used as is. Anything else goes
    through charset detection. If detection gives no answer the bytes are
    treated as UTF-8 anyway, undecodable bytes surviving as surrogate escapes.
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw).best()
    if best is None:
        return decode(raw)
    return str(best)
