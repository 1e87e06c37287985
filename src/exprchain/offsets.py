"""Conversions between byte offsets, character offsets and line numbers.

Byte offsets always refer to the UTF-8 encoding of the text. Characters that
were undecodable on input are carried as surrogate escapes, so they map back
to exactly one byte each.
"""

from __future__ import annotations

from exprchain.errors import InvalidOffsetError

ENCODING = "utf-8"
ERRORS = "surrogateescape"


def encode(text: str) -> bytes:
    """Encode text to the bytes that all byte offsets refer to."""
    return text.encode(ENCODING, ERRORS)


def decode(data: bytes) -> str:
    """Inverse of encode(); never raises."""
    return data.decode(ENCODING, ERRORS)


def byte_length(text: str) -> int:
    """Return the number of bytes text occupies once encoded."""
    if text.isascii():
        return len(text)
    return len(encode(text))


def line_at(source: str, byte_offset: int) -> int:
    """Return the 1-based line the byte offset is located at."""
    data = encode(source)
    _check(byte_offset, len(data), source, "byte")
    return data.count(b"\n", 0, byte_offset) + 1


def byte_offset_to_char_offset(byte_offset: int, text: str) -> int:
    """Return the number of characters in the first byte_offset bytes of text.

    The result is never larger than byte_offset. A multi-byte character that
    is cut in the middle by byte_offset is not counted.
    """
    _check(byte_offset, byte_length(text), text, "byte")
    if text.isascii():
        return byte_offset

    count = 0
    consumed = 0
    for ch in text:
        consumed += byte_length(ch)
        if consumed > byte_offset:
            break
        count += 1
    return count


def char_offset_to_byte_offset(char_offset: int, text: str) -> int:
    """Return the byte length of the first char_offset characters of text.

    The result is never smaller than char_offset.
    """
    _check(char_offset, len(text), text, "character")
    return byte_length(text[:char_offset])


def _check(offset: int, limit: int, source: str, unit: str) -> None:
    if not 0 <= offset <= limit:
        raise InvalidOffsetError(
            f"{unit} offset {offset} is outside the source (0..{limit})",
            offset,
            limit,
            source,
        )
