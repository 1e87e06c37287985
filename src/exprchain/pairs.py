"""Helpers for balanced open/close character pairs."""

from __future__ import annotations


def strip_pair_content(text: str, open_char: str, close_char: str) -> str:
    """Remove everything between each top-level balanced pair, keeping the pair.

    Nested pairs collapse together with the group that contains them, while
    sibling groups are collapsed one by one::

        >>> strip_pair_content("foo(bar(1, 2), 3)->baz(4)", "(", ")")
        'foo()->baz()'

    A group that is still open at the end of the text is left untouched, as is
    a close character that has no opener before it.
    """
    open_count = 0
    close_count = 0
    start_index = -1

    i = 0
    while i < len(text):
        ch = text[i]
        if ch == open_char:
            open_count += 1
            if open_count == 1:
                start_index = i
        elif ch == close_char and open_count > 0:
            close_count += 1
            if close_count == open_count:
                text = text[: start_index + 1] + text[i:]
                # Continue right after the (now adjacent) close character
                i = start_index + 1
                open_count = 0
                close_count = 0
        i += 1

    return text


def find_matching_close(text: str, start: int, open_char: str, close_char: str) -> int | None:
    """Return the index of the close_char balancing the open_char at start.

    Returns None if text[start] is not open_char or the pair is never closed.
    """
    if start >= len(text) or text[start] != open_char:
        return None

    depth = 0
    for i in range(start, len(text)):
        if text[i] == open_char:
            depth += 1
        elif text[i] == close_char:
            depth -= 1
            if depth == 0:
                return i
    return None
