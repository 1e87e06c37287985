"""Error types with formatted source context."""

from __future__ import annotations

from pathlib import Path


class InvalidOffsetError(ValueError):
    """Raised when an offset lies outside the text it refers to."""

    def __init__(self, message: str, offset: int, limit: int, source: str) -> None:
        self.message = message
        self.offset = offset
        self.limit = limit
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.php") -> str:
        # The offset is out of range, so point at the nearest end of the source
        position = len(self.source) if self.offset > self.limit else 0
        before = self.source[:position]
        line = before.count("\n") + 1
        col = position - (before.rfind("\n") + 1) + 1

        lines = self.source.splitlines(keepends=True)
        if 0 <= line - 1 < len(lines):
            source_line = lines[line - 1].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        pad = " " * (col - 1)

        line_num = str(line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}^"
        )


class SourceUnavailableError(Exception):
    """Raised when source code cannot be read from the given path."""

    def __init__(self, message: str, path: Path | None) -> None:
        self.message = message
        self.path = path
        super().__init__(self.format())

    def format(self) -> str:
        location = str(self.path) if self.path is not None else "<no file given>"
        return f"error: {self.message}\n  --> {location}"
