"""PHP lexer: converts source text into a flat, gap-free token stream.

The lexer is total. Unterminated strings, comments and heredocs simply run to
the end of the input, since the text being scanned usually ends at an
editor cursor in the middle of a statement.
"""

from __future__ import annotations

import re
from enum import Enum, auto

from exprchain.offsets import byte_length
from exprchain.tokens import Token, TokenKind, is_name_char, is_name_start


class _State(Enum):
    CODE = auto()
    INLINE_HTML = auto()


_KEYWORDS: dict[str, TokenKind] = {
    "abstract": TokenKind.ABSTRACT,
    "and": TokenKind.LOGICAL_AND,
    "array": TokenKind.ARRAY,
    "as": TokenKind.AS,
    "break": TokenKind.BREAK,
    "callable": TokenKind.CALLABLE,
    "case": TokenKind.CASE,
    "catch": TokenKind.CATCH,
    "class": TokenKind.CLASS,
    "clone": TokenKind.CLONE,
    "const": TokenKind.CONST,
    "continue": TokenKind.CONTINUE,
    "declare": TokenKind.DECLARE,
    "default": TokenKind.DEFAULT,
    "die": TokenKind.EXIT,
    "do": TokenKind.DO,
    "echo": TokenKind.ECHO,
    "else": TokenKind.ELSE,
    "elseif": TokenKind.ELSEIF,
    "empty": TokenKind.EMPTY,
    "enddeclare": TokenKind.ENDDECLARE,
    "endfor": TokenKind.ENDFOR,
    "endforeach": TokenKind.ENDFOREACH,
    "endif": TokenKind.ENDIF,
    "endswitch": TokenKind.ENDSWITCH,
    "endwhile": TokenKind.ENDWHILE,
    "eval": TokenKind.EVAL,
    "exit": TokenKind.EXIT,
    "extends": TokenKind.EXTENDS,
    "final": TokenKind.FINAL,
    "finally": TokenKind.FINALLY,
    "for": TokenKind.FOR,
    "foreach": TokenKind.FOREACH,
    "function": TokenKind.FUNCTION,
    "global": TokenKind.GLOBAL,
    "goto": TokenKind.GOTO,
    "if": TokenKind.IF,
    "implements": TokenKind.IMPLEMENTS,
    "include": TokenKind.INCLUDE,
    "include_once": TokenKind.INCLUDE_ONCE,
    "instanceof": TokenKind.INSTANCEOF,
    "insteadof": TokenKind.INSTEADOF,
    "interface": TokenKind.INTERFACE,
    "isset": TokenKind.ISSET,
    "list": TokenKind.LIST,
    "namespace": TokenKind.NAMESPACE,
    "new": TokenKind.NEW,
    "or": TokenKind.LOGICAL_OR,
    "print": TokenKind.PRINT,
    "private": TokenKind.PRIVATE,
    "protected": TokenKind.PROTECTED,
    "public": TokenKind.PUBLIC,
    "require": TokenKind.REQUIRE,
    "require_once": TokenKind.REQUIRE_ONCE,
    "return": TokenKind.RETURN,
    "static": TokenKind.STATIC,
    "switch": TokenKind.SWITCH,
    "throw": TokenKind.THROW,
    "trait": TokenKind.TRAIT,
    "try": TokenKind.TRY,
    "unset": TokenKind.UNSET,
    "use": TokenKind.USE,
    "var": TokenKind.VAR,
    "while": TokenKind.WHILE,
    "xor": TokenKind.LOGICAL_XOR,
    "yield": TokenKind.YIELD,
}

# Longest operators first so that e.g. "**=" wins over "**"
_OPERATORS: tuple[tuple[str, TokenKind], ...] = (
    ("<=>", TokenKind.SPACESHIP),
    ("**=", TokenKind.POW_EQUAL),
    ("...", TokenKind.ELLIPSIS),
    ("<<=", TokenKind.SL_EQUAL),
    (">>=", TokenKind.SR_EQUAL),
    ("===", TokenKind.IS_IDENTICAL),
    ("!==", TokenKind.IS_NOT_IDENTICAL),
    ("::", TokenKind.DOUBLE_COLON),
    ("->", TokenKind.OBJECT_OPERATOR),
    ("=>", TokenKind.DOUBLE_ARROW),
    ("++", TokenKind.INC),
    ("--", TokenKind.DEC),
    ("==", TokenKind.IS_EQUAL),
    ("!=", TokenKind.IS_NOT_EQUAL),
    ("<>", TokenKind.IS_NOT_EQUAL),
    ("<=", TokenKind.IS_SMALLER_OR_EQUAL),
    (">=", TokenKind.IS_GREATER_OR_EQUAL),
    ("+=", TokenKind.PLUS_EQUAL),
    ("-=", TokenKind.MINUS_EQUAL),
    ("*=", TokenKind.MUL_EQUAL),
    ("/=", TokenKind.DIV_EQUAL),
    (".=", TokenKind.CONCAT_EQUAL),
    ("%=", TokenKind.MOD_EQUAL),
    ("&=", TokenKind.AND_EQUAL),
    ("|=", TokenKind.OR_EQUAL),
    ("^=", TokenKind.XOR_EQUAL),
    ("&&", TokenKind.BOOLEAN_AND),
    ("||", TokenKind.BOOLEAN_OR),
    ("??", TokenKind.COALESCE),
    ("<<", TokenKind.SL),
    (">>", TokenKind.SR),
    ("**", TokenKind.POW),
)

_TRIVIA = frozenset({TokenKind.WHITESPACE, TokenKind.COMMENT, TokenKind.DOC_COMMENT})

_HEREDOC_START = re.compile(r"<<<[ \t]*(['\"]?)([^\W\d]\w*)\1\r?\n")


class Lexer:
    """Tokenize PHP source text into a list of Token objects."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._byte_pos = 0
        self._tokens: list[Token] = []
        self._state = _State.CODE
        self._last_kind: TokenKind | None = None

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        while self._pos < len(self._source):
            if self._state == _State.INLINE_HTML:
                self._lex_inline_html()
            else:
                self._lex_code()
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _at(self, text: str) -> bool:
        return self._source.startswith(text, self._pos)

    def _emit(self, kind: TokenKind, start: int) -> Token:
        text = self._source[start : self._pos]
        tok = Token(kind, text, self._byte_pos)
        self._byte_pos += byte_length(text)
        self._tokens.append(tok)
        if kind not in _TRIVIA:
            self._last_kind = kind
        return tok

    # ------------------------------------------------------------------
    # Inline HTML
    # ------------------------------------------------------------------

    def _lex_inline_html(self) -> None:
        start = self._pos
        end = self._source.find("<?", self._pos)
        self._pos = len(self._source) if end == -1 else end
        if self._pos > start:
            self._emit(TokenKind.INLINE_HTML, start)
        self._state = _State.CODE

    # ------------------------------------------------------------------
    # PHP code
    # ------------------------------------------------------------------

    def _lex_code(self) -> None:
        ch = self._peek()
        start = self._pos

        if ch in " \t\r\n":
            while self._peek() and self._peek() in " \t\r\n":
                self._pos += 1
            self._emit(TokenKind.WHITESPACE, start)
            return

        if self._at("<?"):
            self._lex_open_tag()
            return

        if self._at("?>"):
            self._pos += 2
            if self._at("\r\n"):
                self._pos += 2
            elif self._at("\n"):
                self._pos += 1
            self._emit(TokenKind.CLOSE_TAG, start)
            self._state = _State.INLINE_HTML
            return

        if ch == "#" or self._at("//"):
            self._lex_line_comment()
            return

        if self._at("/*"):
            end = self._source.find("*/", self._pos + 2)
            self._pos = len(self._source) if end == -1 else end + 2
            self._emit(TokenKind.DOC_COMMENT, start)
            return

        if ch == "$" and is_name_start(self._peek(1)):
            self._pos += 1
            self._consume_name()
            self._emit(TokenKind.VARIABLE, start)
            return

        if ch in "'\"`":
            self._lex_quoted(ch)
            return

        if self._at("<<<") and self._lex_heredoc():
            return

        if is_name_start(ch):
            self._lex_name()
            return

        if ch.isdigit() or (ch == "." and self._peek(1).isdigit()):
            self._lex_number()
            return

        if ch == "\\":
            self._pos += 1
            self._emit(TokenKind.NAMESPACE_SEPARATOR, start)
            return

        for text, kind in _OPERATORS:
            if self._at(text):
                self._pos += len(text)
                self._emit(kind, start)
                return

        self._pos += 1
        self._emit(TokenKind.CHARACTER, start)

    def _lex_open_tag(self) -> None:
        start = self._pos
        if self._at("<?="):
            self._pos += 3
            self._emit(TokenKind.OPEN_TAG_WITH_ECHO, start)
            return
        if self._source[self._pos : self._pos + 5].lower() == "<?php":
            self._pos += 5
        else:
            self._pos += 2
        self._emit(TokenKind.OPEN_TAG, start)

    def _lex_line_comment(self) -> None:
        # Line comments end at the newline or at a closing tag
        start = self._pos
        while self._pos < len(self._source):
            if self._peek() in "\r\n" or self._at("?>"):
                break
            self._pos += 1
        self._emit(TokenKind.COMMENT, start)

    def _consume_name(self) -> None:
        while self._pos < len(self._source) and is_name_char(self._peek()):
            self._pos += 1

    def _lex_name(self) -> None:
        start = self._pos
        self._consume_name()
        word = self._source[start : self._pos]

        # Member and constant names after -> and :: are never keywords
        if self._last_kind in (TokenKind.OBJECT_OPERATOR, TokenKind.DOUBLE_COLON):
            kind = TokenKind.IDENTIFIER
        else:
            kind = _KEYWORDS.get(word.lower(), TokenKind.IDENTIFIER)
        self._emit(kind, start)

    def _lex_number(self) -> None:
        start = self._pos
        while self._pos < len(self._source):
            ch = self._peek()
            if not (ch.isascii() and (ch.isalnum() or ch in "._")):
                break
            self._pos += 1
        self._emit(TokenKind.NUMBER, start)

    def _lex_quoted(self, quote: str) -> None:
        start = self._pos
        self._pos += 1
        while self._pos < len(self._source):
            ch = self._peek()
            if ch == "\\":
                self._pos = min(self._pos + 2, len(self._source))
                continue
            self._pos += 1
            if ch == quote:
                break
        self._emit(TokenKind.STRING_LITERAL, start)

    def _lex_heredoc(self) -> bool:
        """Lex a heredoc or nowdoc. Returns False if no valid opener is here."""
        start = self._pos
        m = _HEREDOC_START.match(self._source, self._pos)
        if m is None:
            return False

        label = m.group(2)
        closing = re.compile(r"^[ \t]*" + re.escape(label) + r"(?!\w)", re.MULTILINE)
        end = closing.search(self._source, m.end())
        self._pos = len(self._source) if end is None else end.end()
        self._emit(TokenKind.HEREDOC, start)
        return True


def tokenize(source: str) -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source).tokenize()
