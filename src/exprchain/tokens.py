"""Token kinds, the token data structure, and the default boundary table."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    # Layout and trivia
    INLINE_HTML = auto()  # text outside <?php ... ?>
    OPEN_TAG = auto()  # <?php or <?
    OPEN_TAG_WITH_ECHO = auto()  # <?=
    CLOSE_TAG = auto()  # ?>
    WHITESPACE = auto()
    COMMENT = auto()  # // ... or # ...
    DOC_COMMENT = auto()  # /* ... */ and /** ... */

    # Operands
    VARIABLE = auto()  # $name
    IDENTIFIER = auto()  # names, including self/parent/true/null
    STRING_LITERAL = auto()  # '...', "...", `...`
    HEREDOC = auto()  # <<<ID ... ID and <<<'ID' ... ID
    NUMBER = auto()

    # Access operators
    OBJECT_OPERATOR = auto()  # ->
    DOUBLE_COLON = auto()  # ::
    NAMESPACE_SEPARATOR = auto()  # \

    # Any other single character: ( ) [ ] { } ; , . = + etc.
    CHARACTER = auto()

    # Keywords that may appear inside an expression
    ARRAY = auto()
    EMPTY = auto()
    EVAL = auto()
    ISSET = auto()
    LIST = auto()
    STATIC = auto()
    UNSET = auto()

    # Keywords that never appear inside an expression
    ABSTRACT = auto()
    AS = auto()
    BREAK = auto()
    CALLABLE = auto()
    CASE = auto()
    CATCH = auto()
    CLASS = auto()
    CLONE = auto()
    CONST = auto()
    CONTINUE = auto()
    DECLARE = auto()
    DEFAULT = auto()
    DO = auto()
    ECHO = auto()
    ELSE = auto()
    ELSEIF = auto()
    ENDDECLARE = auto()
    ENDFOR = auto()
    ENDFOREACH = auto()
    ENDIF = auto()
    ENDSWITCH = auto()
    ENDWHILE = auto()
    EXIT = auto()  # exit, die
    EXTENDS = auto()
    FINAL = auto()
    FINALLY = auto()
    FOR = auto()
    FOREACH = auto()
    FUNCTION = auto()
    GLOBAL = auto()
    GOTO = auto()
    IF = auto()
    IMPLEMENTS = auto()
    INCLUDE = auto()
    INCLUDE_ONCE = auto()
    INSTANCEOF = auto()
    INSTEADOF = auto()
    INTERFACE = auto()
    LOGICAL_AND = auto()  # and
    LOGICAL_OR = auto()  # or
    LOGICAL_XOR = auto()  # xor
    NAMESPACE = auto()
    NEW = auto()
    PRINT = auto()
    PRIVATE = auto()
    PROTECTED = auto()
    PUBLIC = auto()
    REQUIRE = auto()
    REQUIRE_ONCE = auto()
    RETURN = auto()
    SWITCH = auto()
    THROW = auto()
    TRAIT = auto()
    TRY = auto()
    USE = auto()
    VAR = auto()
    WHILE = auto()
    YIELD = auto()

    # Multi-character operators
    AND_EQUAL = auto()  # &=
    BOOLEAN_AND = auto()  # &&
    BOOLEAN_OR = auto()  # ||
    COALESCE = auto()  # ??
    CONCAT_EQUAL = auto()  # .=
    DEC = auto()  # --
    DIV_EQUAL = auto()  # /=
    DOUBLE_ARROW = auto()  # =>
    ELLIPSIS = auto()  # ...
    INC = auto()  # ++
    IS_EQUAL = auto()  # ==
    IS_GREATER_OR_EQUAL = auto()  # >=
    IS_IDENTICAL = auto()  # ===
    IS_NOT_EQUAL = auto()  # != and <>
    IS_NOT_IDENTICAL = auto()  # !==
    IS_SMALLER_OR_EQUAL = auto()  # <=
    MINUS_EQUAL = auto()  # -=
    MOD_EQUAL = auto()  # %=
    MUL_EQUAL = auto()  # *=
    OR_EQUAL = auto()  # |=
    PLUS_EQUAL = auto()  # +=
    POW = auto()  # **
    POW_EQUAL = auto()  # **=
    SL = auto()  # <<
    SL_EQUAL = auto()  # <<=
    SPACESHIP = auto()  # <=>
    SR = auto()  # >>
    SR_EQUAL = auto()  # >>=
    XOR_EQUAL = auto()  # ^=


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token: its kind, exact source text and start byte offset."""

    kind: TokenKind
    text: str
    offset: int


Tokenizer = Callable[[str], Sequence[Token]]

COMMENT_KINDS: frozenset[TokenKind] = frozenset({TokenKind.COMMENT, TokenKind.DOC_COMMENT})


# Kinds that can never occur inside the expression ending at a cursor. Walking
# backwards, reaching one of these means the expression has started.
DEFAULT_BOUNDARY_KINDS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.ABSTRACT,
        TokenKind.AND_EQUAL,
        TokenKind.AS,
        TokenKind.BOOLEAN_AND,
        TokenKind.BOOLEAN_OR,
        TokenKind.BREAK,
        TokenKind.CALLABLE,
        TokenKind.CASE,
        TokenKind.CATCH,
        TokenKind.CLASS,
        TokenKind.CLONE,
        TokenKind.CLOSE_TAG,
        TokenKind.CONCAT_EQUAL,
        TokenKind.CONST,
        TokenKind.CONTINUE,
        TokenKind.DEC,
        TokenKind.DECLARE,
        TokenKind.DEFAULT,
        TokenKind.DIV_EQUAL,
        TokenKind.DO,
        TokenKind.DOUBLE_ARROW,
        TokenKind.ECHO,
        TokenKind.ELLIPSIS,
        TokenKind.ELSE,
        TokenKind.ELSEIF,
        TokenKind.ENDDECLARE,
        TokenKind.ENDFOR,
        TokenKind.ENDFOREACH,
        TokenKind.ENDIF,
        TokenKind.ENDSWITCH,
        TokenKind.ENDWHILE,
        TokenKind.EXIT,
        TokenKind.EXTENDS,
        TokenKind.FINAL,
        TokenKind.FINALLY,
        TokenKind.FOR,
        TokenKind.FOREACH,
        TokenKind.FUNCTION,
        TokenKind.GLOBAL,
        TokenKind.GOTO,
        TokenKind.HEREDOC,
        TokenKind.IF,
        TokenKind.IMPLEMENTS,
        TokenKind.INC,
        TokenKind.INCLUDE,
        TokenKind.INCLUDE_ONCE,
        TokenKind.INSTANCEOF,
        TokenKind.INSTEADOF,
        TokenKind.INTERFACE,
        TokenKind.IS_EQUAL,
        TokenKind.IS_GREATER_OR_EQUAL,
        TokenKind.IS_IDENTICAL,
        TokenKind.IS_NOT_EQUAL,
        TokenKind.IS_NOT_IDENTICAL,
        TokenKind.IS_SMALLER_OR_EQUAL,
        TokenKind.LOGICAL_AND,
        TokenKind.LOGICAL_OR,
        TokenKind.LOGICAL_XOR,
        TokenKind.MINUS_EQUAL,
        TokenKind.MOD_EQUAL,
        TokenKind.MUL_EQUAL,
        TokenKind.NAMESPACE,
        TokenKind.NEW,
        TokenKind.OPEN_TAG,
        TokenKind.OPEN_TAG_WITH_ECHO,
        TokenKind.OR_EQUAL,
        TokenKind.PLUS_EQUAL,
        TokenKind.POW,
        TokenKind.POW_EQUAL,
        TokenKind.PRINT,
        TokenKind.PRIVATE,
        TokenKind.PROTECTED,
        TokenKind.PUBLIC,
        TokenKind.REQUIRE,
        TokenKind.REQUIRE_ONCE,
        TokenKind.RETURN,
        TokenKind.SL,
        TokenKind.SL_EQUAL,
        TokenKind.SPACESHIP,
        TokenKind.SR,
        TokenKind.SR_EQUAL,
        TokenKind.SWITCH,
        TokenKind.THROW,
        TokenKind.TRAIT,
        TokenKind.TRY,
        TokenKind.USE,
        TokenKind.VAR,
        TokenKind.WHILE,
        TokenKind.XOR_EQUAL,
        TokenKind.YIELD,
    }
)


def parse_kind_name(name: str) -> TokenKind:
    """Look up a TokenKind by (case-insensitive) name. Raises KeyError if unknown."""
    return TokenKind[name.strip().upper()]


def is_name_start(ch: str) -> bool:
    """Return True if ch may start a PHP name (bytes 0x80 and up are allowed)."""
    if not ch:
        return False
    return ch == "_" or (ch.isascii() and ch.isalpha()) or ord(ch) >= 0x80


def is_name_char(ch: str) -> bool:
    """Return True if ch may continue a PHP name."""
    return is_name_start(ch) or (ch.isascii() and ch.isdigit())
