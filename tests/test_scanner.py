"""Tests for the backward expression-boundary scanner."""

from __future__ import annotations

import pytest

from exprchain.errors import InvalidOffsetError
from exprchain.lexer import tokenize
from exprchain.scanner import find_expression_start
from exprchain.tokens import DEFAULT_BOUNDARY_KINDS, Token, TokenKind

# ---------------------------------------------------------------------------
# Whole-source expressions
# ---------------------------------------------------------------------------


class TestNoBoundary:
    def test_empty_source(self):
        assert find_expression_start("", 0) == 0

    def test_member_chain(self):
        assert find_expression_start("$this->getFoo()->bar") == 0

    def test_balanced_brackets_and_identifiers(self):
        assert find_expression_start("foo(bar[baz]{qux})") == 0

    def test_namespaced_static_call(self):
        assert find_expression_start("Foo\\Bar::baz()->qux") == 0

    def test_self_static_call(self):
        assert find_expression_start("self::create()->x") == 0

    def test_static_keyword(self):
        assert find_expression_start("static::create()->x") == 0

    def test_instantiation_wrapped_in_parentheses(self):
        assert find_expression_start("(new Foo())->bar") == 0

    def test_closure_argument(self):
        assert find_expression_start("$foo->bar(function () { return 1; })->baz") == 0

    def test_dynamic_member_access(self):
        assert find_expression_start("$foo->{$bar}->baz") == 0

    def test_delimiters_inside_call_arguments(self):
        assert find_expression_start("$foo->bar($a, $b ? 1 : 2)->baz") == 0

    def test_string_argument_containing_delimiter(self):
        assert find_expression_start("$foo->bar('a.b')") == 0

    def test_comment_inside_chain(self):
        assert find_expression_start("$foo /* ; */ ->bar") == 0


# ---------------------------------------------------------------------------
# Boundaries
# ---------------------------------------------------------------------------


class TestBoundaries:
    def test_closing_brace_of_statement(self, expression):
        source = "if ($x) { $this->test(); } $foo->bar"
        assert find_expression_start(source) == source.index("}") + 1
        assert expression(source) == " $foo->bar"

    def test_closing_brace_after_identifier_ends_expression(self):
        # Only a variable before "}" marks it as part of ->{$name}
        assert find_expression_start("foo{bar}") == 8
        assert find_expression_start("foo{$bar}") == 0

    def test_keyword(self, expression):
        assert find_expression_start("return $foo->bar") == 6
        assert expression("echo $foo->bar") == " $foo->bar"

    def test_unmatched_parenthesis(self):
        assert find_expression_start("foo($bar->baz") == 4

    def test_unmatched_square_bracket(self):
        assert find_expression_start("$a[$b->c") == 3

    def test_unmatched_brace(self):
        assert find_expression_start("{ $a->b") == 1

    @pytest.mark.parametrize(
        "source, expected",
        [
            ("$x; $y->z", 3),
            ("$a, $b->c", 3),
            ("$a ? $b->c", 4),
            ("$a . $b->c", 4),
            ("case 1: $a->b", 7),
        ],
    )
    def test_delimiters(self, source, expected):
        assert find_expression_start(source) == expected

    def test_operator(self, expression):
        assert expression("$a && $b->c") == " $b->c"
        assert expression("$a .= $b->c") == " $b->c"

    def test_static_reference_stops_at_its_left_edge(self):
        assert find_expression_start("return self::create()->x") == 7

    def test_static_reference_after_operator(self, expression):
        assert expression("$a = \\Foo\\Bar::baz") == "\\Foo\\Bar::baz"

    def test_nested_closure_body_is_not_a_boundary(self, expression):
        source = "$x = 1; $foo->bar(function () { if ($a) { return; } })->baz"
        assert expression(source) == " $foo->bar(function () { if ($a) { return; } })->baz"

    def test_open_tag(self, expression):
        assert expression("<?php $foo->bar") == " $foo->bar"


# ---------------------------------------------------------------------------
# Cursor handling
# ---------------------------------------------------------------------------


class TestCursor:
    def test_cursor_in_the_middle(self):
        assert find_expression_start("$a->b; $c->d", 5) == 0

    def test_cursor_defaults_to_end(self):
        assert find_expression_start("$a->b; $c->d") == 6

    def test_cursor_inside_string_skips_strings(self):
        assert find_expression_start("$foo->bar('a") == len("$foo->bar(")

    def test_offsets_are_bytes(self):
        source = "$x = 'é'; $y->z"
        assert find_expression_start(source) == len("$x = 'é';".encode("utf-8"))

    def test_cursor_inside_multibyte_character(self):
        source = "$a; $ä"
        cursor = len("$a; $".encode("utf-8")) + 1
        assert 0 <= find_expression_start(source, cursor) <= cursor

    def test_result_within_bounds(self):
        sources = [
            "if ($x) { $this->test(); } $foo->bar",
            "$a = ['k' => $b->c(1, 2)]; return $d::e()->f",
            "/* € */ $ä->ö('ü')->{$x}",
        ]
        for source in sources:
            size = len(source.encode("utf-8"))
            for cursor in range(size + 1):
                assert 0 <= find_expression_start(source, cursor) <= cursor

    def test_cursor_past_end(self):
        with pytest.raises(InvalidOffsetError):
            find_expression_start("abc", 4)

    def test_negative_cursor(self):
        with pytest.raises(InvalidOffsetError):
            find_expression_start("abc", -1)


# ---------------------------------------------------------------------------
# Injected boundary table and tokenizer
# ---------------------------------------------------------------------------


class TestConfiguration:
    def test_extra_boundary_kind(self):
        source = "$a = $b->c"
        assert find_expression_start(source) == 0
        kinds = DEFAULT_BOUNDARY_KINDS | {TokenKind.CHARACTER}
        assert find_expression_start(source, boundary_kinds=kinds) == 4

    def test_removed_boundary_kind(self):
        kinds = DEFAULT_BOUNDARY_KINDS - {TokenKind.RETURN}
        assert find_expression_start("return $foo->bar", boundary_kinds=kinds) == 0

    def test_custom_tokenizer(self):
        seen: list[str] = []

        def one_token(text: str) -> list[Token]:
            seen.append(text)
            return [Token(TokenKind.INLINE_HTML, text, 0)]

        assert find_expression_start("a b->c; d", 6, tokenizer=one_token) == 0
        assert seen == ["a b->c"]

    def test_default_tokenizer_is_the_lexer(self):
        source = "echo $a->b"
        assert find_expression_start(source) == find_expression_start(
            source, tokenizer=tokenize
        )
