"""Tests for the S-expression parser, serializer and tree helpers."""

from __future__ import annotations

import pytest

from kicad_snippet.models.errors import SExpressionError, UnbalancedParenthesesError
from kicad_snippet.models.types import AtomNode, ListNode, StringNode
from kicad_snippet.utils.sexp_parser import (
    SExpParser,
    check_paren_balance,
    child_value,
    find_child,
    list_tag,
    node_to_string,
    parse_sexp,
    property_value,
    walk_balanced_parens,
)


def atom(value: str) -> AtomNode:
    return AtomNode(value=value)


def string(value: str) -> StringNode:
    return StringNode(value=value)


def lst(*children) -> ListNode:
    return ListNode(children=tuple(children))


class TestParseSexp:
    def test_simple_list(self):
        assert parse_sexp("(version 20230121)") == lst(atom("version"), atom("20230121"))

    def test_nested_list(self):
        tree = parse_sexp('(symbol (lib_id "Device:R") (at 10 20 0))')
        assert tree == lst(
            atom("symbol"),
            lst(atom("lib_id"), string("Device:R")),
            lst(atom("at"), atom("10"), atom("20"), atom("0")),
        )

    def test_whitespace_insignificant(self):
        assert parse_sexp("  (a\n\t b   c )\n") == parse_sexp("(a b c)")

    def test_empty_list(self):
        assert parse_sexp("()") == lst()

    def test_atom_and_string_are_distinct(self):
        tree = parse_sexp('(a "a")')
        assert tree.children[0] == atom("a")
        assert tree.children[1] == string("a")
        assert tree.children[0] != tree.children[1]

    def test_string_with_spaces_and_parens(self):
        tree = parse_sexp('(title "Power (5V) supply")')
        assert tree.children[1] == string("Power (5V) supply")

    def test_escaped_quote(self):
        tree = parse_sexp(r'(v "say \"hi\"")')
        assert tree.children[1] == string('say "hi"')

    def test_escape_keeps_next_char_literally(self):
        # \n is not a newline: the backslash is dropped and 'n' is kept
        tree = parse_sexp(r'(v "a\nb\\c")')
        assert tree.children[1] == string("anb\\c")

    def test_string_adjacent_to_atom(self):
        tree = parse_sexp('(a"b"c)')
        assert tree == lst(atom("a"), string("b"), atom("c"))

    def test_top_level_atom(self):
        assert parse_sexp("  hello  ") == atom("hello")

    def test_trailing_content_ignored(self):
        assert parse_sexp("(a) (b)") == lst(atom("a"))

    def test_nodes_are_frozen(self):
        tree = parse_sexp("(a b)")
        with pytest.raises(Exception):
            tree.children = ()


class TestParseErrors:
    def test_empty_input(self):
        with pytest.raises(SExpressionError, match="Unexpected end of input"):
            parse_sexp("")

    def test_whitespace_only(self):
        with pytest.raises(SExpressionError):
            parse_sexp("   \n ")

    def test_unclosed_list(self):
        with pytest.raises(SExpressionError, match="Unclosed list") as exc:
            parse_sexp("(a (b c)")
        assert exc.value.details["position"] == 0

    def test_unclosed_string(self):
        with pytest.raises(SExpressionError, match="Unclosed string"):
            parse_sexp('(a "unterminated)')

    def test_leading_close_paren(self):
        with pytest.raises(UnbalancedParenthesesError):
            parse_sexp(")")

    def test_extra_close_paren(self):
        with pytest.raises(UnbalancedParenthesesError):
            parse_sexp("(a) )")

    def test_parser_instances_are_independent(self):
        first = SExpParser("(a (b))")
        second = SExpParser("(c)")
        assert second.parse() == lst(atom("c"))
        assert first.parse() == lst(atom("a"), lst(atom("b")))


class TestNodeToString:
    def test_flat_list_inline(self):
        assert node_to_string(parse_sexp("(at 10 20 0)")) == "(at 10 20 0)"

    def test_nested_lists_indented(self):
        text = node_to_string(parse_sexp('(symbol (lib_id "Device:R") (at 1 2 0))'))
        assert text == '(symbol\n  (lib_id "Device:R")\n  (at 1 2 0)\n)'

    def test_leading_scalars_stay_on_tag_line(self):
        text = node_to_string(parse_sexp('(property "Reference" "R1" (at 1 2 0))'))
        assert text.splitlines()[0] == '(property "Reference" "R1"'

    def test_deeper_indent(self):
        text = node_to_string(parse_sexp("(a (b (c 1)))"))
        assert text == "(a\n  (b\n    (c 1)\n  )\n)"

    def test_empty_list(self):
        assert node_to_string(lst()) == "()"

    def test_strings_reescaped(self):
        node = lst(atom("v"), string('say "hi" \\ bye'))
        text = node_to_string(node)
        assert text == r'(v "say \"hi\" \\ bye")'
        assert parse_sexp(text) == node

    def test_round_trip_sample(self, sample_schematic: str):
        tree = parse_sexp(sample_schematic)
        assert parse_sexp(node_to_string(tree)) == tree


class TestCheckParenBalance:
    def test_balanced(self):
        check_paren_balance("(a (b) (c (d)))")

    def test_missing_close(self):
        with pytest.raises(UnbalancedParenthesesError, match="missing closing"):
            check_paren_balance("(a (b)")

    def test_extra_close(self):
        with pytest.raises(UnbalancedParenthesesError, match="extra closing"):
            check_paren_balance("(a) )")

    def test_early_extra_close_detected(self):
        # Depth returns to zero at the end, but goes negative first
        with pytest.raises(UnbalancedParenthesesError, match="extra closing") as exc:
            check_paren_balance(")(")
        assert exc.value.details["position"] == 0

    def test_quoted_parens_still_counted(self):
        with pytest.raises(UnbalancedParenthesesError):
            check_paren_balance('(title "left ( only")')


class TestWalkBalancedParens:
    def test_simple_block(self):
        content = "(foo bar)"
        assert walk_balanced_parens(content, 0) == len(content) - 1

    def test_quoted_parens_ignored(self):
        content = '(foo "a(b)c" bar)'
        end = walk_balanced_parens(content, 0)
        assert content[0:end + 1] == content

    def test_escaped_quotes(self):
        content = r'(foo "a\"b)" bar)'
        end = walk_balanced_parens(content, 0)
        assert content[0:end + 1] == content

    def test_inner_block(self):
        content = "prefix (inner stuff) suffix"
        end = walk_balanced_parens(content, 7)
        assert content[7:end + 1] == "(inner stuff)"

    def test_unbalanced_returns_none(self):
        assert walk_balanced_parens("(foo (bar)", 0) is None


class TestTreeHelpers:
    SYMBOL = parse_sexp(
        '(symbol (lib_id "Device:R") (at 10 20 0) (uuid "u-1")'
        ' (property "Reference" "R1" (at 0 0 0))'
        ' (property "Value" "" (at 0 0 0))'
        ' (property "Value" "10k"))'
    )

    def test_list_tag(self):
        assert list_tag(self.SYMBOL) == "symbol"
        assert list_tag(atom("x")) is None
        assert list_tag(lst()) is None
        assert list_tag(lst(string("symbol"))) is None

    def test_find_child(self):
        found = find_child(self.SYMBOL, "at")
        assert found == lst(atom("at"), atom("10"), atom("20"), atom("0"))
        assert find_child(self.SYMBOL, "missing") is None

    def test_child_value(self):
        assert child_value(self.SYMBOL, "lib_id") == "Device:R"
        assert child_value(self.SYMBOL, "uuid") == "u-1"
        assert child_value(self.SYMBOL, "missing", "dflt") == "dflt"

    def test_property_value_by_name(self):
        assert property_value(self.SYMBOL, "Reference") == "R1"

    def test_property_value_skips_empty(self):
        assert property_value(self.SYMBOL, "Value") == "10k"

    def test_property_value_missing(self):
        assert property_value(self.SYMBOL, "Footprint") == ""
