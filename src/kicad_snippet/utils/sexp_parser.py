"""S-expression parser and serializer for KiCad schematic text."""

from __future__ import annotations

from kicad_snippet.models.errors import SExpressionError, UnbalancedParenthesesError
from kicad_snippet.models.types import AtomNode, ListNode, Node, StringNode

_ATOM_STOP = frozenset('()"')


class SExpParser:
    """Recursive-descent reader over a single piece of text.

    Each instance owns its cursor, so one parser per call keeps parsing
    reentrant. Grammar::

        list   := '(' token* ')'
        string := '"' (escaped-char | char)* '"'
        atom   := run of chars excluding whitespace, parens and quote

    String escapes are literal: the backslash is dropped and the next
    character is kept as is, so ``\\n`` reads as ``n``.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def parse(self) -> Node:
        """Read the first complete expression in the text.

        Trailing text after it is ignored, except for a stray ``)``.

        Raises:
            SExpressionError: On empty input or an unterminated list/string.
            UnbalancedParenthesesError: On a ``)`` with nothing to close.
        """
        node = self._parse_node()
        self._skip_whitespace()
        if self._pos < len(self._text) and self._text[self._pos] == ")":
            raise UnbalancedParenthesesError(
                "Unexpected ')' after end of expression",
                {"position": self._pos},
            )
        return node

    def _skip_whitespace(self) -> None:
        text = self._text
        while self._pos < len(text) and text[self._pos].isspace():
            self._pos += 1

    def _parse_node(self) -> Node:
        self._skip_whitespace()
        if self._pos >= len(self._text):
            raise SExpressionError("Unexpected end of input", {"position": self._pos})

        ch = self._text[self._pos]
        if ch == "(":
            return self._parse_list()
        if ch == '"':
            return self._parse_string()
        if ch == ")":
            raise UnbalancedParenthesesError("Unexpected ')'", {"position": self._pos})
        return self._parse_atom()

    def _parse_list(self) -> ListNode:
        start = self._pos
        self._pos += 1  # skip (
        children: list[Node] = []

        while True:
            self._skip_whitespace()
            if self._pos >= len(self._text):
                raise SExpressionError("Unclosed list", {"position": start})
            if self._text[self._pos] == ")":
                self._pos += 1
                break
            children.append(self._parse_node())

        return ListNode(children=tuple(children))

    def _parse_string(self) -> StringNode:
        text = self._text
        start = self._pos
        self._pos += 1  # skip opening quote
        chars: list[str] = []

        while self._pos < len(text) and text[self._pos] != '"':
            if text[self._pos] == "\\" and self._pos + 1 < len(text):
                self._pos += 1
            chars.append(text[self._pos])
            self._pos += 1

        if self._pos >= len(text):
            raise SExpressionError("Unclosed string", {"position": start})

        self._pos += 1  # skip closing quote
        return StringNode(value="".join(chars))

    def _parse_atom(self) -> AtomNode:
        text = self._text
        start = self._pos
        while self._pos < len(text) and not text[self._pos].isspace() and text[self._pos] not in _ATOM_STOP:
            self._pos += 1
        return AtomNode(value=text[start:self._pos])


def parse_sexp(text: str) -> Node:
    """Parse S-expression text into a node tree.

    Args:
        text: Raw S-expression text.

    Returns:
        The root node, normally a ``ListNode``.

    Raises:
        SExpressionError: If the text is not a well-formed S-expression.
    """
    return SExpParser(text).parse()


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def node_to_string(node: Node, indent: int = 0) -> str:
    """Serialize a node tree back to indented S-expression text.

    Leading atoms and strings stay on the tag line, nested lists go on their
    own lines two spaces deeper, and the closing paren of a multi-line list
    sits on its own line. ``parse_sexp(node_to_string(n)) == n`` holds.
    """
    if isinstance(node, AtomNode):
        return node.value
    if isinstance(node, StringNode):
        return _quote(node.value)

    children = node.children
    if not children:
        return "()"

    head: list[str] = []
    split = len(children)
    for i, child in enumerate(children):
        if isinstance(child, ListNode):
            split = i
            break
        head.append(node_to_string(child))

    if split == len(children):
        return "(" + " ".join(head) + ")"

    pad = "  " * (indent + 1)
    lines = ["(" + " ".join(head)]
    for child in children[split:]:
        lines.append(pad + node_to_string(child, indent + 1))
    lines.append("  " * indent + ")")
    return "\n".join(lines)


def check_paren_balance(text: str) -> None:
    """Check that parentheses pair up across the raw text.

    Every ``(`` and ``)`` counts, including those inside quoted strings.

    Raises:
        UnbalancedParenthesesError: On an early extra ``)`` or an unclosed ``(``.
    """
    depth = 0
    for i, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                raise UnbalancedParenthesesError(
                    "Unbalanced parentheses - extra closing parenthesis",
                    {"position": i},
                )
    if depth != 0:
        raise UnbalancedParenthesesError(
            "Unbalanced parentheses - missing closing parenthesis",
            {"depth": depth},
        )


def walk_balanced_parens(content: str, start: int) -> int | None:
    """Walk forward from an opening paren to find the matching close paren.

    Handles quoted strings (including escaped quotes) correctly.

    Args:
        content: Full text.
        start: Index of the opening ``(`` character.

    Returns:
        Index of the matching ``)`` (inclusive), or ``None`` if unbalanced.
    """
    depth = 0
    i = start
    while i < len(content):
        ch = content[i]
        if ch == '"':
            # Skip quoted strings (handle escaped quotes)
            i += 1
            while i < len(content):
                if content[i] == "\\" and i + 1 < len(content):
                    i += 2
                    continue
                if content[i] == '"':
                    break
                i += 1
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


# --- Tree lookups ---

def list_tag(node: Node) -> str | None:
    """Return the leading atom of a list node, e.g. ``symbol`` or ``wire``."""
    if isinstance(node, ListNode) and node.children and isinstance(node.children[0], AtomNode):
        return node.children[0].value
    return None


def scalar_value(node: Node | None) -> str | None:
    """Return the text of an atom or string node, ``None`` for lists."""
    if isinstance(node, (AtomNode, StringNode)):
        return node.value
    return None


def find_child(node: Node, tag: str) -> ListNode | None:
    """Find the first direct child list whose tag is ``tag``."""
    if not isinstance(node, ListNode):
        return None
    for child in node.children:
        if list_tag(child) == tag:
            return child
    return None


def child_value(node: Node, tag: str, default: str = "") -> str:
    """Read the first value of a direct child like ``(lib_id "Device:R")``."""
    found = find_child(node, tag)
    if found is not None and len(found.children) > 1:
        return scalar_value(found.children[1]) or default
    return default


def property_value(node: Node, name: str) -> str:
    """Read ``(property "<name>" "<value>" ...)`` among a node's children.

    Properties are matched by name, not position. Returns ``""`` if absent.
    """
    if not isinstance(node, ListNode):
        return ""
    for child in node.children:
        if list_tag(child) != "property" or len(child.children) < 3:
            continue
        if scalar_value(child.children[1]) == name:
            value = scalar_value(child.children[2])
            if value:
                return value
    return ""
