"""Metadata extraction from full KiCad schematic text.

One depth-first pass over the parsed tree collects placed symbols, net
labels, wire count and the document version. Wires are counted only; no
connectivity is traced.
"""

from __future__ import annotations

import re

from kicad_snippet.logging_config import get_logger
from kicad_snippet.models.types import (
    BoundingBox,
    Component,
    FootprintStats,
    ListNode,
    Net,
    NetKind,
    Node,
    ParsedMetadata,
    Position,
    Stats,
    UniqueComponent,
)
from kicad_snippet.utils.sexp_parser import (
    child_value,
    find_child,
    list_tag,
    parse_sexp,
    property_value,
    scalar_value,
)

logger = get_logger("metadata")

# Leading numeric prefix, the way KiCad coordinates are written (e.g. 10, -2.54, 1e3)
_NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_LABEL_TAGS = {kind.value for kind in NetKind}


def _to_float(raw: str | None) -> float | None:
    if raw is None:
        return None
    match = _NUMBER_PATTERN.match(raw.strip())
    if match is None:
        return None
    return float(match.group(0))


class _MetadataCollector:
    """Accumulates schematic items during a single traversal."""

    def __init__(self) -> None:
        self.components: list[Component] = []
        self.nets: list[Net] = []
        self.net_names: set[str] = set()
        self.wire_count = 0
        self.version: str | None = None
        self.warnings: list[str] = []

    def visit(self, node: Node) -> None:
        if not isinstance(node, ListNode) or not node.children:
            return

        tag = list_tag(node)
        if tag == "version":
            if self.version is None and len(node.children) > 1:
                self.version = scalar_value(node.children[1]) or None
        elif tag == "symbol":
            self._add_component(node)
        elif tag in _LABEL_TAGS:
            name = scalar_value(node.children[1]) if len(node.children) > 1 else None
            if name and name not in self.net_names:
                self.net_names.add(name)
                self.nets.append(Net(name=name, kind=NetKind(tag)))
        elif tag == "wire":
            self.wire_count += 1

        for child in node.children:
            self.visit(child)

    def _add_component(self, node: ListNode) -> None:
        lib_id = child_value(node, "lib_id")
        # Library definitions inside lib_symbols carry a name, not a lib_id
        if not lib_id:
            return

        reference = property_value(node, "Reference")
        self.components.append(Component(
            reference=reference,
            value=property_value(node, "Value"),
            footprint=property_value(node, "Footprint"),
            lib_id=lib_id,
            uuid=child_value(node, "uuid"),
            position=self._read_position(node, reference or lib_id),
        ))

    def _read_position(self, node: ListNode, label: str) -> Position:
        at = find_child(node, "at")
        if at is None or len(at.children) < 3:
            return Position()

        raw = [scalar_value(c) for c in at.children[1:4]]
        coords = []
        for i, value in enumerate(raw):
            number = _to_float(value)
            if number is None:
                if value is not None or i < 2:
                    self.warnings.append(
                        f"Symbol {label} has a non-numeric position value "
                        f"'{value}'; using 0"
                    )
                number = 0.0
            coords.append(number)

        angle = coords[2] if len(coords) > 2 else 0.0
        return Position(x=coords[0], y=coords[1], angle=angle)


def _unique_components(components: list[Component]) -> list[UniqueComponent]:
    grouped: dict[str, list] = {}
    for comp in components:
        entry = grouped.setdefault(comp.lib_id, [0, []])
        entry[0] += 1
        if comp.value not in entry[1]:
            entry[1].append(comp.value)
    return [
        UniqueComponent(lib_id=lib_id, count=count, values=values)
        for lib_id, (count, values) in grouped.items()
    ]


def _bounding_box(components: list[Component]) -> BoundingBox:
    if not components:
        return BoundingBox()
    xs = [c.position.x for c in components]
    ys = [c.position.y for c in components]
    return BoundingBox(min_x=min(xs), min_y=min(ys), max_x=max(xs), max_y=max(ys))


def _footprint_stats(components: list[Component]) -> FootprintStats:
    types: list[str] = []
    assigned = 0
    for comp in components:
        if comp.footprint:
            assigned += 1
            if comp.footprint not in types:
                types.append(comp.footprint)
    return FootprintStats(
        assigned=assigned,
        unassigned=len(components) - assigned,
        types=types,
    )


def extract_metadata(sexpr: str) -> ParsedMetadata:
    """Extract components, nets, wire count and statistics from a full file.

    Args:
        sexpr: Full ``(kicad_sch ...)`` text. Wrap snippets first.

    Returns:
        A new ParsedMetadata; identical input yields an equal result.

    Raises:
        SExpressionError: If the text does not parse.
    """
    return extract_metadata_from_tree(parse_sexp(sexpr))


def extract_metadata_from_tree(tree: Node) -> ParsedMetadata:
    """Same as :func:`extract_metadata` for an already parsed tree."""
    collector = _MetadataCollector()
    collector.visit(tree)
    components = collector.components

    metadata = ParsedMetadata(
        components=components,
        unique_components=_unique_components(components),
        nets=collector.nets,
        stats=Stats(
            component_count=len(components),
            wire_count=collector.wire_count,
            net_count=len(collector.nets),
        ),
        bounding_box=_bounding_box(components),
        footprints=_footprint_stats(components),
        version=collector.version or "unknown",
        warnings=collector.warnings,
    )
    logger.debug(
        "Extracted %d components, %d nets, %d wires (version %s)",
        metadata.stats.component_count,
        metadata.stats.net_count,
        metadata.stats.wire_count,
        metadata.version,
    )
    return metadata
