"""Pydantic models for the S-expression tree, extracted metadata and results."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Enums ---

class SnippetFormat(str, Enum):
    SNIPPET = "snippet"
    FULL = "full"


class NetKind(str, Enum):
    LABEL = "label"
    GLOBAL_LABEL = "global_label"
    HIERARCHICAL_LABEL = "hierarchical_label"


class SheetSize(str, Enum):
    A4 = "A4"
    A3 = "A3"
    A2 = "A2"


# --- S-expression tree ---

class AtomNode(BaseModel):
    """Unquoted token such as a tag name or a number."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["atom"] = "atom"
    value: str


class StringNode(BaseModel):
    """Double-quoted token, stored without its quotes."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["string"] = "string"
    value: str


class ListNode(BaseModel):
    """Parenthesized expression. The first child usually names the construct."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["list"] = "list"
    children: tuple[Node, ...] = ()


Node = Annotated[Union[ListNode, AtomNode, StringNode], Field(discriminator="kind")]

ListNode.model_rebuild()


# --- Position / Geometry ---

class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = Field(default=0.0, description="X coordinate in mm")
    y: float = Field(default=0.0, description="Y coordinate in mm")
    angle: float = Field(default=0.0, description="Rotation in degrees")


class BoundingBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_x: float = 0.0
    min_y: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


class Dimensions(BaseModel):
    width: float
    height: float


# --- Metadata Models ---

class Component(BaseModel):
    model_config = ConfigDict(frozen=True)

    reference: str = Field(default="", description="Reference designator (e.g. R1, U2)")
    value: str = Field(default="", description="Component value (e.g. 10k, LM358)")
    footprint: str = Field(default="", description="Footprint library:name, empty if unassigned")
    lib_id: str = Field(description="Library symbol identifier (e.g. Device:R)")
    uuid: str = ""
    position: Position = Field(default_factory=Position)


class Net(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    kind: NetKind


class UniqueComponent(BaseModel):
    model_config = ConfigDict(frozen=True)

    lib_id: str
    count: int
    values: list[str] = Field(default_factory=list)


class Stats(BaseModel):
    model_config = ConfigDict(frozen=True)

    component_count: int = 0
    wire_count: int = 0
    net_count: int = 0


class FootprintStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    assigned: int = 0
    unassigned: int = 0
    types: list[str] = Field(default_factory=list, description="Distinct footprints in first-seen order")


class ParsedMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    components: list[Component] = Field(default_factory=list)
    unique_components: list[UniqueComponent] = Field(default_factory=list)
    nets: list[Net] = Field(default_factory=list)
    stats: Stats = Field(default_factory=Stats)
    bounding_box: BoundingBox = Field(default_factory=BoundingBox)
    footprints: FootprintStats = Field(default_factory=FootprintStats)
    version: str = "unknown"
    warnings: list[str] = Field(default_factory=list)


# --- Result Models ---

class ValidationResult(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    metadata: Optional[ParsedMetadata] = None
    is_snippet: bool = False
    original_format: SnippetFormat = SnippetFormat.FULL


class SheetSizeResult(BaseModel):
    size: SheetSize
    recommended: SheetSize
    is_oversized: bool = False
    bounding_box: Dimensions


class ClipboardStats(BaseModel):
    size: int = Field(default=0, description="Size in UTF-8 bytes")
    line_count: int = 0
    lib_symbol_count: int = 0
    symbol_count: int = 0
    wire_count: int = 0
    label_count: int = 0


class ClipboardValidationResult(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    stats: ClipboardStats = Field(default_factory=ClipboardStats)
