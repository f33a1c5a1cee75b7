"""Paper size selection from schematic geometry."""

from __future__ import annotations

from kicad_snippet.models.types import BoundingBox, Dimensions, SheetSize, SheetSizeResult

# Usable drawing area per paper size in mm, inside KiCad's page margins.
# A4 spans (12.7, 12.7)-(283.21, 196.85) and A3 (12.7, 12.7)-(406.4, 284.48)
# in real schematics; A2 (594x420 paper) is estimated.
SHEET_SIZES: dict[SheetSize, tuple[float, float]] = {
    SheetSize.A4: (270, 184),
    SheetSize.A3: (394, 272),
    SheetSize.A2: (570, 396),
}


def select_sheet_size(bounding_box: BoundingBox) -> SheetSizeResult:
    """Pick the smallest paper whose usable area holds the bounding box.

    Width and height are checked independently against each envelope, in
    A4, A3, A2 order. Content larger than A2 still gets A2, flagged as
    oversized so the caller can warn.
    """
    width = bounding_box.max_x - bounding_box.min_x
    height = bounding_box.max_y - bounding_box.min_y
    dims = Dimensions(width=width, height=height)

    for size, (max_width, max_height) in SHEET_SIZES.items():
        if width <= max_width and height <= max_height:
            return SheetSizeResult(size=size, recommended=size, bounding_box=dims)

    return SheetSizeResult(
        size=SheetSize.A2,
        recommended=SheetSize.A2,
        is_oversized=True,
        bounding_box=dims,
    )
