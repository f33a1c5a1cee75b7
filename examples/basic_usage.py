"""Basic usage example for the KiCad snippet toolkit.

Validates a schematic given on the command line and, for clipboard
snippets, writes a previewable full file next to it.
For the MCP server, run: python -m kicad_snippet
"""

import sys
from pathlib import Path

from kicad_snippet.utils.converter import remove_hierarchical_sheets, wrap_snippet_to_full_file
from kicad_snippet.utils.sheet_size import select_sheet_size
from kicad_snippet.utils.validation import read_schematic_text, validate_sexpression


def main():
    path = Path(sys.argv[1])
    text = read_schematic_text(str(path))

    result = validate_sexpression(text)
    for warning in result.warnings:
        print(f"warning: {warning}")
    if not result.valid:
        for error in result.errors:
            print(f"error: {error}")
        sys.exit(1)

    metadata = result.metadata
    print(f"{metadata.stats.component_count} components, {metadata.stats.net_count} nets")

    if result.is_snippet:
        sheet = select_sheet_size(metadata.bounding_box)
        full_file = wrap_snippet_to_full_file(text, title=path.stem, paper_size=sheet.size)
        out = path.with_name(f"{path.stem}_preview.kicad_sch")
        out.write_text(remove_hierarchical_sheets(full_file), encoding="utf-8")
        print(f"wrote {out} on {sheet.size.value} paper")


if __name__ == "__main__":
    main()
