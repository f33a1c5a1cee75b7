"""MCP resource definitions - 2 resources."""

from __future__ import annotations

import json

from fastmcp import FastMCP

from kicad_snippet.config import KiCadSnippetConfig
from kicad_snippet.logging_config import get_logger
from kicad_snippet.utils.converter import WRAP_VERSION
from kicad_snippet.utils.sheet_size import SHEET_SIZES
from kicad_snippet.utils.validation import MIN_SUPPORTED_VERSION

logger = get_logger("resources")


def register_resources(mcp: FastMCP, config: KiCadSnippetConfig) -> None:
    """Register MCP resources on the server."""

    @mcp.resource("kicad-snippet://sheet-sizes")
    def sheet_sizes_resource() -> str:
        """Get the usable drawing area of each supported paper size.

        Returns width and height in mm, in the order sizes are tried.
        """
        sizes = [
            {"size": size.value, "width": width, "height": height}
            for size, (width, height) in SHEET_SIZES.items()
        ]
        logger.debug("Serving %d sheet sizes", len(sizes))
        return json.dumps({"sheet_sizes": sizes}, indent=2)

    @mcp.resource("kicad-snippet://format")
    def format_resource() -> str:
        """Get the schematic format versions accepted and produced.

        Returns the minimum accepted version, the version written when
        wrapping snippets, and the generator name.
        """
        logger.debug("Serving format info for generator %s", config.generator)
        return json.dumps({
            "min_supported_version": MIN_SUPPORTED_VERSION,
            "wrap_version": WRAP_VERSION,
            "generator": config.generator,
            "generator_version": config.generator_version,
        }, indent=2)
