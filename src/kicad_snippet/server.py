"""FastMCP server creation and tool/resource registration."""

from __future__ import annotations

from fastmcp import FastMCP

from kicad_snippet import __version__
from kicad_snippet.config import KiCadSnippetConfig
from kicad_snippet.logging_config import get_logger, setup_logging
from kicad_snippet.resources.definitions import register_resources
from kicad_snippet.tools import snippet

logger = get_logger("server")


def create_server(config: KiCadSnippetConfig | None = None) -> FastMCP:
    """Create and configure the KiCad snippet server.

    Args:
        config: Server configuration. Uses defaults/env vars if not provided.

    Returns:
        Configured FastMCP server instance ready to run.
    """
    if config is None:
        config = KiCadSnippetConfig()

    setup_logging(
        level=config.log_level.value,
        log_file=config.get_log_file_path(),
    )
    logger.info("KiCad Snippet Server v%s starting", __version__)

    mcp = FastMCP(
        "KiCad Snippet Server",
        version=__version__,
    )

    snippet.register_tools(mcp, config)
    register_resources(mcp, config)

    logger.info("Server ready: generator=%s, default paper=%s", config.generator, config.default_paper.value)
    return mcp
