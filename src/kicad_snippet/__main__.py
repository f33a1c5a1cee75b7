"""CLI entry point: python -m kicad_snippet"""

from __future__ import annotations

import argparse
import sys

from kicad_snippet import __version__
from kicad_snippet.config import KiCadSnippetConfig, LogLevel, TransportType


def main() -> None:
    parser = argparse.ArgumentParser(
        description="KiCad Snippet Server - validate, inspect and convert KiCad schematic snippets",
    )
    parser.add_argument(
        "--version", action="version", version=f"kicad-snippet {__version__}",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=None,
        help="MCP transport (default: stdio)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--sse-host",
        default=None,
        help="SSE server host (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--sse-port",
        type=int,
        default=None,
        help="SSE server port (default: 8765)",
    )
    parser.add_argument(
        "--validate",
        metavar="PATH",
        default=None,
        help="Validate a schematic or snippet file, print the result as JSON and exit",
    )

    args = parser.parse_args()

    if args.validate:
        sys.exit(_validate_file(args.validate, args.log_level))

    # Build config from CLI args + env vars
    overrides = {}
    if args.transport:
        overrides["transport"] = TransportType(args.transport)
    if args.log_level:
        overrides["log_level"] = LogLevel(args.log_level)
    if args.sse_host:
        overrides["sse_host"] = args.sse_host
    if args.sse_port:
        overrides["sse_port"] = args.sse_port

    config = KiCadSnippetConfig(**overrides)

    from kicad_snippet.server import create_server
    mcp = create_server(config)

    if config.transport == TransportType.SSE:
        mcp.run(transport="sse", host=config.sse_host, port=config.sse_port)
    else:
        mcp.run(transport="stdio")


def _validate_file(path: str, log_level: str | None) -> int:
    """Print the validation result for a file. Returns the exit code."""
    from kicad_snippet.logging_config import setup_logging
    from kicad_snippet.models.errors import InvalidPathError
    from kicad_snippet.utils.validation import read_schematic_text, validate_sexpression

    setup_logging(level=log_level or "WARNING")

    try:
        text = read_schematic_text(path)
    except InvalidPathError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    result = validate_sexpression(text)
    print(result.model_dump_json(indent=2))
    return 0 if result.valid else 1


if __name__ == "__main__":
    main()
