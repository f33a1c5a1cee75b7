"""Format detection for pasted schematic text.

Clipboard snippets carry ``(lib_symbols ...)`` and ``(symbol ...)`` data
without a ``(kicad_sch ...)`` header; full files start with one. Detection is
a substring scan that runs before any parse attempt, since a snippet is not a
parseable standalone document.
"""

from __future__ import annotations

from kicad_snippet.logging_config import get_logger
from kicad_snippet.models.types import SnippetFormat

logger = get_logger("classifier")


def classify_format(text: str) -> SnippetFormat:
    """Decide whether text is a clipboard snippet or a full schematic file.

    Rules, first match wins:
    ``(kicad_sch`` anywhere -> full; ``(lib_symbols`` -> snippet;
    ``(symbol`` -> snippet; otherwise full.
    """
    if "(kicad_sch" in text:
        fmt = SnippetFormat.FULL
    elif "(lib_symbols" in text:
        fmt = SnippetFormat.SNIPPET
    elif "(symbol" in text:
        fmt = SnippetFormat.SNIPPET
    else:
        fmt = SnippetFormat.FULL

    logger.debug("Classified %d chars as %s", len(text), fmt.value)
    return fmt


def is_clipboard_snippet(text: str) -> bool:
    """Return True if the text is a clipboard snippet rather than a full file."""
    return classify_format(text) is SnippetFormat.SNIPPET
