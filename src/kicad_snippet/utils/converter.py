"""Conversion between clipboard snippets and full schematic files.

- Preview and download need a full file: snippets are wrapped in a header.
- Copy needs a snippet: full files are unwrapped to their symbol content.
- Imported or downloaded circuits get attribution comment lines.
- Previews outside the original project drop hierarchical sheet references.

These functions expect text that already passed validation.
"""

from __future__ import annotations

import re
import uuid as _uuid
from datetime import date

from kicad_snippet.logging_config import get_logger
from kicad_snippet.models.errors import SExpressionError
from kicad_snippet.models.types import ListNode, SheetSize
from kicad_snippet.utils.classifier import is_clipboard_snippet
from kicad_snippet.utils.sexp_parser import (
    child_value,
    list_tag,
    node_to_string,
    parse_sexp,
    walk_balanced_parens,
)

logger = get_logger("converter")

# KiCad 8.0 schematic format
WRAP_VERSION = 20231120
DEFAULT_GENERATOR = "CircuitSnips"
DEFAULT_GENERATOR_VERSION = "1.0"
DEFAULT_COMPANY = "CircuitSnips"
DEFAULT_TITLE = "Circuit Snippet"

_SNIPPET_TAGS = ("lib_symbols", "symbol")

# Fallback patterns for text that does not parse: a block ends at a line
# holding its closing paren, followed by the next block on a new line.
_LIB_SYMBOLS_FALLBACK = re.compile(r"(\(lib_symbols[\s\S]*?\n\)(?=\s*\n\s*\())")
_SYMBOL_FALLBACK = re.compile(r"(\(symbol\s[\s\S]*?\n\s*\)(?=\s*\n\s*\())")

_SHEET_INSTANCES_START = re.compile(r"\(sheet_instances\b")
_SHEET_START = re.compile(r"\(sheet\s")

# Header lines the attribution block goes after, and the line it goes before
_HEADER_MARKERS = ("(generator", "(version", "(uuid")
_PAPER_MARKER = "(paper"


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _today() -> str:
    return date.today().isoformat()


def wrap_snippet_to_full_file(
    snippet: str,
    title: str | None = None,
    uuid: str | None = None,
    paper_size: SheetSize | str | None = None,
    *,
    generator: str = DEFAULT_GENERATOR,
    generator_version: str = DEFAULT_GENERATOR_VERSION,
    company: str = DEFAULT_COMPANY,
) -> str:
    """Wrap a clipboard snippet into a complete ``.kicad_sch`` document.

    The snippet text is inserted unchanged between the generated header and
    the closing paren of the root.

    Args:
        snippet: Clipboard snippet text.
        title: Title block title. Defaults to "Circuit Snippet".
        uuid: Document UUID. A random one is generated if not given.
        paper_size: Paper size, e.g. ``SheetSize.A3``. Defaults to A4.
        generator: Generator name written to the header.
        generator_version: Generator version written to the header.
        company: Title block company.

    Returns:
        Full schematic text.
    """
    doc_uuid = uuid or str(_uuid.uuid4())
    doc_title = title or DEFAULT_TITLE
    paper = SheetSize(paper_size or SheetSize.A4).value

    logger.debug("Wrapping %d-char snippet on %s paper", len(snippet), paper)
    return f"""(kicad_sch
  (version {WRAP_VERSION})
  (generator "{_escape(generator)}")
  (generator_version "{_escape(generator_version)}")

  (uuid "{_escape(doc_uuid)}")

  (paper "{paper}")

  (title_block
    (title "{_escape(doc_title)}")
    (date "{_today()}")
    (rev "1")
    (company "{_escape(company)}")
  )

{snippet}
)"""


def extract_snippet_from_full_file(full_file: str) -> str:
    """Extract snippet content from a full ``.kicad_sch`` file.

    Keeps the top-level ``lib_symbols`` and ``symbol`` blocks, dropping the
    header, title block and paper. Text that does not parse goes through a
    regex fallback instead.

    Returns:
        Snippet text, blocks separated by a blank line.
    """
    try:
        tree = parse_sexp(full_file)
    except SExpressionError as e:
        logger.warning("Full file did not parse (%s); using regex extraction", e)
        return _extract_snippet_by_pattern(full_file)

    if not isinstance(tree, ListNode):
        logger.warning("Full file root is not a list; using regex extraction")
        return _extract_snippet_by_pattern(full_file)

    parts = [node_to_string(child) for child in tree.children if list_tag(child) in _SNIPPET_TAGS]
    logger.debug("Extracted %d snippet blocks", len(parts))
    return "\n\n".join(parts)


def read_paper_size(full_file: str) -> str | None:
    """Return the ``(paper ...)`` value of a full file, or None if it has none.

    The value is returned as written, so sizes outside A4/A3/A2 (``"A1"``,
    ``"User"``) come back too.

    Raises:
        SExpressionError: If the text does not parse.
    """
    return child_value(parse_sexp(full_file), "paper") or None


def _extract_snippet_by_pattern(full_file: str) -> str:
    parts: list[str] = []
    lib_end = -1

    lib_match = _LIB_SYMBOLS_FALLBACK.search(full_file)
    if lib_match:
        parts.append(lib_match.group(1))
        lib_end = lib_match.end()

    for match in _SYMBOL_FALLBACK.finditer(full_file, max(lib_end, 0)):
        parts.append(match.group(1))

    return "\n\n".join(parts)


def _splice_after_header(full_file: str, comment_lines: list[str]) -> str:
    lines = full_file.split("\n")
    insert_index = 0

    for i, line in enumerate(lines):
        if any(marker in line for marker in _HEADER_MARKERS):
            insert_index = i + 1
        if _PAPER_MARKER in line:
            break

    block = "\n".join([f"  {line}" for line in comment_lines] + [""])
    lines.insert(insert_index, block)
    return "\n".join(lines)


def add_attribution(
    full_file: str,
    author: str,
    url: str,
    license: str,
) -> str:
    """Add source/author/license comment lines to a full ``.kicad_sch`` file.

    The comments go after the generator/version/uuid header lines and before
    the paper declaration. Call this on full files only, not snippets.

    Args:
        full_file: Full schematic text.
        author: Circuit author.
        url: Where the circuit was downloaded from.
        license: License identifier.

    Returns:
        The schematic text with four comment lines inserted.
    """
    return _splice_after_header(full_file, [
        f'(comment 1 "Source: {_escape(url)}")',
        f'(comment 2 "Author: {_escape(author)}")',
        f'(comment 3 "License: {_escape(license)}")',
        f'(comment 4 "Downloaded: {_today()}")',
    ])


def add_github_attribution(
    sexpr: str,
    repo_owner: str,
    repo_name: str,
    repo_url: str,
    file_path: str,
    license: str,
    score: float | None = None,
) -> str:
    """Add GitHub provenance comments to a schematic during batch import.

    Snippets are wrapped first (titled ``owner/name``) so the comments always
    land in a full file.

    Args:
        sexpr: Snippet or full schematic text.
        repo_owner: GitHub owner.
        repo_name: GitHub repository name.
        repo_url: Repository URL.
        file_path: Path of the schematic inside the repository.
        license: License identifier.
        score: Optional 0-10 quality score.

    Returns:
        Full schematic text with four comment lines inserted.
    """
    full_file = sexpr
    if is_clipboard_snippet(sexpr):
        full_file = wrap_snippet_to_full_file(sexpr, title=f"{repo_owner}/{repo_name}")

    score_text = f" | Quality: {score:g}/10" if score is not None else ""
    return _splice_after_header(full_file, [
        f'(comment 1 "GitHub: {_escape(repo_url)}")',
        f'(comment 2 "Source: {_escape(repo_owner)}/{_escape(repo_name)} | {_escape(file_path)}")',
        f'(comment 3 "License: {_escape(license)}{score_text}")',
        f'(comment 4 "Imported: {_today()} | CircuitSnips.com")',
    ])


def _remove_blocks(text: str, start_pattern: re.Pattern[str]) -> str:
    pieces: list[str] = []
    pos = 0
    while True:
        match = start_pattern.search(text, pos)
        if match is None:
            break
        end = walk_balanced_parens(text, match.start())
        if end is None:
            # Unterminated block: keep the rest of the text as is
            break
        pieces.append(text[pos:match.start()])
        pos = end + 1
    pieces.append(text[pos:])
    return "".join(pieces)


def remove_hierarchical_sheets(sexpr: str) -> str:
    """Remove hierarchical sheet references so a single sheet renders alone.

    Drops every ``(sheet_instances ...)`` block, which lists the other sheet
    files of a project, and every ``(sheet ...)`` symbol placed on the page.
    Lossy: only for previews and thumbnails, never for stored text.
    """
    result = _remove_blocks(sexpr, _SHEET_INSTANCES_START)
    result = _remove_blocks(result, _SHEET_START)
    if len(result) != len(sexpr):
        logger.debug("Stripped %d chars of hierarchical sheet data", len(sexpr) - len(result))
    return result
