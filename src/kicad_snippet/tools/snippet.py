"""Snippet tools - 10 tools."""

from __future__ import annotations

import json

from fastmcp import FastMCP

from kicad_snippet.config import KiCadSnippetConfig
from kicad_snippet.logging_config import get_logger
from kicad_snippet.models.types import Dimensions, SheetSize, SheetSizeResult, ValidationResult
from kicad_snippet.utils.classifier import is_clipboard_snippet
from kicad_snippet.utils.clipboard import clean_for_paste, validate_clipboard_data
from kicad_snippet.utils.converter import (
    add_attribution as splice_attribution,
    add_github_attribution as splice_github_attribution,
    extract_snippet_from_full_file,
    read_paper_size,
    remove_hierarchical_sheets,
    wrap_snippet_to_full_file,
)
from kicad_snippet.utils.sheet_size import select_sheet_size
from kicad_snippet.utils.suggestions import generate_slug, suggest_category, suggest_tags
from kicad_snippet.utils.validation import validate_sexpression

logger = get_logger("tools.snippet")


def _error(message: str, **extra) -> str:
    return json.dumps({"status": "error", "message": message, **extra}, indent=2)


def _invalid(result: ValidationResult) -> str:
    return _error(
        "Schematic failed validation: " + "; ".join(result.errors),
        errors=result.errors,
        warnings=result.warnings,
    )


def register_tools(mcp: FastMCP, config: KiCadSnippetConfig) -> None:
    """Register snippet tools on the MCP server."""

    def wrap(text: str, title: str, paper: SheetSize) -> str:
        return wrap_snippet_to_full_file(
            text,
            title=title or config.default_title,
            paper_size=paper,
            generator=config.generator,
            generator_version=config.generator_version,
            company=config.company,
        )

    def sheet_for(result: ValidationResult) -> SheetSizeResult:
        # Nothing placed: no geometry to size from
        if result.metadata.stats.component_count == 0:
            return SheetSizeResult(
                size=config.default_paper,
                recommended=config.default_paper,
                bounding_box=Dimensions(width=0, height=0),
            )
        return select_sheet_size(result.metadata.bounding_box)

    @mcp.tool()
    def validate_schematic(text: str) -> str:
        """Validate KiCad schematic text, either a clipboard snippet or a full file.

        Args:
            text: Raw S-expression text as pasted or uploaded.

        Returns:
            JSON with valid flag, errors, warnings, detected format and metadata.
        """
        result = validate_sexpression(text)
        return json.dumps({"status": "success", **result.model_dump(mode="json")}, indent=2)

    @mcp.tool()
    def extract_schematic_metadata(text: str) -> str:
        """Extract components, nets, wire count and footprint stats.

        Snippets are wrapped internally; the text itself is not changed.

        Args:
            text: Snippet or full schematic text.

        Returns:
            JSON with the extracted metadata.
        """
        result = validate_sexpression(text)
        if not result.valid:
            return _invalid(result)
        return json.dumps({
            "status": "success",
            "original_format": result.original_format.value,
            "metadata": result.metadata.model_dump(mode="json"),
        }, indent=2)

    @mcp.tool()
    def select_sheet(text: str) -> str:
        """Choose the paper size (A4, A3 or A2) that fits the schematic content.

        Args:
            text: Snippet or full schematic text.

        Returns:
            JSON with size, oversized flag and content dimensions in mm.
        """
        result = validate_sexpression(text)
        if not result.valid:
            return _invalid(result)
        sheet = sheet_for(result)
        return json.dumps({"status": "success", **sheet.model_dump(mode="json")}, indent=2)

    @mcp.tool()
    def wrap_snippet(text: str, title: str = "", paper_size: str = "") -> str:
        """Wrap a clipboard snippet into a complete .kicad_sch document.

        Args:
            text: Clipboard snippet text.
            title: Title block title. Defaults to the configured title.
            paper_size: 'A4', 'A3' or 'A2'. Chosen from the content size if empty.

        Returns:
            JSON with the full file text and the paper size used.
        """
        if not is_clipboard_snippet(text):
            return _error("Text is already a full schematic file.")

        is_oversized = False
        if paper_size:
            try:
                paper = SheetSize(paper_size)
            except ValueError:
                return _error(
                    f"Invalid paper_size: {paper_size}. "
                    f"Must be one of: {[s.value for s in SheetSize]}"
                )
        else:
            result = validate_sexpression(text)
            if not result.valid:
                return _invalid(result)
            sheet = sheet_for(result)
            paper = sheet.size
            is_oversized = sheet.is_oversized

        full_file = wrap(text, title, paper)
        logger.info("Wrapped snippet on %s paper", paper.value)
        return json.dumps({
            "status": "success",
            "sexpr": full_file,
            "paper_size": paper.value,
            "is_oversized": is_oversized,
        }, indent=2)

    @mcp.tool()
    def extract_snippet(text: str) -> str:
        """Turn a full .kicad_sch file into paste-ready clipboard content.

        Keeps library definitions and placed symbols, drops the header and
        title block. Snippets are returned unchanged unless the clipboard
        check flags whitespace artifacts, in which case long space and blank
        line runs are collapsed and ``sanitized`` is true.

        Args:
            text: Full schematic or snippet text.

        Returns:
            JSON with the snippet text and clipboard checks.
        """
        snippet = text if is_clipboard_snippet(text) else extract_snippet_from_full_file(text)
        check = validate_clipboard_data(
            snippet,
            max_bytes=config.max_clipboard_bytes,
            warn_bytes=config.warn_clipboard_bytes,
        )
        if not check.valid:
            return _error(
                "Snippet is not safe to paste: " + "; ".join(check.errors),
                errors=check.errors,
                warnings=check.warnings,
            )
        cleaned = clean_for_paste(snippet, check)
        return json.dumps({
            "status": "success",
            "sexpr": snippet if cleaned is None else cleaned,
            "sanitized": cleaned is not None,
            "warnings": check.warnings,
            "stats": check.stats.model_dump(),
        }, indent=2)

    @mcp.tool()
    def add_attribution(text: str, author: str, url: str, license: str) -> str:
        """Add source, author and license comments to a full schematic file.

        Args:
            text: Full schematic text.
            author: Circuit author.
            url: Page the circuit is downloaded from.
            license: License identifier (e.g. 'CERN-OHL-S-2.0').

        Returns:
            JSON with the annotated schematic text.
        """
        if is_clipboard_snippet(text):
            return _error("Attribution needs a full schematic file. Wrap the snippet first.")
        annotated = splice_attribution(text, author=author, url=url, license=license)
        return json.dumps({"status": "success", "sexpr": annotated}, indent=2)

    @mcp.tool()
    def add_github_attribution(
        text: str,
        repo_owner: str,
        repo_name: str,
        repo_url: str,
        file_path: str,
        license: str,
        score: float | None = None,
    ) -> str:
        """Add GitHub provenance comments to an imported circuit.

        Snippets are wrapped into a full file first.

        Args:
            text: Snippet or full schematic text.
            repo_owner: GitHub owner.
            repo_name: Repository name.
            repo_url: Repository URL.
            file_path: Schematic path inside the repository.
            license: License identifier.
            score: Optional 0-10 quality score.

        Returns:
            JSON with the annotated full schematic text.
        """
        annotated = splice_github_attribution(
            text,
            repo_owner=repo_owner,
            repo_name=repo_name,
            repo_url=repo_url,
            file_path=file_path,
            license=license,
            score=score,
        )
        logger.info("Added GitHub attribution for %s/%s", repo_owner, repo_name)
        return json.dumps({"status": "success", "sexpr": annotated}, indent=2)

    @mcp.tool()
    def prepare_preview(text: str, title: str = "") -> str:
        """Build the full file a schematic viewer needs to render a preview.

        Snippets are wrapped on a paper size that fits their content, and
        hierarchical sheet references are removed since the other sheet
        files are not available. Full files keep their own paper:
        ``paper_size`` is the sheet the returned text renders on, and
        ``recommended_paper_size`` is the size that fits the content.

        Args:
            text: Snippet or full schematic text.
            title: Title block title for wrapped snippets.

        Returns:
            JSON with the renderable text, paper sizes and warnings.
        """
        result = validate_sexpression(text)
        if not result.valid:
            return _invalid(result)

        sheet = sheet_for(result)
        if result.is_snippet:
            full_file = wrap(text, title, sheet.size)
            paper = sheet.size.value
        else:
            full_file = text
            paper = read_paper_size(text) or sheet.size.value

        warnings = list(result.warnings)
        if sheet.is_oversized:
            warnings.append(
                f"Circuit is larger than {sheet.size.value} "
                f"({sheet.bounding_box.width:.0f} x {sheet.bounding_box.height:.0f} mm); "
                "parts may fall outside the sheet"
            )

        return json.dumps({
            "status": "success",
            "sexpr": remove_hierarchical_sheets(full_file),
            "paper_size": paper,
            "recommended_paper_size": sheet.size.value,
            "is_oversized": sheet.is_oversized,
            "warnings": warnings,
        }, indent=2)

    @mcp.tool()
    def validate_clipboard(text: str) -> str:
        """Check snippet text before copying it for pasting into KiCad.

        Args:
            text: Snippet text about to be copied.

        Returns:
            JSON with valid flag, errors, warnings and element counts.
        """
        check = validate_clipboard_data(
            text,
            max_bytes=config.max_clipboard_bytes,
            warn_bytes=config.warn_clipboard_bytes,
        )
        return json.dumps({"status": "success", **check.model_dump()}, indent=2)

    @mcp.tool()
    def suggest_metadata(text: str, title: str = "") -> str:
        """Suggest tags, a category and a URL slug for a circuit.

        Args:
            text: Snippet or full schematic text.
            title: Circuit title, used for the slug.

        Returns:
            JSON with tags, category and slug (empty without a title).
        """
        result = validate_sexpression(text)
        if not result.valid:
            return _invalid(result)
        return json.dumps({
            "status": "success",
            "tags": suggest_tags(result.metadata),
            "category": suggest_category(result.metadata),
            "slug": generate_slug(title) if title else "",
        }, indent=2)
