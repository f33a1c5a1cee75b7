"""Validation of pasted or uploaded KiCad schematic text."""

from __future__ import annotations

import re
from pathlib import Path

from kicad_snippet.logging_config import get_logger
from kicad_snippet.models.errors import (
    FormatCompatibilityError,
    InvalidPathError,
    KiCadSnippetError,
    SExpressionError,
    UnbalancedParenthesesError,
    UnsupportedVersionError,
)
from kicad_snippet.models.types import ListNode, Node, SnippetFormat, ValidationResult
from kicad_snippet.utils.classifier import classify_format
from kicad_snippet.utils.converter import wrap_snippet_to_full_file
from kicad_snippet.utils.metadata import extract_metadata_from_tree
from kicad_snippet.utils.sexp_parser import check_paren_balance, list_tag, parse_sexp, scalar_value

logger = get_logger("validation")

# First KiCad 6 schematic format revision
MIN_SUPPORTED_VERSION = 20211014

KICAD_SCHEMATIC_EXT = ".kicad_sch"

_VERSION_PATTERN = re.compile(r"\s*(\d+)")


def _check_structure(tree: Node, fmt: SnippetFormat) -> ListNode:
    if not isinstance(tree, ListNode) or not tree.children:
        raise FormatCompatibilityError("Invalid S-expression structure")
    # A wrapped snippet always has the kicad_sch root
    if fmt is SnippetFormat.FULL and list_tag(tree) != "kicad_sch":
        raise FormatCompatibilityError("Not a KiCad schematic file (expected kicad_sch)")
    return tree


def _check_version(root: ListNode) -> int:
    """Read ``(version N)`` from the root and enforce the KiCad 6 floor.

    Raises:
        UnsupportedVersionError: If the version is missing or too old.
    """
    version = None
    for child in root.children:
        if list_tag(child) == "version" and len(child.children) >= 2:
            match = _VERSION_PATTERN.match(scalar_value(child.children[1]) or "")
            if match:
                version = int(match.group(1))
                break

    if version is None:
        raise UnsupportedVersionError(
            "Cannot determine KiCad version. Please use KiCad 6 or later."
        )
    if version < MIN_SUPPORTED_VERSION:
        raise UnsupportedVersionError(
            f"KiCad 5 or earlier format detected (version {version}). "
            "Please use KiCad 6 or later.",
            {"version": version},
        )
    return version


def validate_sexpression(sexpr: str) -> ValidationResult:
    """Validate KiCad schematic text, either a clipboard snippet or a full file.

    Never raises for malformed input: every problem comes back as an error
    string on an invalid result. Snippets are wrapped into a throwaway full
    file for checking; the caller's text is left as is.

    Args:
        sexpr: Raw text as pasted or uploaded.

    Returns:
        ValidationResult with metadata and content warnings when valid.
    """
    if not sexpr or not sexpr.strip():
        return ValidationResult(valid=False, errors=["Empty input"])

    try:
        check_paren_balance(sexpr)
    except UnbalancedParenthesesError as e:
        logger.info("Validation failed: %s", e)
        return ValidationResult(valid=False, errors=[str(e)])

    fmt = classify_format(sexpr)
    is_snippet = fmt is SnippetFormat.SNIPPET
    errors: list[str] = []
    warnings: list[str] = []

    working = sexpr
    if is_snippet:
        warnings.append("Clipboard snippet detected - will be stored as-is, wrapped for preview")
        working = wrap_snippet_to_full_file(sexpr, title="Validation")

    def invalid(message: str) -> ValidationResult:
        logger.info("Validation failed: %s", message)
        errors.append(message)
        return ValidationResult(
            valid=False,
            errors=errors,
            warnings=warnings,
            is_snippet=is_snippet,
            original_format=fmt,
        )

    try:
        root = _check_structure(parse_sexp(working), fmt)
        version = _check_version(root)
        metadata = extract_metadata_from_tree(root)
    except SExpressionError as e:
        return invalid(f"Failed to parse schematic: {e}")
    except KiCadSnippetError as e:
        return invalid(str(e))
    except RecursionError:
        return invalid("Failed to parse schematic: nesting too deep")

    logger.debug("Schematic version %d accepted", version)

    if metadata.stats.component_count == 0:
        warnings.append("No components found in schematic")
    if metadata.footprints.unassigned > 0:
        warnings.append(
            f"{metadata.footprints.unassigned} component(s) missing footprint assignments"
        )
    if metadata.stats.wire_count == 0 and metadata.stats.component_count > 1:
        warnings.append("No wires found - components may not be connected")
    warnings.extend(metadata.warnings)

    return ValidationResult(
        valid=True,
        errors=errors,
        warnings=warnings,
        metadata=metadata,
        is_snippet=is_snippet,
        original_format=fmt,
    )


def validate_kicad_path(path: str, expected_ext: str | None = None) -> Path:
    """Validate a path to a schematic file.

    Args:
        path: File path string.
        expected_ext: Expected file extension (e.g. '.kicad_sch').

    Returns:
        Resolved Path object.

    Raises:
        InvalidPathError: If the path is invalid or file doesn't exist.
    """
    if not path:
        raise InvalidPathError("File path cannot be empty")

    p = Path(path).resolve()

    if not p.is_file():
        raise InvalidPathError(f"File not found: {p}")

    if expected_ext and p.suffix != expected_ext:
        raise InvalidPathError(
            f"Expected {expected_ext} file, got '{p.suffix}': {p}"
        )

    return p


def read_schematic_text(path: str, expected_ext: str | None = None) -> str:
    """Read schematic text from disk for validation.

    Raises:
        InvalidPathError: If the file is missing or unreadable as UTF-8.
    """
    p = validate_kicad_path(path, expected_ext)
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidPathError(f"Cannot read file: {e}")
