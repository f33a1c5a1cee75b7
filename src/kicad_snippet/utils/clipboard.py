"""Checks on snippet text before it is handed to the user's clipboard.

Guards against output that could hang or corrupt a KiCad session when
pasted: oversized data, broken S-expressions, missing library definitions
and formatting artifacts.
"""

from __future__ import annotations

import re

from kicad_snippet.logging_config import get_logger
from kicad_snippet.models.types import ClipboardStats, ClipboardValidationResult

logger = get_logger("clipboard")

MAX_CLIPBOARD_SIZE = 1024 * 1024
WARN_CLIPBOARD_SIZE = 512 * 1024
MAX_LINES = 50000

_BINARY_PATTERN = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F-\x9F]")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")

_LIB_SYMBOLS_LINE = re.compile(r"^\s*\(lib_symbols\b", re.MULTILINE)
_SYMBOL_INSTANCE_LINE = re.compile(r"^\s*\(symbol\s+\(", re.MULTILINE)
_WIRE_LINE = re.compile(r"^\s*\(wire\b", re.MULTILINE)
_LABEL_LINE = re.compile(r"^\s*\((?:label|global_label|hierarchical_label)\b", re.MULTILINE)

_SYMBOL_WITH_LIB_ID = re.compile(r"\(symbol\s+\(lib_id")
_EMPTY_LIB_SYMBOLS = re.compile(r"\(lib_symbols\s*\)")

_LONG_SPACE_RUN = re.compile(r" {100,}")
_LONG_NEWLINE_RUN = re.compile(r"\n{10,}")
# A 50-200 char unit repeated 4+ times on one line. The upper bound caps the
# backtracking done at each start position.
_REPEATED_CONTENT = re.compile(r"(.{50,200}?)\1{3,}")


def format_size(size: int) -> str:
    """Render a byte count as bytes, KB or MB."""
    if size < 1024:
        return f"{size} bytes"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def _count_elements(data: str) -> dict[str, int]:
    return {
        "lib_symbol_count": len(_LIB_SYMBOLS_LINE.findall(data)),
        "symbol_count": len(_SYMBOL_INSTANCE_LINE.findall(data)),
        "wire_count": len(_WIRE_LINE.findall(data)),
        "label_count": len(_LABEL_LINE.findall(data)),
    }


def _check_structure(data: str) -> tuple[list[str], list[str]]:
    errors: list[str] = []
    warnings: list[str] = []

    # Unlike the upload validator, parens inside strings are skipped here
    depth = 0
    in_string = False
    prev = ""
    for i, ch in enumerate(data):
        if ch == '"' and prev != "\\":
            in_string = not in_string
        elif not in_string:
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth < 0:
                    errors.append(
                        f"Unbalanced parentheses: found closing ')' without matching '(' at position {i}"
                    )
                    break
        prev = ch

    if depth > 0:
        errors.append(f"Unbalanced parentheses: {depth} unclosed '(' found")

    has_lib_symbols = "(lib_symbols" in data
    has_symbols = _SYMBOL_WITH_LIB_ID.search(data) is not None

    if has_symbols and not has_lib_symbols:
        warnings.append(
            "Snippet has symbol instances but no lib_symbols definitions. "
            "KiCad may not be able to display symbols correctly."
        )
    if has_symbols and _EMPTY_LIB_SYMBOLS.search(data):
        warnings.append(
            "lib_symbols section is empty but symbols are present. "
            "This may cause rendering issues."
        )

    return errors, warnings


def _check_suspicious_patterns(data: str, symbol_count: int, wire_count: int) -> list[str]:
    warnings: list[str] = []

    # Real KiCad output averages 30-50+ chars per line
    lines = data.split("\n")
    avg_chars = len(data) / len(lines)
    if avg_chars < 20 and len(lines) > 100:
        warnings.append(
            f"Suspiciously low characters per line ({avg_chars:.1f} avg). "
            "Data may have corrupted formatting."
        )

    if _LONG_SPACE_RUN.search(data):
        warnings.append("Data contains excessive whitespace which may indicate corruption.")

    if _LONG_NEWLINE_RUN.search(data):
        warnings.append("Data contains excessive blank lines which may indicate corruption.")

    if _REPEATED_CONTENT.search(data):
        warnings.append(
            "Data contains suspiciously repeated content which may indicate corruption."
        )

    if "\0" in data:
        warnings.append("Data contains null bytes which is invalid in S-expressions.")

    if symbol_count > 10 and wire_count == 0:
        warnings.append(
            f"Schematic has {symbol_count} symbols but no wires. "
            "Elements may not have been extracted properly."
        )

    return warnings


def validate_clipboard_data(
    data: str,
    max_bytes: int = MAX_CLIPBOARD_SIZE,
    warn_bytes: int = WARN_CLIPBOARD_SIZE,
    max_lines: int = MAX_LINES,
) -> ClipboardValidationResult:
    """Validate snippet text before it is copied to the clipboard.

    Args:
        data: Snippet text about to be copied.
        max_bytes: Size above which the copy is refused.
        warn_bytes: Size above which the user is warned.
        max_lines: Line count above which the copy is refused.

    Returns:
        ClipboardValidationResult with element counts.
    """
    errors: list[str] = []
    warnings: list[str] = []

    size = len(data.encode("utf-8"))
    line_count = len(data.split("\n"))

    if size > max_bytes:
        errors.append(
            f"Data too large ({format_size(size)}). "
            f"Maximum allowed is {format_size(max_bytes)}."
        )
    elif size > warn_bytes:
        warnings.append(
            f"Large data size ({format_size(size)}). This may take time to paste in KiCad."
        )

    if line_count > max_lines:
        errors.append(f"Too many lines ({line_count}). Maximum allowed is {max_lines}.")

    if _BINARY_PATTERN.search(data):
        errors.append("Data contains binary or non-printable characters.")

    counts = _count_elements(data)

    structure_errors, structure_warnings = _check_structure(data)
    errors.extend(structure_errors)
    warnings.extend(structure_warnings)

    warnings.extend(_check_suspicious_patterns(data, counts["symbol_count"], counts["wire_count"]))

    if errors:
        logger.info("Clipboard data rejected: %s", "; ".join(errors))

    return ClipboardValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        stats=ClipboardStats(size=size, line_count=line_count, **counts),
    )


def sanitize_clipboard_data(data: str) -> str:
    """Normalize whitespace runs and strip control characters.

    Only meant for data that validated with warnings but no errors.
    """
    result = re.sub(r" {4,}", "  ", data)
    result = re.sub(r"\n{3,}", "\n\n", result)
    return _CONTROL_CHARS.sub("", result)


def clean_for_paste(data: str, result: ClipboardValidationResult) -> str | None:
    """Sanitize data whose check flagged whitespace artifacts.

    Returns None when nothing needs cleaning: the data was rejected, passed
    without warnings, or its warnings are not about whitespace runs. Normal
    KiCad indentation is left alone in those cases.
    """
    if not result.valid or not result.warnings:
        return None
    if not (_LONG_SPACE_RUN.search(data) or _LONG_NEWLINE_RUN.search(data)):
        return None
    cleaned = sanitize_clipboard_data(data)
    logger.info("Sanitized clipboard data: %d -> %d chars", len(data), len(cleaned))
    return cleaned
