"""Tests for snippet/full-file format detection."""

from __future__ import annotations

from kicad_snippet.models.types import SnippetFormat
from kicad_snippet.utils.classifier import classify_format, is_clipboard_snippet


class TestClassifyFormat:
    def test_full_file(self, sample_schematic: str):
        assert classify_format(sample_schematic) is SnippetFormat.FULL

    def test_snippet(self, sample_snippet: str):
        assert classify_format(sample_snippet) is SnippetFormat.SNIPPET

    def test_lib_symbols_anywhere(self):
        assert classify_format('\n\n  (wire (pts))\n(lib_symbols (symbol "X"))') is SnippetFormat.SNIPPET

    def test_symbol_only(self):
        assert classify_format('(symbol (lib_id "Device:R") (at 0 0 0))') is SnippetFormat.SNIPPET

    def test_kicad_sch_wins_over_lib_symbols(self):
        text = '(lib_symbols) (symbol (lib_id "Device:R")) (kicad_sch (version 20230121))'
        assert classify_format(text) is SnippetFormat.FULL

    def test_unknown_text_defaults_to_full(self):
        assert classify_format("(wire (pts (xy 0 0) (xy 1 1)))") is SnippetFormat.FULL
        assert classify_format("hello world") is SnippetFormat.FULL

    def test_needs_open_paren(self):
        # Bare words without the paren do not count
        assert classify_format("kicad_sch lib_symbols symbol") is SnippetFormat.FULL


class TestIsClipboardSnippet:
    def test_snippet(self, sample_snippet: str):
        assert is_clipboard_snippet(sample_snippet)

    def test_full(self, sample_schematic: str):
        assert not is_clipboard_snippet(sample_schematic)
