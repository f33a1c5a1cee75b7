"""Shared test fixtures and sample documents."""

from __future__ import annotations

from pathlib import Path

import pytest

from kicad_snippet.config import KiCadSnippetConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Minimal full file with one placed resistor and no footprint
MINIMAL_SCHEMATIC = """\
(kicad_sch (version 20230121) (generator eeschema)
  (uuid "00000000-0000-0000-0000-000000000001")
  (paper "A4")
  (symbol (lib_id "Device:R") (at 10 20 0) (property "Reference" "R1") (property "Value" "10k"))
)
"""


def make_schematic(version: int | str, body: str = "") -> str:
    """Build a small full file with the given version and body."""
    return f"""\
(kicad_sch (version {version}) (generator eeschema)
  (uuid "00000000-0000-0000-0000-000000000002")
  (paper "A4")
{body}
)
"""


def make_symbol(reference: str, value: str, x: float, y: float, lib_id: str = "Device:R", footprint: str = "") -> str:
    """Build a placed symbol instance block."""
    footprint_prop = f'\n    (property "Footprint" "{footprint}")' if footprint else ""
    return f"""\
  (symbol (lib_id "{lib_id}") (at {x} {y} 0) (unit 1)
    (uuid "{reference}-uuid")
    (property "Reference" "{reference}")
    (property "Value" "{value}"){footprint_prop}
  )"""


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def sample_schematic_path() -> Path:
    return FIXTURES_DIR / "sample_schematic.kicad_sch"


@pytest.fixture
def sample_schematic(sample_schematic_path: Path) -> str:
    return sample_schematic_path.read_text(encoding="utf-8")


@pytest.fixture
def sample_snippet_path() -> Path:
    return FIXTURES_DIR / "sample_snippet.kicad_sch"


@pytest.fixture
def sample_snippet(sample_snippet_path: Path) -> str:
    return sample_snippet_path.read_text(encoding="utf-8")


@pytest.fixture
def legacy_schematic() -> str:
    return (FIXTURES_DIR / "legacy_schematic.kicad_sch").read_text(encoding="utf-8")


@pytest.fixture
def minimal_schematic() -> str:
    return MINIMAL_SCHEMATIC


@pytest.fixture
def config(tmp_path: Path) -> KiCadSnippetConfig:
    return KiCadSnippetConfig(log_file=tmp_path / "server.log", _env_file=None)
