"""Slug, tag and category suggestions derived from extracted metadata."""

from __future__ import annotations

import re

from kicad_snippet.models.types import ParsedMetadata

MAX_SLUG_LENGTH = 60
MAX_SUGGESTED_TAGS = 8

# (substrings of the lowercased lib_id, tag)
_LIB_TAG_RULES: list[tuple[tuple[str, ...], str]] = [
    (("opamp", "amplifier"), "op-amp"),
    (("regulator",), "voltage-regulator"),
    (("sensor",), "sensor"),
    (("connector",), "connector"),
    (("mcu", "microcontroller"), "microcontroller"),
    (("relay",), "relay"),
    (("transistor",), "transistor"),
    (("diode",), "diode"),
]

# (substrings of the lowercased value, tag)
_VALUE_TAG_RULES: list[tuple[tuple[str, ...], str]] = [
    (("555",), "timer"),
    (("lm358", "tl072"), "op-amp"),
    (("7805", "lm317"), "voltage-regulator"),
    (("esp32", "arduino"), "microcontroller"),
]

# (reference designator prefix, tag)
_REFERENCE_TAG_RULES: list[tuple[str, str]] = [
    ("u", "ic"),
    ("r", "resistor"),
    ("c", "capacitor"),
    ("l", "inductor"),
    ("d", "diode"),
    ("q", "transistor"),
]

_VOLTAGE_TAG_RULES: list[tuple[tuple[str, ...], str]] = [
    (("3.3v", "3v3"), "3.3v"),
    (("5v",), "5v"),
    (("12v",), "12v"),
]


def generate_slug(title: str) -> str:
    """Generate a URL-friendly slug from a circuit title."""
    slug = title.lower().strip()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug[:MAX_SLUG_LENGTH]


def _matches(text: str, needles: tuple[str, ...]) -> bool:
    return any(needle in text for needle in needles)


def suggest_tags(metadata: ParsedMetadata) -> list[str]:
    """Suggest up to eight tags from library ids, values and references."""
    tags: dict[str, None] = {}

    for component in metadata.components:
        lib = component.lib_id.lower()
        value = component.value.lower()
        ref = component.reference.lower()

        for needles, tag in _LIB_TAG_RULES:
            if _matches(lib, needles):
                tags[tag] = None
        for needles, tag in _VALUE_TAG_RULES:
            if _matches(value, needles):
                tags[tag] = None
        for prefix, tag in _REFERENCE_TAG_RULES:
            if ref.startswith(prefix):
                tags[tag] = None

    all_values = " ".join(c.value for c in metadata.components).lower()
    for needles, tag in _VOLTAGE_TAG_RULES:
        if _matches(all_values, needles):
            tags[tag] = None

    return list(tags)[:MAX_SUGGESTED_TAGS]


def suggest_category(metadata: ParsedMetadata) -> str:
    """Estimate a browse category from the components used."""
    text = " ".join(f"{c.lib_id} {c.value}".lower() for c in metadata.components)

    if _matches(text, ("regulator", "7805", "lm317")):
        return "Power Supply"
    if _matches(text, ("opamp", "amplifier", "lm358")):
        return "Analog"
    if _matches(text, ("mcu", "esp", "arduino")):
        return "Microcontroller"
    if _matches(text, ("sensor", "temperature", "pressure")):
        return "Sensors"
    if "relay" in text or ("transistor" in text and "load" in text):
        return "Control"
    if _matches(text, ("uart", "spi", "i2c")):
        return "Communication"
    if _matches(text, ("led", "display")):
        return "Display/LED"
    return "General"
