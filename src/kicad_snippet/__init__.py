"""KiCad schematic snippet toolkit: validation, metadata and format conversion."""

__version__ = "0.1.0"
