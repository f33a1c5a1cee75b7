"""Configuration management using Pydantic Settings."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from kicad_snippet.models.types import SheetSize


class TransportType(str, Enum):
    STDIO = "stdio"
    SSE = "sse"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class KiCadSnippetConfig(BaseSettings):
    """Configuration for the KiCad snippet server, loaded from environment variables."""

    model_config = {"env_prefix": "KICAD_SNIPPET_", "env_file": ".env", "extra": "ignore"}

    transport: TransportType = Field(
        default=TransportType.STDIO,
        description="MCP transport: stdio or sse",
    )
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Path to log file. Defaults to ~/.kicad-snippet/logs/server.log",
    )
    sse_host: str = Field(default="127.0.0.1", description="SSE server host")
    sse_port: int = Field(default=8765, description="SSE server port")

    generator: str = Field(
        default="CircuitSnips",
        description="Generator name written into wrapped snippets",
    )
    generator_version: str = Field(
        default="1.0",
        description="Generator version written into wrapped snippets",
    )
    company: str = Field(
        default="CircuitSnips",
        description="Title block company written into wrapped snippets",
    )
    default_title: str = Field(
        default="Circuit Snippet",
        description="Title block title when none is given",
    )
    default_paper: SheetSize = Field(
        default=SheetSize.A4,
        description="Paper size when none is given and no geometry is available",
    )
    max_clipboard_bytes: int = Field(
        default=1024 * 1024,
        description="Clipboard output above this size is refused",
    )
    warn_clipboard_bytes: int = Field(
        default=512 * 1024,
        description="Clipboard output above this size gets a warning",
    )

    def get_data_dir(self) -> Path:
        """Get the platform-appropriate data directory."""
        if os.name == "nt":
            base = Path(os.environ.get("USERPROFILE", Path.home()))
        else:
            base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
        data_dir = base / ".kicad-snippet"
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_log_dir(self) -> Path:
        """Get the log directory, creating it if needed."""
        log_dir = self.get_data_dir() / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        return log_dir

    def get_log_file_path(self) -> Path:
        """Resolve the log file path."""
        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            return self.log_file
        return self.get_log_dir() / "server.log"
