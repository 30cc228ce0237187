"""
Application settings using Pydantic for validation and type safety.
All values can be overridden with MDPLAY_* environment variables or a .env file.
"""
import tempfile
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

STARTER_SLIDE_NAME = "01_welcome.md"
STARTER_SLIDE = """---
title: Welcome
---

# Welcome

Edit the files in this directory to build your deck.

<!-- fragment -->

- Files are shown in alphabetical order
- Prefix them with numbers: `01_intro.md`, `02_demo.cast`

<!-- notes: This is a speaker note. Start mdplay with --presenter to see it. -->
"""


class Settings(BaseSettings):
    """Application configuration with validation."""
    
    # Application
    app_name: str = Field(default="mdplay", description="Application name")
    debug: bool = Field(default=False, description="Debug mode flag")
    
    # Presenter server
    presenter_host: str = Field(default="127.0.0.1", description="Presenter server host")
    presenter_port: int = Field(default=3333, ge=1, le=65535, description="Presenter server port")
    
    # Slide sources (relative to the working directory)
    default_slides_dir: Path = Field(default=Path("slides"), description="Fallback slides directory")
    deck_dir: Path = Field(default=Path(".deck"), description="Conventional deck directory")
    auto_create_default: bool = Field(
        default=True,
        description="Provision the fallback directory with a starter slide when it is missing"
    )
    
    # Live reload
    reload_debounce_ms: int = Field(
        default=100,
        ge=10,
        le=5000,
        description="Quiet period before a burst of file changes triggers a reload"
    )
    
    # Cast playback
    player_command: str = Field(default="asciinema", description="External recording player")
    player_args: list[str] = Field(
        default=["play", "-q", "-i", "0.5", "-s", "1.5"],
        description="Arguments passed to the player before the recording path"
    )
    cast_padding: int = Field(
        default=4,
        ge=0,
        le=20,
        description="Columns/rows subtracted from the terminal size when resizing recordings"
    )
    
    # Layout
    content_width_ratio: float = Field(
        default=0.66,
        gt=0.1,
        le=1.0,
        description="Share of the terminal width used by the content column"
    )
    max_content_width: int = Field(default=80, ge=20, le=400, description="Content column ceiling")
    image_height_ratio: float = Field(
        default=0.6,
        gt=0.0,
        le=1.0,
        description="Share of the viewport height an image may occupy"
    )
    
    # Look and feel
    default_theme: str = Field(default="default", description="Theme used at startup")
    header_fonts: list[str] = Field(
        default=["small", "standard", "mini", "slant", "big", "banner3"],
        description="FIGlet fonts cycled with the 'f' key (first one is used at startup)"
    )
    
    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_file: Path = Field(
        default=Path(tempfile.gettempdir()) / "mdplay.log",
        description="Log destination (the terminal itself is owned by the UI)"
    )
    
    @field_validator("header_fonts")
    @classmethod
    def validate_header_fonts(cls, v: list[str]) -> list[str]:
        """Require at least one header font."""
        if not v:
            raise ValueError("header_fonts must contain at least one font")
        return v
    
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level
    
    @property
    def presenter_url(self) -> str:
        """Get the browser URL of the presenter view."""
        return f"http://localhost:{self.presenter_port}"
    
    def ensure_default_deck(self, path: Path) -> bool:
        """
        Create the fallback slides directory with a starter slide.
        
        Only applies when the directory does not exist yet and provisioning
        is enabled.
        
        Returns:
            True if the directory was created
        """
        if not self.auto_create_default or path.exists():
            return False
        path.mkdir(parents=True, exist_ok=True)
        (path / STARTER_SLIDE_NAME).write_text(STARTER_SLIDE, encoding="utf-8")
        return True
    
    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        env_prefix = "MDPLAY_"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.
    
    Using lru_cache ensures settings are loaded once and reused.
    """
    return Settings()
