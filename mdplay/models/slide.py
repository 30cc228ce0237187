"""Slide-related Pydantic models."""
from pathlib import Path
from typing import Annotated, Any, Literal, NewType, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

SlideId = NewType("SlideId", str)

SlideLayout = Literal["default", "center", "split"]
SlideThemeName = Literal["default", "neon", "minimal"]

LAYOUTS = ("default", "center", "split")
SLIDE_THEMES = ("default", "neon", "minimal")


def _string_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class SlideMetadata(BaseModel):
    """
    Front matter of a slide.
    
    Values of the wrong type or outside the allowed choices are dropped
    (treated as unset) instead of failing validation.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")
    
    title: Optional[str] = Field(default=None, description="Explicit slide title")
    subtitle: Optional[str] = Field(default=None, description="Line shown under the header")
    layout: Optional[SlideLayout] = Field(default=None, description="Content placement")
    theme: Optional[SlideThemeName] = Field(default=None, description="Per-slide theme override")
    hidden: Optional[bool] = Field(default=None, description="Exclude the slide from the deck")
    notes: Optional[str] = Field(default=None, description="Speaker notes fallback")
    
    @field_validator("title", "subtitle", "notes", mode="before")
    @classmethod
    def keep_strings(cls, v: Any) -> Optional[str]:
        return _string_or_none(v)
    
    @field_validator("layout", mode="before")
    @classmethod
    def known_layout(cls, v: Any) -> Optional[str]:
        return v if v in LAYOUTS else None
    
    @field_validator("theme", mode="before")
    @classmethod
    def known_theme(cls, v: Any) -> Optional[str]:
        return v if v in SLIDE_THEMES else None
    
    @field_validator("hidden", mode="before")
    @classmethod
    def strict_bool(cls, v: Any) -> Optional[bool]:
        return v if isinstance(v, bool) else None
    
    @classmethod
    def from_front_matter(cls, data: Any) -> "SlideMetadata":
        """Build metadata from a parsed front-matter mapping (anything else yields empty metadata)."""
        if not isinstance(data, dict):
            return cls()
        return cls.model_validate({str(k): v for k, v in data.items()})
    
    def merged_over(self, defaults: "SlideMetadata") -> "SlideMetadata":
        """Return metadata where unset fields fall back to ``defaults``."""
        values = defaults.model_dump()
        values.update(self.model_dump(exclude_none=True))
        return SlideMetadata(**values)


class _SlideBase(BaseModel):
    model_config = ConfigDict(frozen=True)
    
    title: str = Field(..., description="Display title")
    filename: str = Field(..., description="Unique key within one load")
    metadata: SlideMetadata = Field(default_factory=SlideMetadata)
    notes: str = Field(default="", description="Speaker notes")
    
    @property
    def id(self) -> SlideId:
        return SlideId(self.filename)


class MarkdownSlide(_SlideBase):
    """A text slide rendered from Markdown."""
    
    kind: Literal["markdown"] = "markdown"
    content: str = Field(default="", description="Body with notes directive removed")
    slide_dir: Path = Field(..., description="Base directory for relative image paths")
    
    @property
    def is_cast(self) -> bool:
        return False


class CastSlide(_SlideBase):
    """A terminal recording handed to the external player."""
    
    kind: Literal["cast"] = "cast"
    path: Path = Field(..., description="Recording file")
    
    @property
    def is_cast(self) -> bool:
        return True


Slide = Annotated[Union[MarkdownSlide, CastSlide], Field(discriminator="kind")]


class ImageRef(BaseModel):
    """An image reference found in Markdown source."""
    model_config = ConfigDict(frozen=True)
    
    full_match: str = Field(..., description="Exact source text of the reference")
    alt_text: str = Field(default="Image", description="Alternative text")
    image_path: str = Field(default="", description="Path or URL as written")
    
    @property
    def is_remote(self) -> bool:
        return self.image_path.startswith(("http://", "https://"))
