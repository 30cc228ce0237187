"""Messages pushed to the browser presenter view."""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SlideMessage(BaseModel):
    """Sent whenever the active slide changes."""
    model_config = ConfigDict(populate_by_name=True)
    
    type: Literal["slide"] = "slide"
    slide_index: int = Field(..., ge=0, alias="slideIndex")
    total_slides: int = Field(..., ge=0, alias="totalSlides")
    title: str = Field(default="")
    notes: str = Field(default="")
    next_title: Optional[str] = Field(default=None, alias="nextTitle")


class InitMessage(BaseModel):
    """Sent once to each newly connected client."""
    model_config = ConfigDict(populate_by_name=True)
    
    type: Literal["init"] = "init"
    start_time: int = Field(..., description="Epoch milliseconds", alias="startTime")
