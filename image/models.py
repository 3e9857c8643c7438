"""Image generation Pydantic models."""
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field


class AspectRatio(str, Enum):
    """Aspect ratios offered to the user."""
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"
    SQUARE = "1:1"
    STANDARD = "4:3"
    STANDARD_PORTRAIT = "3:4"
    CUSTOM = "Custom"


# Values the image model accepts in its image config
SUPPORTED_ASPECT_RATIOS = frozenset({"1:1", "3:4", "4:3", "9:16", "16:9"})

# Sent instead of a custom ratio, which the model cannot take structurally
DEFAULT_ASPECT_RATIO = AspectRatio.SQUARE.value


class AspectRatioSelection(BaseModel):
    """The user's aspect-ratio choice; custom_text only matters in Custom mode."""
    aspect_ratio: AspectRatio = Field(AspectRatio.LANDSCAPE, description="Selected aspect ratio")
    custom_text: str = Field("", description="Free-text ratio used when aspect_ratio is Custom (e.g. 21:9)")


class ContentPart(BaseModel):
    """One part of a multimodal request: inline image bytes or plain text."""
    text: Optional[str] = Field(None, description="Text content")
    data: Optional[bytes] = Field(None, description="Inline binary data")
    mime_type: Optional[str] = Field(None, description="Media type of the inline data")

    @property
    def is_image(self) -> bool:
        return self.data is not None


class RequestPayload(BaseModel):
    """Ordered content parts plus the structural aspect ratio for one generation call."""
    parts: List[ContentPart] = Field(..., min_length=1, description="Reference pairs followed by the prompt text")
    aspect_ratio: str = Field(..., description="Aspect ratio sent in the image config")

    @property
    def prompt_text(self) -> str:
        return self.parts[-1].text or ""

    @property
    def reference_count(self) -> int:
        return sum(1 for part in self.parts if part.is_image)
