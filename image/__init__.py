"""Image generation module."""
from image.models import AspectRatio, AspectRatioSelection, ContentPart, RequestPayload
from image.composer import compose, resolve_aspect_ratio
from image.services import GenerationClient

__all__ = [
    "AspectRatio",
    "AspectRatioSelection",
    "ContentPart",
    "RequestPayload",
    "compose",
    "resolve_aspect_ratio",
    "GenerationClient"
]
