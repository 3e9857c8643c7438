"""Deterministic names for generated files and archives."""
from datetime import date
from typing import Optional

from config import Config

IMAGE_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}


def image_mime_type(image_url: str) -> str:
    """Media type declared by a data: URL; anything else is assumed to be PNG."""
    if image_url.startswith("data:"):
        header = image_url[len("data:"):].split(",", 1)[0]
        mime_type = header.split(";", 1)[0].strip().lower()
        if mime_type:
            return mime_type
    return "image/png"


def generate_filename(index: int, mime_type: str = "image/png") -> str:
    """Filename for the image of the active prompt at 0-based index."""
    if index < 0:
        raise ValueError("index must not be negative")
    extension = IMAGE_EXTENSIONS.get(mime_type, "png")
    return f"image_{index + 1:02d}.{extension}"


def archive_name(today: Optional[date] = None, prefix: str = Config.ARCHIVE_PREFIX) -> str:
    """Download name of a batch archive, stable for a given calendar date."""
    today = today or date.today()
    return f"{prefix}_{today.isoformat()}.zip"
