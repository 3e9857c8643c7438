"""Result archive module."""
from archive.naming import generate_filename, archive_name, image_mime_type
from archive.services import ResultArchiver

__all__ = [
    "generate_filename",
    "archive_name",
    "image_mime_type",
    "ResultArchiver"
]
