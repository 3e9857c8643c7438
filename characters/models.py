"""Pydantic models for the character roster."""
from typing import Optional
from pydantic import BaseModel, Field


class ReferenceImage(BaseModel):
    """Image bound to a character slot."""
    data: bytes = Field(..., description="Raw image bytes as uploaded")
    mime_type: str = Field(..., description="Declared image MIME type")
    preview_url: str = Field(..., description="Local URL for previewing the image")


class Character(BaseModel):
    """A named, optionally image-bound subject used as a visual reference."""
    id: str = Field(..., description="Stable slot identifier")
    name: str = Field(..., description="Display name, used verbatim in prompt text")
    image: Optional[ReferenceImage] = Field(None, description="Bound reference image")
    selected: bool = Field(False, description="Whether the character is included in requests")

    @property
    def contributes(self) -> bool:
        """Included and carrying image bytes."""
        return self.selected and self.image is not None and bool(self.image.data)


class CharacterUpdate(BaseModel):
    """Partial update of a character slot."""
    name: Optional[str] = Field(None, min_length=1, description="New display name")
    selected: Optional[bool] = Field(None, description="New inclusion flag")


class CharacterView(BaseModel):
    """Character as returned by the API (image bytes omitted)."""
    id: str
    name: str
    selected: bool
    has_image: bool
    mime_type: Optional[str] = None
    preview_url: Optional[str] = None

    @classmethod
    def from_character(cls, character: Character) -> "CharacterView":
        image = character.image
        return cls(
            id=character.id,
            name=character.name,
            selected=character.selected,
            has_image=image is not None,
            mime_type=image.mime_type if image else None,
            preview_url=image.preview_url if image else None,
        )


class CharacterListResponse(BaseModel):
    characters: list[CharacterView] = Field(..., description="Roster in slot order")
    count: int = Field(..., description="Number of slots")
