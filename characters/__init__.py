"""Character roster module."""
from characters.models import Character, ReferenceImage
from characters.services import CharacterRoster, default_characters

__all__ = [
    "Character",
    "ReferenceImage",
    "CharacterRoster",
    "default_characters"
]
