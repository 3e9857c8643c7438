"""Character roster services - fixed slots with bindable reference images."""
from threading import Lock
from typing import List, Optional
from uuid import uuid4

from config import Config
from characters.models import Character, ReferenceImage
from common.error_messages import ErrorCode
from common.exceptions import NotFoundError, ValidationError
from utils.logger import get_logger

logger = get_logger("characters.services")


def default_characters(slots: int = Config.CHARACTER_SLOTS) -> List[Character]:
    """Fresh roster: "Character 1".."Character N", only the first included."""
    return [
        Character(id=str(i + 1), name=f"Character {i + 1}", selected=(i == 0))
        for i in range(slots)
    ]


class CharacterRoster:
    """The session's character slots.

    Slots are created once and never removed; images are bound, replaced or
    cleared in place. Readers get copies so a running batch sees a stable
    roster even if the user edits it mid-run.
    """

    def __init__(self, slots: int = Config.CHARACTER_SLOTS):
        self._lock = Lock()
        self._characters: List[Character] = default_characters(slots)

    def _index(self, character_id: str) -> int:
        for i, character in enumerate(self._characters):
            if character.id == character_id:
                return i
        raise NotFoundError(f"character {character_id} not found", ErrorCode.CHARACTER_NOT_FOUND)

    def list(self) -> List[Character]:
        with self._lock:
            return [c.model_copy() for c in self._characters]

    def get(self, character_id: str) -> Character:
        with self._lock:
            return self._characters[self._index(character_id)].model_copy()

    def update(self, character_id: str, name: Optional[str] = None, selected: Optional[bool] = None) -> Character:
        """Rename and/or toggle inclusion of a slot."""
        if name is not None and not name.strip():
            raise ValidationError("character name must not be empty")
        with self._lock:
            i = self._index(character_id)
            patch = {}
            if name is not None:
                patch["name"] = name
            if selected is not None:
                patch["selected"] = selected
            self._characters[i] = self._characters[i].model_copy(update=patch)
            updated = self._characters[i]
        logger.info(f"Updated character {character_id}: {patch}")
        return updated.model_copy()

    def bind_image(self, character_id: str, data: bytes, mime_type: str) -> Character:
        """
        Bind a reference image to a slot, replacing any previous one.

        Binding includes the character in subsequent requests.

        Args:
            character_id: Slot identifier
            data: Raw image bytes
            mime_type: Declared MIME type (must be image/*)

        Returns:
            Updated character
        """
        if not data:
            raise ValidationError("uploaded image is empty", ErrorCode.INVALID_IMAGE_DATA)
        if not mime_type or not mime_type.startswith("image/"):
            raise ValidationError(f"unsupported media type {mime_type!r}", ErrorCode.INVALID_IMAGE_DATA)

        preview_url = f"/api/characters/{character_id}/image?v={uuid4().hex[:8]}"
        with self._lock:
            i = self._index(character_id)
            image = ReferenceImage(data=data, mime_type=mime_type, preview_url=preview_url)
            self._characters[i] = self._characters[i].model_copy(update={"image": image, "selected": True})
            updated = self._characters[i]
        logger.info(f"Bound reference image to character {character_id} ({mime_type}, {len(data)} bytes)")
        return updated.model_copy()

    def clear_image(self, character_id: str) -> Character:
        with self._lock:
            i = self._index(character_id)
            self._characters[i] = self._characters[i].model_copy(update={"image": None})
            updated = self._characters[i]
        logger.info(f"Cleared reference image of character {character_id}")
        return updated.model_copy()
