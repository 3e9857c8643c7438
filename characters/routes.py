"""Character roster API routes."""
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from fastapi.responses import Response

from config import Config
from characters.models import CharacterListResponse, CharacterUpdate, CharacterView
from common.exceptions import StudioError
from studio import StudioSession, get_session
from utils.logger import get_logger

logger = get_logger("characters.routes")
router = APIRouter(prefix="/api/characters", tags=["characters"])


@router.get("", response_model=CharacterListResponse)
def list_characters(studio: StudioSession = Depends(get_session)):
    """List the character slots in order."""
    characters = studio.characters.list()
    return CharacterListResponse(
        characters=[CharacterView.from_character(c) for c in characters],
        count=len(characters)
    )


@router.put("/{character_id}", response_model=CharacterView)
def update_character(
    character_id: str,
    payload: CharacterUpdate,
    studio: StudioSession = Depends(get_session)
):
    """Rename a character and/or toggle whether it is included in requests."""
    try:
        updated = studio.characters.update(character_id, name=payload.name, selected=payload.selected)
    except StudioError as e:
        raise e.to_http()
    return CharacterView.from_character(updated)


@router.post("/{character_id}/image", response_model=CharacterView)
async def upload_character_image(
    character_id: str,
    file: UploadFile = File(...),
    studio: StudioSession = Depends(get_session)
):
    """
    Bind a reference image to a character slot.

    Args:
        character_id: Slot identifier
        file: Image file (multipart/form-data)

    Returns:
        Updated character; binding an image also includes the character
    """
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="File must be an image")

    try:
        image_data = await file.read()
    except Exception as e:
        logger.error(f"Failed to read uploaded file: {e}")
        raise HTTPException(status_code=400, detail="Failed to read uploaded file")

    if len(image_data) > Config.MAX_REFERENCE_IMAGE_BYTES:
        limit_mb = Config.MAX_REFERENCE_IMAGE_BYTES // (1024 * 1024)
        raise HTTPException(status_code=400, detail=f"File size exceeds {limit_mb}MB limit")

    if len(image_data) == 0:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    try:
        updated = studio.characters.bind_image(character_id, image_data, file.content_type)
    except StudioError as e:
        raise e.to_http()

    return CharacterView.from_character(updated)


@router.get("/{character_id}/image")
def get_character_image(character_id: str, studio: StudioSession = Depends(get_session)):
    """Serve the bound reference image for previewing."""
    try:
        character = studio.characters.get(character_id)
    except StudioError as e:
        raise e.to_http()
    if character.image is None:
        raise HTTPException(status_code=404, detail="No image bound to this character")
    return Response(content=character.image.data, media_type=character.image.mime_type)


@router.delete("/{character_id}/image", response_model=CharacterView)
def clear_character_image(character_id: str, studio: StudioSession = Depends(get_session)):
    """Remove the bound reference image; the slot itself stays."""
    try:
        updated = studio.characters.clear_image(character_id)
    except StudioError as e:
        raise e.to_http()
    return CharacterView.from_character(updated)
