"""Prompt list and aspect-ratio routes."""
from typing import List, Optional

from fastapi import APIRouter, Body, Depends

from common.exceptions import StudioError
from image.models import AspectRatioSelection
from prompts.models import PromptCreate, PromptItem, PromptListResponse, PromptUpdate
from studio import StudioSession, get_session

router = APIRouter(prefix="/api", tags=["prompts"])


def _prompt_list(studio: StudioSession) -> PromptListResponse:
    prompts = studio.prompts.list()
    return PromptListResponse(prompts=prompts, count=len(prompts), max_prompts=studio.prompts.max_prompts)


@router.get("/prompts", response_model=PromptListResponse)
def list_prompts(studio: StudioSession = Depends(get_session)):
    return _prompt_list(studio)


@router.post("/prompts", response_model=PromptItem)
def add_prompt(payload: Optional[PromptCreate] = None, studio: StudioSession = Depends(get_session)):
    """Append a prompt (up to the configured maximum)."""
    try:
        return studio.prompts.add(payload.text if payload else "")
    except StudioError as e:
        raise e.to_http()


@router.put("/prompts", response_model=PromptListResponse)
def replace_prompts(texts: List[str] = Body(..., embed=True), studio: StudioSession = Depends(get_session)):
    """Replace the whole prompt list in one request."""
    try:
        studio.prompts.replace_all(texts)
    except StudioError as e:
        raise e.to_http()
    return _prompt_list(studio)


@router.put("/prompts/{prompt_id}", response_model=PromptItem)
def update_prompt(prompt_id: str, payload: PromptUpdate, studio: StudioSession = Depends(get_session)):
    try:
        return studio.prompts.update(prompt_id, payload.text)
    except StudioError as e:
        raise e.to_http()


@router.delete("/prompts/{prompt_id}")
def delete_prompt(prompt_id: str, studio: StudioSession = Depends(get_session)):
    """Remove a prompt; the last remaining prompt cannot be removed."""
    try:
        removed = studio.prompts.remove(prompt_id)
    except StudioError as e:
        raise e.to_http()
    return {"deleted": True, "prompt": removed}


# ---------- Aspect ratio ----------
@router.get("/aspect-ratio", response_model=AspectRatioSelection)
def get_aspect_ratio(studio: StudioSession = Depends(get_session)):
    return studio.aspect_ratio


@router.put("/aspect-ratio", response_model=AspectRatioSelection)
def set_aspect_ratio(selection: AspectRatioSelection, studio: StudioSession = Depends(get_session)):
    return studio.set_aspect_ratio(selection)
