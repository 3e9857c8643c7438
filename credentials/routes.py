"""Credential routes - API key status and selection."""
from fastapi import APIRouter, Depends, HTTPException

from credentials.models import CredentialStatusResponse, SelectKeyRequest
from studio import StudioSession, get_session
from utils.logger import get_logger

logger = get_logger("credentials.routes")
router = APIRouter(prefix="/api/credentials", tags=["credentials"])


def _status(studio: StudioSession) -> CredentialStatusResponse:
    return CredentialStatusResponse(
        available=studio.credential_state.available,
        selection_pending=studio.key_store.selection_pending,
    )


@router.get("", response_model=CredentialStatusResponse)
async def credential_status(studio: StudioSession = Depends(get_session)):
    """Re-check whether an API key is selected."""
    await studio.refresh_credential_state()
    return _status(studio)


@router.post("", response_model=CredentialStatusResponse)
async def select_key(payload: SelectKeyRequest, studio: StudioSession = Depends(get_session)):
    """Select the API key used for subsequent generation calls."""
    try:
        studio.key_store.select_key(payload.api_key)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    await studio.refresh_credential_state()
    return _status(studio)


@router.post("/connect", response_model=CredentialStatusResponse)
async def connect(studio: StudioSession = Depends(get_session)):
    """
    Run the interactive key selection flow.

    Resolves when a key is selected through POST /api/credentials or the
    selection window closes; check `available` in the response.
    """
    await studio.gate.acquire_interactively()
    await studio.refresh_credential_state()
    return _status(studio)


@router.delete("", response_model=CredentialStatusResponse)
async def disconnect(studio: StudioSession = Depends(get_session)):
    """Forget the selected API key."""
    studio.key_store.clear()
    await studio.refresh_credential_state()
    return _status(studio)
