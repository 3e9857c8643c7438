"""Credential Pydantic models."""
from pydantic import BaseModel, Field


class CredentialState(BaseModel):
    """Last known credential availability, re-derived before every batch."""
    available: bool = Field(False, description="Whether a usable API key is selected")


class SelectKeyRequest(BaseModel):
    api_key: str = Field(..., min_length=1, description="Gemini API key to use for generation")


class CredentialStatusResponse(BaseModel):
    available: bool = Field(..., description="Whether a usable API key is selected")
    selection_pending: bool = Field(False, description="Whether the studio is waiting for the user to select a key")
