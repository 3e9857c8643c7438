"""Batch run Pydantic models."""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from common.models import GeneratedArtifact, SkippedPrompt


class RunStatus(str, Enum):
    """How a batch run ended."""
    COMPLETED = "completed"
    ABORTED = "aborted"


class BatchOutcome(BaseModel):
    """Result of one run: what was produced, what was skipped, and why it stopped."""
    status: RunStatus
    artifacts: List[GeneratedArtifact] = Field(default_factory=list)
    skipped: List[SkippedPrompt] = Field(default_factory=list)
    total: int = Field(0, description="Number of active prompts in the run")
    message: Optional[str] = Field(None, description="User-facing message when the run was aborted")


class ArtifactView(BaseModel):
    """Listing entry for one result; the image itself is served by download_url."""
    id: str
    prompt_id: str
    prompt_text: str
    filename: str
    timestamp: datetime
    download_url: str

    @classmethod
    def from_artifact(cls, artifact: GeneratedArtifact) -> "ArtifactView":
        return cls(
            id=artifact.id,
            prompt_id=artifact.prompt_id,
            prompt_text=artifact.prompt_text,
            filename=artifact.filename,
            timestamp=artifact.timestamp,
            download_url=f"/api/batch/results/{artifact.id}/download",
        )


class BatchStatusResponse(BaseModel):
    running: bool = Field(..., description="Whether a batch is generating")
    progress: int = Field(..., description="Completion percentage (0-100)")
    total: int = Field(..., description="Active prompts in the current or last run")
    result_count: int = Field(..., description="Artifacts produced so far")
    skipped: List[SkippedPrompt] = Field(default_factory=list)
    credential_available: bool = Field(..., description="Last known credential availability")
    message: Optional[str] = Field(None, description="Last user-facing batch message")


class ResultListResponse(BaseModel):
    results: List[ArtifactView]
    count: int
