"""Models shared between the batch orchestrator and the archiver."""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field


class GeneratedArtifact(BaseModel):
    """One successfully generated image plus its provenance."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique artifact identifier")
    prompt_id: str = Field(..., description="Identifier of the originating prompt")
    prompt_text: str = Field(..., description="Prompt text at generation time")
    image_url: str = Field(..., description="Self-contained data URL (or fetchable URL) of the image")
    filename: str = Field(..., description="Deterministic download filename")
    timestamp: datetime = Field(..., description="Creation time (UTC)")


class SkippedPrompt(BaseModel):
    """A prompt whose generation failed and produced no artifact."""
    model_config = ConfigDict(frozen=True)

    position: int = Field(..., description="1-based position in the active prompt list")
    prompt_id: str = Field(..., description="Identifier of the prompt")
    error: str = Field(..., description="Failure message")
