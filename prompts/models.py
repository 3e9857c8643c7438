"""Prompt list Pydantic models."""
from pydantic import BaseModel, Field


class PromptItem(BaseModel):
    id: str = Field(..., description="Stable prompt identifier")
    text: str = Field("", description="Free-form prompt text")

    @property
    def is_active(self) -> bool:
        """Only prompts with non-blank text take part in a batch."""
        return bool(self.text.strip())


class PromptCreate(BaseModel):
    text: str = Field("", description="Initial prompt text")


class PromptUpdate(BaseModel):
    text: str = Field(..., description="New prompt text")


class PromptListResponse(BaseModel):
    prompts: list[PromptItem] = Field(..., description="Prompts in generation order")
    count: int = Field(..., description="Number of prompts")
    max_prompts: int = Field(..., description="Maximum number of prompts per batch")
