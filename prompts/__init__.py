"""Prompt list module."""
from prompts.models import PromptItem
from prompts.services import PromptList, active_prompts

__all__ = [
    "PromptItem",
    "PromptList",
    "active_prompts"
]
