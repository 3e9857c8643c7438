"""Prompt list services."""
from threading import Lock
from typing import List
from uuid import uuid4

from config import Config
from common.error_messages import ErrorCode
from common.exceptions import NotFoundError, ValidationError
from prompts.models import PromptItem
from utils.logger import get_logger

logger = get_logger("prompts.services")


def active_prompts(prompts: List[PromptItem]) -> List[PromptItem]:
    """Prompts with non-blank text, in their original order."""
    return [p for p in prompts if p.is_active]


class PromptList:
    """Ordered prompts of the session: between one and max_prompts items."""

    def __init__(self, max_prompts: int = Config.MAX_PROMPTS):
        self._lock = Lock()
        self.max_prompts = max_prompts
        self._prompts: List[PromptItem] = [PromptItem(id=self._new_id(), text="")]

    @staticmethod
    def _new_id() -> str:
        return f"p{uuid4().hex[:8]}"

    def _index(self, prompt_id: str) -> int:
        for i, prompt in enumerate(self._prompts):
            if prompt.id == prompt_id:
                return i
        raise NotFoundError(f"prompt {prompt_id} not found", ErrorCode.PROMPT_NOT_FOUND)

    def list(self) -> List[PromptItem]:
        with self._lock:
            return [p.model_copy() for p in self._prompts]

    def add(self, text: str = "") -> PromptItem:
        with self._lock:
            if len(self._prompts) >= self.max_prompts:
                raise ValidationError(
                    f"at most {self.max_prompts} prompts", ErrorCode.PROMPT_LIMIT_REACHED
                )
            item = PromptItem(id=self._new_id(), text=text)
            self._prompts.append(item)
            count = len(self._prompts)
        logger.info(f"Added prompt {item.id} ({count}/{self.max_prompts})")
        return item.model_copy()

    def update(self, prompt_id: str, text: str) -> PromptItem:
        with self._lock:
            i = self._index(prompt_id)
            self._prompts[i] = self._prompts[i].model_copy(update={"text": text})
            return self._prompts[i].model_copy()

    def remove(self, prompt_id: str) -> PromptItem:
        with self._lock:
            i = self._index(prompt_id)
            if len(self._prompts) <= 1:
                raise ValidationError("at least one prompt must remain", ErrorCode.LAST_PROMPT)
            removed = self._prompts.pop(i)
        logger.info(f"Removed prompt {prompt_id}")
        return removed

    def replace_all(self, texts: List[str]) -> List[PromptItem]:
        """Replace the whole list, e.g. when a batch is submitted in one request."""
        if not texts:
            raise ValidationError("at least one prompt must remain", ErrorCode.LAST_PROMPT)
        if len(texts) > self.max_prompts:
            raise ValidationError(f"at most {self.max_prompts} prompts", ErrorCode.PROMPT_LIMIT_REACHED)
        with self._lock:
            self._prompts = [PromptItem(id=self._new_id(), text=t) for t in texts]
            return [p.model_copy() for p in self._prompts]
