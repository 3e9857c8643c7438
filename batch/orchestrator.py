"""Batch orchestration - sequential generation of one image per active prompt."""
import asyncio
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, List, Optional, Sequence, Tuple
from uuid import uuid4

from archive.naming import generate_filename, image_mime_type
from batch.models import BatchOutcome, RunStatus
from characters.models import Character
from common.error_messages import ErrorCode
from common.exceptions import (
    BatchInProgress,
    CredentialLost,
    CredentialUnavailable,
    GenerationFailed,
    ValidationError,
)
from common.models import GeneratedArtifact, SkippedPrompt
from credentials.gate import CredentialGate
from credentials.models import CredentialState
from image.composer import compose
from image.models import AspectRatioSelection
from image.services import GenerationClient
from prompts.models import PromptItem
from prompts.services import active_prompts
from utils.logger import get_logger

logger = get_logger("batch.orchestrator")


class ResultCollection:
    """Append-only artifacts of the current run.

    One writer appends; any number of readers take snapshots, which are
    always a consistent prefix. reset() is only called when a new run starts.
    """

    def __init__(self):
        self._lock = Lock()
        self._items: List[GeneratedArtifact] = []
        self._subscribers: List[Callable[[GeneratedArtifact], None]] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def snapshot(self) -> Tuple[GeneratedArtifact, ...]:
        with self._lock:
            return tuple(self._items)

    def get(self, artifact_id: str) -> Optional[GeneratedArtifact]:
        with self._lock:
            for artifact in self._items:
                if artifact.id == artifact_id:
                    return artifact
        return None

    def append(self, artifact: GeneratedArtifact) -> None:
        with self._lock:
            self._items.append(artifact)
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(artifact)
            except Exception as e:
                logger.warning(f"Result subscriber failed for {artifact.filename}: {e}")

    def subscribe(self, callback: Callable[[GeneratedArtifact], None]) -> Callable[[], None]:
        """Call back on every append; returns an unsubscribe function."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def reset(self) -> None:
        with self._lock:
            self._items = []


class BatchRunState:
    """Progress and results of the current (or last) run."""

    def __init__(self):
        self.running = False
        self.progress = 0
        self.total = 0
        self.results = ResultCollection()
        self.skipped: List[SkippedPrompt] = []
        self.message: Optional[str] = None

    def begin(self, total: int) -> None:
        self.running = True
        self.progress = 0
        self.total = total
        self.results.reset()
        self.skipped = []
        self.message = None


class BatchOrchestrator:
    """
    Drives one generation call per active prompt, strictly in order.

    Idle -> Running -> Idle. A run starts only with at least one active prompt
    and a usable credential. Within a run, a CredentialLost failure aborts the
    remaining prompts; any other failure skips its prompt and the run goes on.
    """

    def __init__(
        self,
        gate: CredentialGate,
        client: GenerationClient,
        credential_state: Optional[CredentialState] = None,
        state: Optional[BatchRunState] = None,
    ):
        self.gate = gate
        self.client = client
        self.credential_state = credential_state or CredentialState()
        self.state = state or BatchRunState()
        self._preflight = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self.state.running

    async def ensure_credential(self) -> None:
        """Re-derive credential availability, acquiring a key interactively once if needed."""
        available = await self.gate.is_available()
        if not available:
            logger.info("No API key selected, starting interactive selection")
            await self.gate.acquire_interactively()
            available = await self.gate.is_available()
        self.credential_state.available = available
        if not available:
            raise CredentialUnavailable()

    async def start(
        self,
        prompts: Sequence[PromptItem],
        characters: Sequence[Character],
        selection: AspectRatioSelection,
    ) -> "asyncio.Task[BatchOutcome]":
        """
        Validate, enter Running and schedule the generation loop.

        Raises:
            BatchInProgress: a run is already starting or running
            ValidationError: no prompt has non-blank text
            CredentialUnavailable: still no key after interactive selection

        Returns:
            Task resolving to the run's BatchOutcome
        """
        if self._preflight or self.state.running:
            raise BatchInProgress()

        active = active_prompts(list(prompts))
        if not active:
            raise ValidationError("no active prompts", ErrorCode.NO_ACTIVE_PROMPTS)

        self._preflight = True
        try:
            await self.ensure_credential()
        finally:
            self._preflight = False

        self.state.begin(len(active))
        logger.info(f"Starting batch of {len(active)} prompt(s), aspect ratio {selection.aspect_ratio.value}")
        self._task = asyncio.create_task(self._process(active, list(characters), selection))
        return self._task

    async def run(
        self,
        prompts: Sequence[PromptItem],
        characters: Sequence[Character],
        selection: AspectRatioSelection,
    ) -> BatchOutcome:
        """Start a run and wait for it to finish."""
        task = await self.start(prompts, characters, selection)
        return await task

    async def _process(
        self,
        active: List[PromptItem],
        characters: List[Character],
        selection: AspectRatioSelection,
    ) -> BatchOutcome:
        total = len(active)
        status = RunStatus.COMPLETED
        try:
            for index, prompt in enumerate(active):
                position = index + 1
                try:
                    payload = compose(prompt.text, characters, selection.aspect_ratio, selection.custom_text)
                    image_url = await self.client.generate(payload)
                except CredentialLost as e:
                    logger.error(f"Failed to generate prompt {position}: credential lost ({e})")
                    self.gate.invalidate()
                    self.credential_state.available = False
                    self.state.message = CredentialLost().user_message
                    status = RunStatus.ABORTED
                    break
                except GenerationFailed as e:
                    logger.error(f"Failed to generate prompt {position}: {e}")
                    self._skip(position, prompt, str(e))
                except Exception as e:
                    logger.error(f"Unexpected error generating prompt {position}: {e}", exc_info=True)
                    self._skip(position, prompt, str(e))
                else:
                    artifact = GeneratedArtifact(
                        id=str(uuid4()),
                        prompt_id=prompt.id,
                        prompt_text=prompt.text,
                        image_url=image_url,
                        filename=generate_filename(index, image_mime_type(image_url)),
                        timestamp=datetime.now(timezone.utc),
                    )
                    self.state.results.append(artifact)
                    logger.info(f"Prompt {position}/{total} generated as {artifact.filename}")

                self.state.progress = round(position / total * 100)
        finally:
            self.state.running = False

        results = list(self.state.results.snapshot())
        logger.info(
            f"Batch {status.value}: {len(results)} image(s), {len(self.state.skipped)} skipped, "
            f"{total} prompt(s)"
        )
        return BatchOutcome(
            status=status,
            artifacts=results,
            skipped=list(self.state.skipped),
            total=total,
            message=self.state.message,
        )

    def _skip(self, position: int, prompt: PromptItem, error: str) -> None:
        self.state.skipped.append(SkippedPrompt(position=position, prompt_id=prompt.id, error=error))
