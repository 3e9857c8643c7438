"""Process-wide studio session."""
import asyncio
from typing import Any, Callable, Optional

from archive.services import ResultArchiver
from batch.models import BatchOutcome
from batch.orchestrator import BatchOrchestrator
from characters.services import CharacterRoster
from config import Config
from credentials.gate import ApiKeyStore, CredentialGate
from credentials.models import CredentialState
from image.models import AspectRatio, AspectRatioSelection
from image.services import GenerationClient
from prompts.services import PromptList
from utils.logger import get_logger

logger = get_logger("studio.session")


class StudioSession:
    """Everything one user edits and generates: roster, prompts, ratio, key and results.

    The orchestrator reads the roster and the aspect-ratio selection when a
    run starts; editing them during a run does not affect it.
    """

    def __init__(
        self,
        key_store: Optional[ApiKeyStore] = None,
        client_factory: Optional[Callable[[str], Any]] = None,
        archiver: Optional[ResultArchiver] = None,
    ):
        self.key_store = key_store or ApiKeyStore(initial_key=Config.GEMINI_API_KEY)
        self.gate = CredentialGate(self.key_store)
        self.credential_state = CredentialState()
        self.characters = CharacterRoster()
        self.prompts = PromptList()
        self.aspect_ratio = AspectRatioSelection()
        self.generation_client = GenerationClient(self.key_store.current_key, client_factory=client_factory)
        self.orchestrator = BatchOrchestrator(self.gate, self.generation_client, self.credential_state)
        self.archiver = archiver or ResultArchiver()

    def set_aspect_ratio(self, selection: AspectRatioSelection) -> AspectRatioSelection:
        if selection.aspect_ratio == AspectRatio.CUSTOM and not selection.custom_text.strip():
            logger.warning("Custom aspect ratio selected without a ratio text")
        self.aspect_ratio = selection
        logger.info(f"Aspect ratio set to {selection.aspect_ratio.value} {selection.custom_text}".rstrip())
        return self.aspect_ratio

    async def refresh_credential_state(self) -> bool:
        self.credential_state.available = await self.gate.is_available()
        return self.credential_state.available

    async def start_batch(self) -> "asyncio.Task[BatchOutcome]":
        return await self.orchestrator.start(
            self.prompts.list(), self.characters.list(), self.aspect_ratio
        )


session = StudioSession()


def get_session() -> StudioSession:
    """FastAPI dependency returning the process-wide session."""
    return session
