"""Credential gate - tracks whether a usable Gemini API key is selected."""
import asyncio
import time
from typing import Optional

from config import Config
from utils.logger import get_logger

logger = get_logger("credentials.gate")


class ApiKeyStore:
    """Process-wide holder of the API key the user selected.

    This is the host capability behind the gate: it answers whether a key is
    selected and runs the interactive selection flow. The flow marks a
    selection as pending, so the presentation layer can ask the user for a
    key, and resolves once a key arrives through select_key() or the timeout
    elapses.
    """

    def __init__(
        self,
        initial_key: Optional[str] = None,
        select_timeout: float = Config.CREDENTIAL_SELECT_TIMEOUT_SECONDS,
        poll_interval: float = Config.CREDENTIAL_POLL_INTERVAL_SECONDS,
    ):
        self._key = (initial_key or "").strip() or None
        self._select_timeout = select_timeout
        self._poll_interval = poll_interval
        self.selection_pending = False

    async def has_selected_api_key(self) -> bool:
        return self._key is not None

    async def open_select_key(self) -> None:
        """Wait for the user to select a key, or for the timeout to elapse."""
        self.selection_pending = True
        logger.info(f"Waiting up to {self._select_timeout:.0f}s for an API key to be selected")
        deadline = time.monotonic() + self._select_timeout
        try:
            while self._key is None and time.monotonic() < deadline:
                await asyncio.sleep(self._poll_interval)
        finally:
            self.selection_pending = False
        if self._key is None:
            logger.warning("API key selection closed without a key")

    def select_key(self, api_key: str) -> None:
        api_key = (api_key or "").strip()
        if not api_key:
            raise ValueError("api key must not be empty")
        self._key = api_key
        logger.info("API key selected")

    def clear(self) -> None:
        self._key = None
        logger.info("API key cleared")

    def current_key(self) -> Optional[str]:
        return self._key


class CredentialGate:
    """Check and acquire operations over an optional host capability.

    Neither operation raises: a missing host, or a host that fails, reads as
    "no credential".
    """

    def __init__(self, host: Optional[ApiKeyStore] = None):
        self.host = host

    async def is_available(self) -> bool:
        check = getattr(self.host, "has_selected_api_key", None)
        if check is None:
            return False
        try:
            return bool(await check())
        except Exception as e:
            logger.error(f"Credential check failed: {e}")
            return False

    async def acquire_interactively(self) -> None:
        """Run the host's selection flow; the caller must re-check afterwards."""
        flow = getattr(self.host, "open_select_key", None)
        if flow is None:
            logger.warning("Interactive API key selection is not available on this host")
            return
        try:
            await flow()
        except Exception as e:
            logger.error(f"Failed to set API key: {e}")

    def invalidate(self) -> None:
        """Forget a key the remote service rejected, so the next check reads unavailable."""
        forget = getattr(self.host, "clear", None)
        if forget is None:
            return
        try:
            forget()
        except Exception as e:
            logger.error(f"Failed to clear rejected API key: {e}")
