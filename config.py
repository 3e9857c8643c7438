"""
Configuration module - loads all settings from environment variables.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
try:
    load_dotenv()
except Exception as e:
    print(f"Warning: Failed to load .env file: {e}")
    print("Continuing with environment variables or defaults...")


class Config:
    """Studio configuration loaded from environment variables."""

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Safely parse integer environment variable."""
        try:
            return int(os.getenv(key, str(default)))
        except (ValueError, TypeError) as e:
            print(f"Warning: Invalid integer for {key}, using default {default}: {e}")
            return default

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        """Safely parse float environment variable."""
        try:
            return float(os.getenv(key, str(default)))
        except (ValueError, TypeError) as e:
            print(f"Warning: Invalid float for {key}, using default {default}: {e}")
            return default

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Safely parse boolean environment variable."""
        try:
            value = os.getenv(key, str(default)).lower()
            return value in ("true", "1", "yes", "on")
        except Exception as e:
            print(f"Warning: Invalid boolean for {key}, using default {default}: {e}")
            return default

    # Gemini API
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_IMAGE_MODEL: str = os.getenv("GEMINI_IMAGE_MODEL", "gemini-3-pro-image-preview")
    # Highest output tier the image model supports
    GEMINI_IMAGE_SIZE: str = os.getenv("GEMINI_IMAGE_SIZE", "4K")

    # Studio limits
    MAX_PROMPTS: int = _get_int.__func__("MAX_PROMPTS", 10)
    CHARACTER_SLOTS: int = _get_int.__func__("CHARACTER_SLOTS", 4)
    MAX_REFERENCE_IMAGE_BYTES: int = _get_int.__func__("MAX_REFERENCE_IMAGE_BYTES", 10 * 1024 * 1024)

    # Credential selection flow
    CREDENTIAL_SELECT_TIMEOUT_SECONDS: float = _get_float.__func__("CREDENTIAL_SELECT_TIMEOUT_SECONDS", 120.0)
    CREDENTIAL_POLL_INTERVAL_SECONDS: float = _get_float.__func__("CREDENTIAL_POLL_INTERVAL_SECONDS", 0.5)

    # Archive export
    ARCHIVE_PREFIX: str = os.getenv("ARCHIVE_PREFIX", "SriTech_Batch")
    ARCHIVE_FETCH_TIMEOUT_SECONDS: float = _get_float.__func__("ARCHIVE_FETCH_TIMEOUT_SECONDS", 60.0)

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOGS_DIR: str = os.getenv("LOGS_DIR", os.path.join(os.path.dirname(os.path.abspath(__file__)), "logs"))
    LOG_RETENTION_DAYS: int = _get_int.__func__("LOG_RETENTION_DAYS", 10)
    LOG_REQUEST_BODIES: bool = _get_bool.__func__("LOG_REQUEST_BODIES", True)

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = _get_int.__func__("PORT", 8000)

    @classmethod
    def validate(cls) -> None:
        """Validate configuration that must hold before serving requests."""
        if cls.MAX_PROMPTS < 1:
            raise ValueError("MAX_PROMPTS must be at least 1")
        if cls.CHARACTER_SLOTS < 0:
            raise ValueError("CHARACTER_SLOTS must not be negative")
        if not cls.GEMINI_IMAGE_MODEL:
            raise ValueError("GEMINI_IMAGE_MODEL environment variable is required")

    @classmethod
    def has_gemini_api_key(cls) -> bool:
        """Whether an API key was supplied through the environment."""
        return bool(cls.GEMINI_API_KEY)
