"""Image generation services - Gemini integration."""
import base64
from typing import Any, Callable, List, Optional, Tuple

from config import Config
from common.error_messages import ErrorCode
from common.exceptions import CredentialLost, GenerationFailed, StudioError
from image.models import RequestPayload
from utils.logger import get_logger

logger = get_logger("image.services")

# Gemini client (ensure google-genai installed)
try:
    from google import genai
    from google.genai import types
except Exception:
    genai = None
    types = None

# How the service reports a key that was revoked or no longer selected
CREDENTIAL_LOST_MARKER = "Requested entity was not found"


def to_data_url(data: Any, mime_type: Optional[str]) -> str:
    """Encode inline image data as a self-contained data URL."""
    if isinstance(data, (bytes, bytearray)):
        encoded = base64.b64encode(bytes(data)).decode("ascii")
    else:
        # already base64 text
        encoded = str(data)
    return f"data:{mime_type or 'image/png'};base64,{encoded}"


def build_gemini_contents(payload: RequestPayload) -> List:
    """Convert a composed payload to a single user Content for the Gemini API."""
    if not types:
        raise RuntimeError("genai types not available")

    parts = []
    for part in payload.parts:
        if part.is_image:
            parts.append(types.Part(
                inline_data=types.Blob(
                    mime_type=part.mime_type or "image/png",
                    data=part.data
                )
            ))
        else:
            parts.append(types.Part.from_text(text=part.text or ""))
    return [types.Content(role="user", parts=parts)]


def build_generate_config(payload: RequestPayload, image_size: str) -> Any:
    if not types:
        raise RuntimeError("genai types not available")
    return types.GenerateContentConfig(
        response_modalities=["TEXT", "IMAGE"],
        image_config=types.ImageConfig(
            aspect_ratio=payload.aspect_ratio,
            image_size=image_size,
        ),
    )


def extract_inline_image(response: Any) -> Optional[Tuple[Any, Optional[str]]]:
    """Return (data, mime_type) of the first inline image part of the first candidate."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline and getattr(inline, "data", None):
            return inline.data, getattr(inline, "mime_type", None)
    return None


def classify_generation_error(error: Exception) -> StudioError:
    """Map a failed call to CredentialLost or GenerationFailed using its message text."""
    if isinstance(error, StudioError):
        return error
    message = str(error)
    if CREDENTIAL_LOST_MARKER in message:
        return CredentialLost(message)
    return GenerationFailed(message)


def _default_client_factory(api_key: str) -> Any:
    if genai is None:
        raise GenerationFailed("AI service is not configured properly", ErrorCode.IMAGE_GENERATION_FAILED)
    return genai.Client(api_key=api_key)


class GenerationClient:
    """Performs one Gemini image generation per call.

    A new genai.Client is built for every call from the key the credential
    host currently holds, so a newly selected key applies to the next call.
    """

    def __init__(
        self,
        key_provider: Callable[[], Optional[str]],
        client_factory: Optional[Callable[[str], Any]] = None,
        model: str = Config.GEMINI_IMAGE_MODEL,
        image_size: str = Config.GEMINI_IMAGE_SIZE,
    ):
        self.key_provider = key_provider
        self.client_factory = client_factory or _default_client_factory
        self.model = model
        self.image_size = image_size

    def _new_client(self) -> Any:
        api_key = self.key_provider()
        if not api_key:
            raise CredentialLost("no API key selected")
        return self.client_factory(api_key)

    async def generate(self, payload: RequestPayload) -> str:
        """
        Generate one image for a composed payload.

        Args:
            payload: Request built by the composer

        Returns:
            data URL of the first image the model returned

        Raises:
            CredentialLost: the service rejected the configured key
            GenerationFailed: any other failure, including a response without an image
        """
        try:
            client = self._new_client()
            logger.info(
                f"Calling {self.model} with {payload.reference_count} reference image(s), "
                f"aspect ratio {payload.aspect_ratio}, size {self.image_size}"
            )
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=build_gemini_contents(payload),
                config=build_generate_config(payload, self.image_size),
            )
        except StudioError:
            raise
        except Exception as e:
            logger.error(f"Gemini generation error: {e}")
            raise classify_generation_error(e) from e

        image = extract_inline_image(response)
        if image is None:
            raise GenerationFailed("No image data found in response", ErrorCode.NO_CONTENT_GENERATED)

        data, mime_type = image
        logger.info(f"Received image ({mime_type or 'image/png'})")
        return to_data_url(data, mime_type)
