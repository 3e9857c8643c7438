"""Request composer - turns a prompt and the character roster into a request payload."""
from typing import List, Sequence

from characters.models import Character
from image.models import (
    AspectRatio,
    ContentPart,
    RequestPayload,
    SUPPORTED_ASPECT_RATIOS,
    DEFAULT_ASPECT_RATIO,
)


def reference_instruction(name: str) -> str:
    """Text that binds a reference image to a character's exact display name."""
    return f'Reference image for character named "{name}". Maintain the appearance of this character.'


def build_prompt_text(prompt_text: str, aspect_ratio: AspectRatio, custom_text: str) -> str:
    """Prompt text, with the custom ratio appended as a hint in Custom mode."""
    if aspect_ratio == AspectRatio.CUSTOM:
        return f"{prompt_text} (Aspect Ratio: {custom_text})"
    return prompt_text


def resolve_aspect_ratio(aspect_ratio: AspectRatio) -> str:
    """
    Map the user's selection to a value the image model accepts.

    Custom ratios fall back to square; the user's ratio then only survives as
    the prompt-text hint.
    """
    if aspect_ratio == AspectRatio.CUSTOM:
        return DEFAULT_ASPECT_RATIO
    value = AspectRatio(aspect_ratio).value
    if value not in SUPPORTED_ASPECT_RATIOS:
        return DEFAULT_ASPECT_RATIO
    return value


def compose(
    prompt_text: str,
    characters: Sequence[Character],
    aspect_ratio: AspectRatio,
    custom_text: str = "",
) -> RequestPayload:
    """
    Build the ordered multimodal payload for one prompt.

    Args:
        prompt_text: Prompt text (must be non-empty after trimming)
        characters: Full character roster, in slot order
        aspect_ratio: Selected aspect ratio
        custom_text: Free-text ratio used in Custom mode

    Returns:
        RequestPayload with one image + instruction pair per contributing
        character, then the prompt text
    """
    if not prompt_text or not prompt_text.strip():
        raise ValueError("prompt text must not be empty")

    parts: List[ContentPart] = []
    for character in characters:
        if not character.contributes:
            continue
        parts.append(ContentPart(data=character.image.data, mime_type=character.image.mime_type))
        parts.append(ContentPart(text=reference_instruction(character.name)))

    parts.append(ContentPart(text=build_prompt_text(prompt_text, aspect_ratio, custom_text)))

    return RequestPayload(parts=parts, aspect_ratio=resolve_aspect_ratio(aspect_ratio))
