"""Tests for request composition."""
import pytest

from conftest import PNG_BYTES, make_character
from image.composer import compose, reference_instruction, resolve_aspect_ratio
from image.models import AspectRatio


def test_only_included_characters_with_images_contribute():
    roster = [
        make_character("1", "Aria"),
        make_character("2", "Bram", selected=False),
        make_character("3", "Cleo", data=None),
        make_character("4", "Dax", data=b"jpeg-bytes", mime_type="image/jpeg"),
    ]

    payload = compose("two friends at a market", roster, AspectRatio.LANDSCAPE)

    assert len(payload.parts) == 5
    assert payload.reference_count == 2
    first, second, third, fourth, last = payload.parts
    assert first.data == PNG_BYTES and first.mime_type == "image/png"
    assert second.text == reference_instruction("Aria")
    assert third.data == b"jpeg-bytes" and third.mime_type == "image/jpeg"
    assert fourth.text == reference_instruction("Dax")
    assert last.text == "two friends at a market"


def test_instruction_uses_display_name_verbatim():
    payload = compose("portrait", [make_character("1", 'Sir "Bolt" II')], AspectRatio.SQUARE)

    assert payload.parts[1].text == (
        'Reference image for character named "Sir "Bolt" II". Maintain the appearance of this character.'
    )


def test_no_included_characters_gives_text_only_payload():
    roster = [make_character("1", "Aria", selected=False), make_character("2", "Bram", data=None)]

    payload = compose("an empty beach", roster, AspectRatio.PORTRAIT)

    assert len(payload.parts) == 1
    assert payload.prompt_text == "an empty beach"
    assert payload.aspect_ratio == "9:16"


def test_custom_ratio_is_a_hint_and_falls_back_to_square():
    payload = compose("a castle", [], AspectRatio.CUSTOM, "21:9")

    assert payload.prompt_text == "a castle (Aspect Ratio: 21:9)"
    assert payload.aspect_ratio == "1:1"


def test_custom_text_ignored_outside_custom_mode():
    payload = compose("a castle", [], AspectRatio.STANDARD, "21:9")

    assert payload.prompt_text == "a castle"
    assert payload.aspect_ratio == "4:3"


@pytest.mark.parametrize("ratio", ["16:9", "9:16", "1:1", "4:3", "3:4"])
def test_supported_ratios_pass_through(ratio):
    assert resolve_aspect_ratio(AspectRatio(ratio)) == ratio


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_prompt_rejected(text):
    with pytest.raises(ValueError):
        compose(text, [], AspectRatio.SQUARE)
