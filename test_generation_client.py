"""Tests for the Gemini generation client."""
import asyncio
import base64

import pytest

from common.error_messages import ErrorCode
from common.exceptions import CredentialLost, GenerationFailed
from conftest import PNG_BYTES, FakeGenai, image_response, make_character, text_only_response
from credentials.gate import ApiKeyStore
from image.composer import compose
from image.models import AspectRatio
from image.services import GenerationClient, classify_generation_error, to_data_url


def _payload(ratio=AspectRatio.LANDSCAPE):
    return compose("a lighthouse", [make_character("1", "Aria")], ratio)


def test_returns_first_inline_image_as_data_url():
    fake = FakeGenai([image_response(b"jpeg-data", "image/jpeg")])
    client = GenerationClient(lambda: "key-1", client_factory=fake, model="test-model", image_size="4K")

    result = asyncio.run(client.generate(_payload()))

    assert result == "data:image/jpeg;base64," + base64.b64encode(b"jpeg-data").decode("ascii")
    call = fake.calls[0]
    assert call["model"] == "test-model"
    assert call["config"].image_config.aspect_ratio == "16:9"
    assert call["config"].image_config.image_size == "4K"
    parts = call["contents"][0].parts
    assert len(parts) == 3
    assert parts[0].inline_data.data == PNG_BYTES
    assert parts[2].text == "a lighthouse"


def test_custom_ratio_sends_square():
    fake = FakeGenai()
    client = GenerationClient(lambda: "key-1", client_factory=fake)

    asyncio.run(client.generate(compose("a castle", [], AspectRatio.CUSTOM, "21:9")))

    assert fake.calls[0]["config"].image_config.aspect_ratio == "1:1"
    assert fake.calls[0]["contents"][0].parts[-1].text == "a castle (Aspect Ratio: 21:9)"


def test_builds_a_fresh_client_with_the_current_key_per_call():
    store = ApiKeyStore("old-key")
    fake = FakeGenai()
    client = GenerationClient(store.current_key, client_factory=fake)

    asyncio.run(client.generate(_payload()))
    store.select_key("new-key")
    asyncio.run(client.generate(_payload()))

    assert fake.api_keys == ["old-key", "new-key"]


def test_entity_not_found_becomes_credential_lost():
    fake = FakeGenai([RuntimeError("404 NOT_FOUND. Requested entity was not found.")])
    client = GenerationClient(lambda: "key-1", client_factory=fake)

    with pytest.raises(CredentialLost):
        asyncio.run(client.generate(_payload()))


def test_other_errors_become_generation_failed_with_original_message():
    fake = FakeGenai([RuntimeError("429 RESOURCE_EXHAUSTED: quota exceeded")])
    client = GenerationClient(lambda: "key-1", client_factory=fake)

    with pytest.raises(GenerationFailed) as excinfo:
        asyncio.run(client.generate(_payload()))

    assert "quota exceeded" in str(excinfo.value)
    assert excinfo.value.error_code == ErrorCode.IMAGE_GENERATION_FAILED


def test_response_without_image_is_generation_failed():
    fake = FakeGenai([text_only_response()])
    client = GenerationClient(lambda: "key-1", client_factory=fake)

    with pytest.raises(GenerationFailed) as excinfo:
        asyncio.run(client.generate(_payload()))

    assert excinfo.value.error_code == ErrorCode.NO_CONTENT_GENERATED
    assert "No image data found in response" in str(excinfo.value)


def test_missing_key_is_credential_lost_without_a_call():
    fake = FakeGenai()
    client = GenerationClient(lambda: None, client_factory=fake)

    with pytest.raises(CredentialLost):
        asyncio.run(client.generate(_payload()))

    assert fake.api_keys == []


def test_classify_leaves_unrelated_not_found_messages_alone():
    assert isinstance(classify_generation_error(ValueError("model not found")), GenerationFailed)


def test_to_data_url_defaults_to_png():
    assert to_data_url(b"abc", None) == "data:image/png;base64,YWJj"
