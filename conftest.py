"""Shared fixtures: scripted Gemini fakes and a fresh studio session per test."""
from types import SimpleNamespace
from typing import Any, List, Optional

import pytest
from fastapi.testclient import TestClient

from characters.models import Character, ReferenceImage
from credentials.gate import ApiKeyStore
from studio import StudioSession, get_session

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def image_response(data: bytes = PNG_BYTES, mime_type: str = "image/png") -> Any:
    """A generate_content response whose first candidate has a text part then an image part."""
    text_part = SimpleNamespace(text="Here is your image", inline_data=None)
    image_part = SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[text_part, image_part]))])


def text_only_response() -> Any:
    part = SimpleNamespace(text="I can't draw that", inline_data=None)
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


class FakeModels:
    def __init__(self, owner: "FakeGenai"):
        self.owner = owner

    async def generate_content(self, model: str, contents: Any, config: Any) -> Any:
        self.owner.calls.append({"model": model, "contents": contents, "config": config})
        outcome = self.owner.next_outcome()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeGenai:
    """Stands in for genai.Client construction; records every key and call."""

    def __init__(self, outcomes: Optional[List[Any]] = None):
        self.outcomes = list(outcomes or [])
        self.api_keys: List[str] = []
        self.calls: List[dict] = []

    def next_outcome(self) -> Any:
        if self.outcomes:
            return self.outcomes.pop(0)
        return image_response()

    def __call__(self, api_key: str) -> Any:
        self.api_keys.append(api_key)
        return SimpleNamespace(api_key=api_key, aio=SimpleNamespace(models=FakeModels(self)))


def make_character(
    cid: str,
    name: str,
    selected: bool = True,
    data: Optional[bytes] = PNG_BYTES,
    mime_type: str = "image/png",
) -> Character:
    image = None
    if data is not None:
        image = ReferenceImage(data=data, mime_type=mime_type, preview_url=f"/api/characters/{cid}/image")
    return Character(id=cid, name=name, image=image, selected=selected)


@pytest.fixture
def fake_genai() -> FakeGenai:
    return FakeGenai()


@pytest.fixture
def key_store() -> ApiKeyStore:
    return ApiKeyStore("test-key", select_timeout=0.05, poll_interval=0.01)


@pytest.fixture
def studio(key_store, fake_genai) -> StudioSession:
    return StudioSession(key_store=key_store, client_factory=fake_genai)


@pytest.fixture
def client(studio):
    from app import app

    app.dependency_overrides[get_session] = lambda: studio
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
