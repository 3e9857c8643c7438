"""HTTP-level tests for the studio API."""
import io
import time
import zipfile
from datetime import date

from archive.naming import archive_name
from conftest import PNG_BYTES, image_response


def _wait_for_batch(client, attempts: int = 300) -> dict:
    for _ in range(attempts):
        status = client.get("/api/batch").json()
        if not status["running"]:
            return status
        time.sleep(0.01)
    raise AssertionError("batch did not finish")


def _upload(client, character_id="1", content=PNG_BYTES, content_type="image/png"):
    return client.post(
        f"/api/characters/{character_id}/image",
        files={"file": ("hero.png", content, content_type)},
    )


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_roster_starts_with_four_slots(client):
    body = client.get("/api/characters").json()

    assert body["count"] == 4
    assert [c["name"] for c in body["characters"]] == ["Character 1", "Character 2", "Character 3", "Character 4"]
    assert [c["selected"] for c in body["characters"]] == [True, False, False, False]
    assert not any(c["has_image"] for c in body["characters"])


def test_upload_binds_image_and_includes_character(client):
    response = _upload(client, "3")

    assert response.status_code == 200
    body = response.json()
    assert body["has_image"] is True
    assert body["selected"] is True
    assert body["mime_type"] == "image/png"

    preview = client.get(body["preview_url"])
    assert preview.status_code == 200
    assert preview.content == PNG_BYTES


def test_upload_rejects_non_images_and_empty_files(client):
    assert _upload(client, content=b"plain text", content_type="text/plain").status_code == 400
    assert _upload(client, content=b"").status_code == 400
    assert _upload(client, character_id="9").status_code == 404


def test_rename_toggle_and_clear_character(client):
    _upload(client, "2")

    renamed = client.put("/api/characters/2", json={"name": "Mira", "selected": False}).json()
    assert renamed["name"] == "Mira"
    assert renamed["selected"] is False
    assert renamed["has_image"] is True

    cleared = client.delete("/api/characters/2/image").json()
    assert cleared["has_image"] is False
    assert client.get("/api/characters/2/image").status_code == 404


def test_prompt_list_limits(client):
    for i in range(9):
        assert client.post("/api/prompts", json={"text": f"prompt {i}"}).status_code == 200

    assert client.get("/api/prompts").json()["count"] == 10
    assert client.post("/api/prompts", json={"text": "one too many"}).status_code == 400

    client.put("/api/prompts", json={"texts": ["only one"]})
    only = client.get("/api/prompts").json()["prompts"]
    assert [p["text"] for p in only] == ["only one"]
    assert client.delete(f"/api/prompts/{only[0]['id']}").status_code == 400
    assert client.put("/api/prompts/nope", json={"text": "x"}).status_code == 404


def test_aspect_ratio_selection(client):
    assert client.get("/api/aspect-ratio").json() == {"aspect_ratio": "16:9", "custom_text": ""}

    body = client.put("/api/aspect-ratio", json={"aspect_ratio": "Custom", "custom_text": "21:9"}).json()
    assert body == {"aspect_ratio": "Custom", "custom_text": "21:9"}
    assert client.put("/api/aspect-ratio", json={"aspect_ratio": "5:4"}).status_code == 422


def test_credentials_select_and_disconnect(client, studio):
    studio.key_store.clear()
    assert client.get("/api/credentials").json()["available"] is False

    body = client.post("/api/credentials", json={"api_key": "user-key"}).json()
    assert body["available"] is True
    assert studio.key_store.current_key() == "user-key"

    assert client.delete("/api/credentials").json()["available"] is False


def test_batch_requires_an_active_prompt(client):
    client.put("/api/prompts", json={"texts": ["   ", ""]})

    response = client.post("/api/batch")

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Please enter at least one prompt.")


def test_batch_without_key_is_rejected(client, studio):
    studio.key_store.clear()
    client.put("/api/prompts", json={"texts": ["a cat"]})

    response = client.post("/api/batch")

    assert response.status_code == 401
    assert client.get("/api/batch").json()["credential_available"] is False


def test_full_batch_then_downloads(client, fake_genai):
    _upload(client, "1")
    client.put("/api/characters/1", json={"name": "Aria"})
    client.put("/api/prompts", json={"texts": ["Aria in a forest", "  ", "Aria on a boat"]})

    started = client.post("/api/batch")
    assert started.status_code == 202
    status = _wait_for_batch(client)

    assert status["progress"] == 100
    assert status["result_count"] == 2
    assert fake_genai.api_keys == ["test-key", "test-key"]
    sent_parts = fake_genai.calls[0]["contents"][0].parts
    assert sent_parts[1].text.startswith('Reference image for character named "Aria"')

    results = client.get("/api/batch/results").json()["results"]
    assert [r["filename"] for r in results] == ["image_01.png", "image_02.png"]
    assert [r["prompt_text"] for r in results] == ["Aria in a forest", "Aria on a boat"]
    assert all("image_url" not in r for r in results)

    single = client.get(results[0]["download_url"])
    assert single.status_code == 200
    assert single.content == PNG_BYTES
    assert 'filename="image_01.png"' in single.headers["content-disposition"]

    archive = client.get("/api/batch/archive")
    assert archive.status_code == 200
    assert archive.headers["content-type"] == "application/zip"
    assert archive_name(date.today()) in archive.headers["content-disposition"]
    with zipfile.ZipFile(io.BytesIO(archive.content)) as bundle:
        assert sorted(bundle.namelist()) == ["image_01.png", "image_02.png"]


def test_credential_loss_mid_batch_surfaces_reconnect_message(client, fake_genai):
    fake_genai.outcomes = [image_response(), RuntimeError("Requested entity was not found.")]
    client.put("/api/prompts", json={"texts": ["one", "two", "three"]})

    assert client.post("/api/batch").status_code == 202
    status = _wait_for_batch(client)

    assert status["result_count"] == 1
    assert status["credential_available"] is False
    assert status["message"] == "API Key session expired or invalid. Please reconnect your key."
    assert client.get("/api/credentials").json()["available"] is False

    assert client.post("/api/batch").status_code == 401
    assert len(fake_genai.api_keys) == 2


def test_failed_prompt_reported_as_skipped(client, fake_genai):
    fake_genai.outcomes = [RuntimeError("500 INTERNAL"), image_response()]
    client.put("/api/prompts", json={"texts": ["one", "two"]})

    client.post("/api/batch")
    status = _wait_for_batch(client)

    assert status["result_count"] == 1
    assert [s["position"] for s in status["skipped"]] == [1]
    assert client.get("/api/batch/results").json()["results"][0]["filename"] == "image_02.png"


def test_archive_and_download_before_any_results(client):
    assert client.get("/api/batch/archive").status_code == 404
    assert client.get("/api/batch/results/missing/download").status_code == 404


def test_jpeg_results_are_named_and_served_as_jpeg(client, fake_genai):
    fake_genai.outcomes = [image_response(b"jpeg-bytes", "image/jpeg")]
    client.put("/api/prompts", json={"texts": ["a harbour at dusk"]})

    client.post("/api/batch")
    _wait_for_batch(client)

    result = client.get("/api/batch/results").json()["results"][0]
    assert result["filename"] == "image_01.jpg"

    download = client.get(result["download_url"])
    assert download.content == b"jpeg-bytes"
    assert download.headers["content-type"] == "image/jpeg"
    assert 'filename="image_01.jpg"' in download.headers["content-disposition"]
