"""Archive services - bundle generated images into one zip download."""
import asyncio
import base64
import binascii
import io
import zipfile
from typing import Optional, Sequence
from urllib.parse import unquote_to_bytes

import httpx

from config import Config
from common.exceptions import ArchiveFailed
from common.models import GeneratedArtifact
from utils.logger import get_logger

logger = get_logger("archive.services")


def decode_data_url(url: str) -> bytes:
    """Decode the payload of a data: URL."""
    header, sep, payload = url.partition(",")
    if not sep or not header.startswith("data:"):
        raise ValueError("malformed data URL")
    if header.endswith(";base64"):
        return base64.b64decode(payload, validate=True)
    return unquote_to_bytes(payload)


async def fetch_artifact_bytes(artifact: GeneratedArtifact, http_client: httpx.AsyncClient) -> bytes:
    """
    Re-materialize the image bytes behind an artifact's resource reference.

    data: URLs are decoded in place; http(s) URLs are downloaded.

    Raises:
        ArchiveFailed: the reference could not be resolved to bytes
    """
    url = artifact.image_url
    try:
        if url.startswith("data:"):
            return decode_data_url(url)
        if url.startswith(("http://", "https://")):
            response = await http_client.get(url)
            response.raise_for_status()
            return response.content
    except (ValueError, binascii.Error, httpx.HTTPError) as e:
        logger.error(f"Failed to fetch {artifact.filename}: {e}")
        raise ArchiveFailed(f"could not read {artifact.filename}: {e}") from e
    raise ArchiveFailed(f"unsupported image reference for {artifact.filename}")


class ResultArchiver:
    """Packages artifacts into a deflate-compressed zip, one entry per filename."""

    def __init__(
        self,
        timeout: float = Config.ARCHIVE_FETCH_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.transport = transport

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, follow_redirects=True, transport=self.transport)

    async def materialize(self, artifact: GeneratedArtifact) -> bytes:
        """Image bytes of a single artifact, for single-file downloads."""
        async with self._http_client() as http_client:
            return await fetch_artifact_bytes(artifact, http_client)

    async def bundle(self, artifacts: Sequence[GeneratedArtifact]) -> bytes:
        """
        Fetch every artifact concurrently, then write the archive.

        Args:
            artifacts: Artifacts to include, in gallery order

        Returns:
            Zip archive bytes

        Raises:
            ArchiveFailed: any single fetch failed; no archive is produced
        """
        artifacts = list(artifacts)
        logger.info(f"Bundling {len(artifacts)} image(s)")

        async with self._http_client() as http_client:
            fetched = await asyncio.gather(
                *(fetch_artifact_bytes(a, http_client) for a in artifacts),
                return_exceptions=True,
            )

        for artifact, result in zip(artifacts, fetched):
            if isinstance(result, ArchiveFailed):
                raise result
            if isinstance(result, BaseException):
                logger.error(f"Unexpected error fetching {artifact.filename}: {result}")
                raise ArchiveFailed(f"could not read {artifact.filename}: {result}") from result

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for artifact, data in zip(artifacts, fetched):
                archive.writestr(artifact.filename, data)

        logger.info(f"Bundled {len(artifacts)} image(s) into {len(buffer.getvalue())} bytes")
        return buffer.getvalue()
