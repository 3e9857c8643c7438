"""Batch generation routes - start, progress, results and downloads."""
import mimetypes

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from archive.naming import archive_name
from batch.models import ArtifactView, BatchStatusResponse, ResultListResponse
from common.error_messages import ErrorCode
from common.exceptions import NotFoundError, StudioError
from studio import StudioSession, get_session
from utils.logger import get_logger

logger = get_logger("batch.routes")
router = APIRouter(prefix="/api/batch", tags=["batch"])


def _status(studio: StudioSession) -> BatchStatusResponse:
    state = studio.orchestrator.state
    return BatchStatusResponse(
        running=state.running,
        progress=state.progress,
        total=state.total,
        result_count=len(state.results),
        skipped=list(state.skipped),
        credential_available=studio.credential_state.available,
        message=state.message,
    )


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.post("", response_model=BatchStatusResponse, status_code=202)
async def start_batch(studio: StudioSession = Depends(get_session)):
    """
    Start generating one image per non-empty prompt.

    Validation and the API key check happen before this returns; generation
    then continues in the background. Poll GET /api/batch for progress and
    GET /api/batch/results for images as they appear.
    """
    try:
        await studio.start_batch()
    except StudioError as e:
        logger.warning(f"Batch not started: {e}")
        raise e.to_http()
    return _status(studio)


@router.get("", response_model=BatchStatusResponse)
def batch_status(studio: StudioSession = Depends(get_session)):
    return _status(studio)


@router.get("/results", response_model=ResultListResponse)
def list_results(studio: StudioSession = Depends(get_session)):
    """Artifacts produced so far, in prompt order."""
    results = studio.orchestrator.state.results.snapshot()
    return ResultListResponse(
        results=[ArtifactView.from_artifact(a) for a in results],
        count=len(results)
    )


@router.get("/results/{artifact_id}/download")
async def download_result(artifact_id: str, studio: StudioSession = Depends(get_session)):
    """Download a single generated image under its filename."""
    artifact = studio.orchestrator.state.results.get(artifact_id)
    try:
        if artifact is None:
            raise NotFoundError(f"artifact {artifact_id} not found", ErrorCode.ARTIFACT_NOT_FOUND)
        data = await studio.archiver.materialize(artifact)
    except StudioError as e:
        raise e.to_http()
    media_type = mimetypes.guess_type(artifact.filename)[0] or "application/octet-stream"
    return Response(content=data, media_type=media_type, headers=_attachment(artifact.filename))


@router.get("/archive")
async def download_archive(studio: StudioSession = Depends(get_session)):
    """Download every generated image of the current run as one zip."""
    artifacts = studio.orchestrator.state.results.snapshot()
    if not artifacts:
        raise NotFoundError(error_code=ErrorCode.NOTHING_TO_ARCHIVE).to_http()
    try:
        data = await studio.archiver.bundle(artifacts)
    except StudioError as e:
        logger.error(f"Archive download failed: {e}")
        raise e.to_http()
    return Response(content=data, media_type="application/zip", headers=_attachment(archive_name()))
