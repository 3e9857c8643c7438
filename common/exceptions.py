"""Studio exception taxonomy.

Every exception carries an ErrorCode so routes can turn it into the matching
user-facing message and HTTP status without re-classifying it.
"""
from typing import Optional

from fastapi import HTTPException

from common.error_messages import ErrorCode, get_error_response, format_error_detail


class StudioError(Exception):
    """Base class for failures the studio reports to the user."""

    error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR

    def __init__(self, message: Optional[str] = None, error_code: Optional[ErrorCode] = None):
        if error_code is not None:
            self.error_code = error_code
        self.detail = message
        super().__init__(message or self.user_message)

    @property
    def user_message(self) -> str:
        message, _ = get_error_response(self.error_code)
        return message

    @property
    def status_code(self) -> int:
        _, status_code = get_error_response(self.error_code)
        return status_code

    def to_http(self) -> HTTPException:
        """Convert to an HTTPException with the user-facing message."""
        return HTTPException(
            status_code=self.status_code,
            detail=format_error_detail(self.error_code, self.detail),
        )


class ValidationError(StudioError):
    """Input rejected before any state changed (e.g. no active prompts)."""

    error_code = ErrorCode.INVALID_PARAMETER


class NotFoundError(StudioError):
    """A character, prompt or artifact id did not resolve."""

    error_code = ErrorCode.ARTIFACT_NOT_FOUND


class BatchInProgress(StudioError):
    error_code = ErrorCode.BATCH_IN_PROGRESS


class CredentialUnavailable(StudioError):
    """No credential even after the interactive acquisition attempt."""

    error_code = ErrorCode.CREDENTIAL_UNAVAILABLE


class CredentialLost(StudioError):
    """The remote service rejected a previously valid credential."""

    error_code = ErrorCode.CREDENTIAL_LOST


class GenerationFailed(StudioError):
    """Any other failure of a single generation call."""

    error_code = ErrorCode.IMAGE_GENERATION_FAILED


class ArchiveFailed(StudioError):
    """An artifact could not be re-materialized while bundling."""

    error_code = ErrorCode.ARCHIVE_FAILED
