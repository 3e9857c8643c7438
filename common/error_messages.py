"""
User-friendly error messages and status codes.

This module provides centralized error message definitions that are
user-friendly and avoid exposing technical implementation details.
"""
from typing import Tuple, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for different types of failures."""

    # Validation Errors (400)
    NO_ACTIVE_PROMPTS = "NO_ACTIVE_PROMPTS"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    INVALID_IMAGE_DATA = "INVALID_IMAGE_DATA"
    PROMPT_LIMIT_REACHED = "PROMPT_LIMIT_REACHED"
    LAST_PROMPT = "LAST_PROMPT"

    # Not Found Errors (404)
    CHARACTER_NOT_FOUND = "CHARACTER_NOT_FOUND"
    PROMPT_NOT_FOUND = "PROMPT_NOT_FOUND"
    ARTIFACT_NOT_FOUND = "ARTIFACT_NOT_FOUND"

    # Batch state (409)
    BATCH_IN_PROGRESS = "BATCH_IN_PROGRESS"

    # Credential Errors (401)
    CREDENTIAL_UNAVAILABLE = "CREDENTIAL_UNAVAILABLE"
    CREDENTIAL_LOST = "CREDENTIAL_LOST"

    # External API Errors (502)
    IMAGE_GENERATION_FAILED = "IMAGE_GENERATION_FAILED"
    NO_CONTENT_GENERATED = "NO_CONTENT_GENERATED"

    # Export Errors (500)
    ARCHIVE_FAILED = "ARCHIVE_FAILED"
    NOTHING_TO_ARCHIVE = "NOTHING_TO_ARCHIVE"

    # Generic Errors
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


# User-friendly error messages mapped to error codes
ERROR_MESSAGES = {
    ErrorCode.NO_ACTIVE_PROMPTS: "Please enter at least one prompt.",
    ErrorCode.INVALID_PARAMETER: "One or more parameters are invalid. Please review your request and try again.",
    ErrorCode.INVALID_IMAGE_DATA: "The image provided is invalid. Please try with a different image.",
    ErrorCode.PROMPT_LIMIT_REACHED: "You've reached the maximum number of prompts for one batch.",
    ErrorCode.LAST_PROMPT: "At least one prompt must remain.",

    ErrorCode.CHARACTER_NOT_FOUND: "The character slot you're looking for does not exist.",
    ErrorCode.PROMPT_NOT_FOUND: "The prompt you're looking for does not exist.",
    ErrorCode.ARTIFACT_NOT_FOUND: "The generated image you're looking for is no longer available.",

    ErrorCode.BATCH_IN_PROGRESS: "A batch is already generating. Please wait for it to finish.",

    ErrorCode.CREDENTIAL_UNAVAILABLE: "No API key is selected. Please connect an API key to start generating.",
    ErrorCode.CREDENTIAL_LOST: "API Key session expired or invalid. Please reconnect your key.",

    ErrorCode.IMAGE_GENERATION_FAILED: "Image generation failed. Please try again or adjust your prompt.",
    ErrorCode.NO_CONTENT_GENERATED: "No image was generated. Please try rephrasing your prompt.",

    ErrorCode.ARCHIVE_FAILED: "We couldn't package your images for download. Please try again.",
    ErrorCode.NOTHING_TO_ARCHIVE: "There are no generated images to download yet.",

    ErrorCode.UNKNOWN_ERROR: "Something unexpected happened. Please try again.",
}


# HTTP status codes for each error type
ERROR_STATUS_CODES = {
    ErrorCode.NO_ACTIVE_PROMPTS: 400,
    ErrorCode.INVALID_PARAMETER: 400,
    ErrorCode.INVALID_IMAGE_DATA: 400,
    ErrorCode.PROMPT_LIMIT_REACHED: 400,
    ErrorCode.LAST_PROMPT: 400,

    ErrorCode.CHARACTER_NOT_FOUND: 404,
    ErrorCode.PROMPT_NOT_FOUND: 404,
    ErrorCode.ARTIFACT_NOT_FOUND: 404,

    ErrorCode.BATCH_IN_PROGRESS: 409,

    ErrorCode.CREDENTIAL_UNAVAILABLE: 401,
    ErrorCode.CREDENTIAL_LOST: 401,

    ErrorCode.IMAGE_GENERATION_FAILED: 502,
    ErrorCode.NO_CONTENT_GENERATED: 502,

    ErrorCode.ARCHIVE_FAILED: 500,
    ErrorCode.NOTHING_TO_ARCHIVE: 404,

    ErrorCode.UNKNOWN_ERROR: 500,
}


def get_error_response(
    error_code: ErrorCode,
    custom_message: Optional[str] = None
) -> Tuple[str, int]:
    """
    Get user-friendly error message and HTTP status code.

    Args:
        error_code: The error code enum
        custom_message: Optional custom message to append to the standard message

    Returns:
        Tuple of (error_message, status_code)
    """
    message = ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCode.UNKNOWN_ERROR])
    status_code = ERROR_STATUS_CODES.get(error_code, 500)

    if custom_message:
        message = f"{message} {custom_message}"

    return message, status_code


def format_error_detail(error_code: ErrorCode, detail: Optional[str] = None) -> str:
    """
    Format error detail for API response.

    Args:
        error_code: The error code enum
        detail: Optional additional detail

    Returns:
        Formatted error message
    """
    base_message = ERROR_MESSAGES.get(error_code, ERROR_MESSAGES[ErrorCode.UNKNOWN_ERROR])

    if detail:
        return f"{base_message} ({detail})"

    return base_message
