"""
FastAPI application for batch character-consistent image generation with Gemini.

Features:
- Four character slots with reference images, included per request
- Up to ten prompts generated sequentially into a gallery
- API key selection with automatic reconnect prompts
- Single-image and zip downloads of the results
"""
import json
import time
from typing import Any

import uvicorn
from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import Config
from batch.routes import router as batch_router
from characters.routes import router as characters_router
from credentials.routes import router as credentials_router
from prompts.routes import router as prompts_router
from studio import session
from utils.logger import get_logger
from common.error_messages import ErrorCode, get_error_response

# Initialize logger
logger = get_logger("main")

# Sensitive fields that should be masked in logs
SENSITIVE_FIELDS = {'api_key', 'apikey', 'key', 'token', 'secret', 'authorization'}


def mask_sensitive_data(data: Any, mask_value: str = "***MASKED***") -> Any:
    """
    Recursively mask sensitive fields in data structures.

    Args:
        data: Data to mask (dict, list, or JSON string)
        mask_value: Value to replace sensitive data with

    Returns:
        Data with sensitive fields masked
    """
    if isinstance(data, dict):
        return {
            key: mask_value if key.lower() in SENSITIVE_FIELDS else mask_sensitive_data(value, mask_value)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive_data(item, mask_value) for item in data]
    if isinstance(data, str):
        try:
            parsed = json.loads(data)
        except (json.JSONDecodeError, ValueError):
            return data
        if isinstance(parsed, (dict, list)):
            return json.dumps(mask_sensitive_data(parsed, mask_value))
    return data


# Validate configuration on startup
try:
    Config.validate()
    logger.info("Configuration validated successfully")
except ValueError as e:
    logger.error(f"Configuration error: {e}")
    logger.error("Please fix the environment variables in your .env file")

if not Config.has_gemini_api_key():
    logger.warning("GEMINI_API_KEY is not set; an API key must be selected through /api/credentials")

app = FastAPI(
    title="Character Batch Studio API",
    description="Batch image generation with character reference images, powered by Gemini.",
    version="1.0.0"
)


# CORS middleware - MUST be added FIRST so it runs on all responses
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions globally."""
    if isinstance(exc, HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail}
        )

    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    message, status_code = get_error_response(ErrorCode.UNKNOWN_ERROR)
    return JSONResponse(
        status_code=status_code,
        content={"detail": message}
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every HTTP request with timing; JSON bodies are logged with keys masked."""
    start_time = time.time()
    full_url = str(request.url)

    try:
        log_msg = f"→ {request.method} {full_url} - Client: {request.client.host if request.client else 'unknown'}"
        is_json = request.headers.get("content-type", "").startswith("application/json")
        if Config.LOG_REQUEST_BODIES and is_json and request.method in ["POST", "PUT", "PATCH"]:
            body_bytes = await request.body()
            if body_bytes:
                masked_body = mask_sensitive_data(body_bytes.decode("utf-8", errors="replace"))
                if len(masked_body) > 2000:
                    masked_body = masked_body[:2000] + "... [truncated]"
                log_msg += f"\n  Request Body: {masked_body}"
        logger.info(log_msg)

        response = await call_next(request)

        process_time = (time.time() - start_time) * 1000
        logger.info(f"← {request.method} {full_url} - Status: {response.status_code} - Time: {process_time:.2f}ms")
        return response
    except Exception as e:
        process_time = (time.time() - start_time) * 1000
        logger.error(f"← {request.method} {full_url} - Error: {str(e)} - Time: {process_time:.2f}ms")
        raise

logger.info("CORS middleware configured")

# Include routers
app.include_router(credentials_router)
logger.info("Credentials router included")

app.include_router(characters_router)
logger.info("Characters router included")

app.include_router(prompts_router)
logger.info("Prompts router included")

app.include_router(batch_router)
logger.info("Batch router included")


@app.on_event("startup")
async def startup_event():
    """Log startup and derive the initial credential state."""
    logger.info("=" * 80)
    logger.info("Character Batch Studio starting up")
    logger.info(f"Model: {Config.GEMINI_IMAGE_MODEL} ({Config.GEMINI_IMAGE_SIZE})")
    logger.info(f"Host: {Config.HOST}:{Config.PORT}")
    logger.info("=" * 80)
    try:
        available = await session.refresh_credential_state()
        logger.info(f"API key available: {available}")
    except Exception as e:
        logger.error(f"Error checking API key during startup: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("=" * 80)
    logger.info("Character Batch Studio shutting down")
    logger.info("=" * 80)


@app.get("/healthz")
def health():
    """Health check endpoint."""
    return {"status": "ok"}


# Run server directly
if __name__ == "__main__":
    logger.info(f"Starting server on {Config.HOST}:{Config.PORT}")
    uvicorn.run(
        "app:app",
        host=Config.HOST,
        port=Config.PORT,
        reload=True,
        log_level="info"
    )
