"""
HTTP boundary for the phrase scheduler.

Exposes the schedule preview as a JSON endpoint. The scheduler itself is
pure; this module only checks the caller, validates the body and maps
errors onto status codes:
- 401 missing Authorization header
- 400 malformed request (missing fields, invalid values, bad step tokens,
  intervals past the last representable date)
- 500 anything unexpected, with the causal message

Run with:
    uvicorn app.service:app
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.settings import ServiceSettings, load_settings
from core.logging_config import get_logger
from core.scheduling import (
    DurationParseError,
    IntervalOverflowError,
    PreviewRequest,
    compute_previews,
    get_estimator,
)


logger = get_logger("app.service")

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]
REQUIRED_FIELDS = ("card", "now", "config")


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def describe_validation_error(exc: ValidationError) -> str:
    """One line per invalid field: "card.scheduler.state: Input should be ..."."""
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts)


def create_app(settings: Optional[ServiceSettings] = None) -> FastAPI:
    """
    Build the service.

    Args:
        settings: Service settings (default: read from the environment)

    Returns:
        FastAPI application
    """
    settings = settings or load_settings()
    logger.setLevel(settings.log_level)
    estimator = get_estimator(settings.interval_model)

    service = FastAPI(
        title="Phrase Scheduler",
        description="Spaced-repetition schedule previews for phrase cards.",
    )
    service.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=CORS_ALLOW_HEADERS,
    )

    @service.get("/health")
    async def health_check():
        return {"status": "ok"}

    @service.post("/phrases-schedule-preview")
    async def schedule_preview(
        request: Request,
        authorization: Optional[str] = Header(default=None)
    ):
        if not authorization:
            return error_response(401, "Missing authorization header")

        try:
            body = await request.json()
        except ValueError:
            return error_response(400, "Request body must be JSON")

        if not isinstance(body, dict) or any(body.get(field) in (None, "") for field in REQUIRED_FIELDS):
            return error_response(400, "Missing required fields")

        try:
            preview_request = PreviewRequest.model_validate(body)
        except ValidationError as exc:
            return error_response(400, describe_validation_error(exc))

        try:
            previews = compute_previews(
                preview_request.card,
                preview_request.now,
                preview_request.config,
                estimator=estimator
            )
        except (DurationParseError, IntervalOverflowError) as exc:
            return error_response(400, str(exc))
        except Exception as exc:
            logger.exception("[phrases-schedule-preview] Error")
            return error_response(500, str(exc) or "Internal server error")

        return JSONResponse(content={"success": True, "intervals": previews.model_dump()})

    return service


app = create_app()
