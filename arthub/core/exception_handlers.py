"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to the `{success: false, ...}` envelope clients expect.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from arthub.core.config import get_settings
from arthub.domain.exceptions import ArtHubException, InsufficientAllowanceException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status when applicable
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "INSUFFICIENT_BALANCE": 400,
    "INSUFFICIENT_ALLOWANCE": 400,
    "TRANSACTION_REVERTED": 400,
    "RESOURCE_NOT_FOUND": 404,
    "SETTLEMENT_IN_PROGRESS": 409,
    "CHAIN_SUBMISSION_ERROR": 500,
    "CONFIRMATION_TIMEOUT": 500,
    "PARTIAL_SETTLEMENT": 500,
    "MINT_DECODE_ERROR": 500,
    "PERSISTENCE_ERROR": 500,
    "RELAYER_UNDERFUNDED": 503,
    "SERVICE_UNAVAILABLE": 503,
}


def status_for(exc: ArtHubException) -> int:
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def _arthub_exception_handler(request: Request, exc: ArtHubException) -> JSONResponse:
    """Return JSON from ArtHubException.to_dict() with appropriate status code."""
    status = status_for(exc)
    if status >= 500:
        logger.warning("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


def _allowance_exception_handler(
    request: Request, exc: InsufficientAllowanceException
) -> JSONResponse:
    """Return 400 with the approval instruction the client must sign."""
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "needsApproval": True,
            "error": exc.error_code,
            "message": exc.message,
            "approvalData": exc.approval_data(),
        },
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with field-level validation errors."""
    details = [
        {
            "loc": [str(part) for part in err.get("loc", ())],
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": details,
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers match on the exception class
    hierarchy, so the allowance envelope overrides the base one.
    """
    app.add_exception_handler(InsufficientAllowanceException, _allowance_exception_handler)
    app.add_exception_handler(ArtHubException, _arthub_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
