"""
Error Handling for Bibliotheca

Centralized error handling:
- Structured error responses
- Logging of errors
- Translation of store failures into 503
"""

import traceback
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from pymongo.errors import PyMongoError

from bibliotheca.exceptions import BibliothecaException, StoreUnavailableError


def create_error_response(
    error: str,
    code: str,
    status_code: int,
    detail: str = None,
) -> JSONResponse:
    """Create standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "code": code,
            "detail": detail,
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with FastAPI app."""

    @app.exception_handler(BibliothecaException)
    async def bibliotheca_exception_handler(request: Request, exc: BibliothecaException):
        if exc.status_code >= 500:
            logger.error(f"Bibliotheca error on {request.url.path}: {exc.code} - {exc.message} ({exc.detail})")
        else:
            logger.warning(f"Bibliotheca error on {request.url.path}: {exc.code} - {exc.message}")
        return create_error_response(
            error=exc.message,
            code=exc.code,
            status_code=exc.status_code,
            detail=exc.detail,
        )

    @app.exception_handler(PyMongoError)
    async def store_exception_handler(request: Request, exc: PyMongoError):
        error = StoreUnavailableError(detail=f"{type(exc).__name__}: {exc}")
        logger.error(f"Store failure on {request.url.path}: {error.detail}")
        return create_error_response(
            error=error.message,
            code=error.code,
            status_code=error.status_code,
            detail=error.detail,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}\n{traceback.format_exc()}"
        )
        return create_error_response(
            error="Internal Server Error",
            code="INTERNAL_ERROR",
            status_code=500,
            detail="An unexpected error occurred",
        )
