"""
Error Handler Middleware

Global exception handling for the API.

Provides consistent error responses across all endpoints by catching
exceptions and converting them to standardized JSON responses.

Error Response Format:
======================
    {
        "error": {
            "code": "NOT_FOUND",
            "message": "Project with id 'abc-123' not found",
            "details": {}
        }
    }

Exception Handling:
===================
1. FolioException subclasses → Use their status_code and to_dict()
2. Request / Pydantic validation errors → 400 VALIDATION_ERROR
3. IntegrityError escaping a service → 409 CONFLICT
4. Other exceptions → 500 INTERNAL_ERROR (text only in development)

Usage:
======
    from src.api.middleware.error_handler import setup_exception_handlers

    app = FastAPI()
    setup_exception_handlers(app)
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from src.config.settings import settings
from src.shared.core.exceptions import FolioException
from src.shared.core.logging import logger


def _validation_response(request: Request, errors: list) -> JSONResponse:
    errors = jsonable_encoder(errors, custom_encoder={Exception: str})
    logger.warning(
        "Validation error",
        errors=errors,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": {"errors": errors},
            }
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Set up global exception handlers.

    Should be called during application initialization to register
    exception handlers for all routes.

    Args:
        app: FastAPI application instance
    """

    @app.exception_handler(FolioException)
    async def folio_exception_handler(
        request: Request,
        exc: FolioException,
    ) -> JSONResponse:
        """
        Handle application exceptions.

        These are expected outcomes (not found, forbidden, conflict) and are
        logged at warning level, never as system faults.
        """
        logger.warning(
            "Application error",
            error_code=exc.error_code,
            message=exc.message,
            status_code=exc.status_code,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Request body / query / path did not match the expected schema."""
        return _validation_response(request, exc.errors())

    @app.exception_handler(ValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: ValidationError,
    ) -> JSONResponse:
        return _validation_response(request, exc.errors())

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(
        request: Request,
        exc: IntegrityError,
    ) -> JSONResponse:
        """A constraint violation no service translated."""
        logger.warning(
            "Integrity error",
            error=str(exc.orig),
            path=request.url.path,
        )
        return JSONResponse(
            status_code=409,
            content={
                "error": {
                    "code": "CONFLICT",
                    "message": "Resource conflict",
                }
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Handle unexpected exceptions.

        Catches any unhandled exception and returns a generic error.
        The exception text is only exposed in development.
        """
        logger.error(
            "Unexpected error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            exc_info=True,
        )
        error = {
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
        }
        if settings.is_development:
            error["details"] = {"error": str(exc), "type": type(exc).__name__}
        return JSONResponse(status_code=500, content={"error": error})
