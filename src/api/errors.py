"""Exception handlers rendering every failure as ``{success, message}``."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.errors import DashboardError

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    message: str,
    error: str | None = None,
) -> JSONResponse:
    """Build the failure envelope."""
    content = {"success": False, "message": message}
    if error is not None:
        content["error"] = error
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI, debug: bool = False) -> None:
    """Attach the envelope handlers to the application.

    ``debug`` exposes the exception text on 500 responses; never enable it
    outside development.
    """

    @app.exception_handler(DashboardError)
    async def handle_domain_error(request: Request, exc: DashboardError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
            error = str(exc.__cause__) if debug and exc.__cause__ else None
            return error_response(exc.status_code, exc.message, error)
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return error_response(exc.status_code, "Route not found")
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            str(exc) if debug else None,
        )
