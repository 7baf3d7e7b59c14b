"""
handlers/errors.py
------------------
Maps errors to HTTP responses.

    ExplorerError            -> its own status_code
    unmatched path / method  -> 400
    invalid path parameter   -> 400
    anything else            -> 500
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from utils.errors import ExplorerError
from utils.logger import get_logger

logger = get_logger(__name__)

# Raised by the router itself when no route matches the path or method.
_ROUTING_STATUSES = {404, 405}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_error_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the app."""

    @app.exception_handler(ExplorerError)
    async def explorer_error_handler(request: Request, exc: ExplorerError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def routing_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in _ROUTING_STATUSES:
            logger.info(f"Unmatched route: {request.method} {request.url.path}")
            return _error(400, f"unsupported route: {request.method} {request.url.path}")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Invalid request {request.method} {request.url.path}: {exc.errors()}")
        return _error(400, f"unsupported route: {request.method} {request.url.path}")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return _error(500, "internal server error")
