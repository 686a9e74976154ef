# File: api/errors.py
import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from services.errors import RecordServiceError, StorageError

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


def to_http_exception(error: RecordServiceError, context: str) -> HTTPException:
    """Maps a service error onto an HTTPException. Storage details stay in the log."""
    if isinstance(error, StorageError):
        logger.error(f"{context}: {error.message}", exc_info=True)
        return HTTPException(status_code=500, detail=INTERNAL_ERROR)
    return HTTPException(status_code=error.status_code, detail=error.message)


def _format_errors(errors) -> list:
    formatted = []
    for err in errors:
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        formatted.append({"field": loc, "message": err.get("msg", "Invalid value")})
    return formatted


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request payload", "errors": _format_errors(exc.errors())},
    )
