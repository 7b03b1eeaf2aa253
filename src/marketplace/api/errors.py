"""Exception handlers rendering domain failures in the response envelope."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from marketplace.shared.errors import MarketplaceError

logger = structlog.get_logger(__name__)


def _first_message(messages) -> str:
    if isinstance(messages, dict):
        for field_messages in messages.values():
            if isinstance(field_messages, list | tuple) and field_messages:
                return str(field_messages[0])
            if field_messages:
                return str(field_messages)
    return str(messages)


def _envelope(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error, **extra})


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    logger.warning("Request refused", path=request.url.path, status_code=exc.status_code, reason=exc.message)
    return _envelope(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    message = _first_message(exc.messages)
    logger.warning("Validation failed", path=request.url.path, errors=exc.messages)
    return _envelope(400, message, errors=exc.messages)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body") or "body"
        errors.setdefault(field, []).append(f"{field}: {error['msg']}")
    logger.warning("Request body rejected", path=request.url.path, errors=errors)
    return _envelope(400, _first_message(errors), errors=errors)


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    message = _first_message(exc.messages) if getattr(exc, "messages", None) else str(exc)
    logger.warning("Record not found", path=request.url.path, reason=message)
    return _envelope(404, message)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", path=request.url.path, exc_info=exc)
    return _envelope(500, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    """Install the envelope handlers; they take precedence over Protean's defaults."""
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
