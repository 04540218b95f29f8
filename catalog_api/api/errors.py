from __future__ import annotations

from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from catalog_api.core.errors import DuplicateId, NotFound, StoreError, ValidationError
from catalog_api.core.logging import get_logger

logger = get_logger(__name__)


def _error_response(request: Request, status_code: int, error: str, message: str, **extra: Any) -> JSONResponse:
    content: Dict[str, Any] = {
        "error": error,
        "message": message,
        "requestId": getattr(request.state, "request_id", None),
    }
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return _error_response(request, status.HTTP_404_NOT_FOUND, "not_found", str(exc))


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "validation_error",
        str(exc),
        fields=exc.fields,
        details=exc.errors,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed JSON or a body that is not an object: same contract as ValidationError.
    details: List[Dict[str, Any]] = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        details.append({"field": loc[0] if loc else "body", "message": err.get("msg", "invalid")})
    return await validation_error_handler(request, ValidationError(details))


async def duplicate_id_handler(request: Request, exc: DuplicateId) -> JSONResponse:
    return _error_response(request, status.HTTP_409_CONFLICT, "conflict", str(exc))


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    # Details stay in the logs; clients get a generic message.
    logger.error("Store error: %s [%s]", exc, getattr(request.state, "request_id", None))
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "store_error", "Store operation failed")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception [%s]", getattr(request.state, "request_id", None))
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_server_error",
        "Unexpected error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFound, not_found_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(DuplicateId, duplicate_id_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
