"""Error codes and FastAPI exception handlers.

Every failure leaves the API in the same envelope as a success:
{"success": false, "error": {"code", "message", "details"?}, "meta": {...}}
"""

import logging
from enum import Enum
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from ..schemas import ApiError, ApiResponse
from .envelope import request_meta

logger = logging.getLogger("recipe_scaler.errors")


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_MULTIPLIER = "INVALID_MULTIPLIER"
    NO_INGREDIENTS_FOUND = "NO_INGREDIENTS_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INVALID_MULTIPLIER: 400,
    ErrorCode.NO_INGREDIENTS_FOUND: 400,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.INTERNAL_ERROR: 500,
}


class AppError(Exception):
    def __init__(self, code: ErrorCode, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    @property
    def status_code(self) -> int:
        return STATUS_CODES.get(self.code, 500)


def error_response(
    request: Request,
    code: ErrorCode,
    message: str,
    details: Optional[dict[str, Any]] = None,
    status_code: Optional[int] = None,
) -> JSONResponse:
    body = ApiResponse(
        success=False,
        error=ApiError(code=code.value, message=message, details=details),
        meta=request_meta(request),
    )
    return JSONResponse(
        status_code=status_code or STATUS_CODES[code],
        content=body.model_dump(mode="json", by_alias=True),
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> {exc.code.value}: {exc.message}")
    return error_response(request, exc.code, exc.message, exc.details, exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return error_response(
        request,
        ErrorCode.VALIDATION_ERROR,
        "Request body failed validation",
        {"errors": errors},
    )


# SlowAPIMiddleware invokes this handler without awaiting it
def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return error_response(
        request,
        ErrorCode.RATE_LIMITED,
        f"Rate limit exceeded: {exc.detail}",
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(request, ErrorCode.INTERNAL_ERROR, "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
