"""Translate access core errors into HTTP responses"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from domain.errors import (
    AccessCoreError,
    ConcurrentTransitionError,
    DeviceLimitExceededError,
    InvalidDeviceIdentityError,
    InvalidInviteWindowError,
    InvalidOtpError,
    InvalidTransitionError,
    InviteNotFoundError,
    InviteOwnershipError,
    OutsideValidityWindowError,
)

logger = structlog.get_logger()

STATUS_CODES = {
    InviteNotFoundError: 404,
    InvalidOtpError: 400,
    OutsideValidityWindowError: 409,
    InvalidTransitionError: 409,
    InvalidInviteWindowError: 422,
    InviteOwnershipError: 403,
    ConcurrentTransitionError: 409,
    DeviceLimitExceededError: 409,
    InvalidDeviceIdentityError: 400,
}


def status_code_for(exc: AccessCoreError) -> int:
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 400


async def access_core_error_handler(request: Request, exc: AccessCoreError) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.info("request_rejected", path=request.url.path, code=exc.code, status_code=status_code)
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AccessCoreError, access_core_error_handler)
