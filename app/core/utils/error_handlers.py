# app/core/utils/error_handlers.py

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.middleware.logging import logger
from app.core.security.hashing import hash_ip
from app.core.utils.exceptions import PersistenceFailure
from app.core.utils.response import standard_response


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """429 Too Many Requests"""
    masked_ip = hash_ip(get_remote_address(request))
    logger.warning(
        "Rate limit exceeded",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": 429,
            "ip_anonymized": masked_ip,
        },
    )

    return JSONResponse(
        content=standard_response(
            status="error",
            message="Rate limit exceeded. Please try again later."
        ),
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=standard_response(
            status="error",
            message=exc.detail,
        ),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """422 Unprocessable Entity"""
    errors = [
        {
            "loc": err.get("loc", []),
            "msg": err.get("msg", ""),
            "type": err.get("type", "")
        }
        for err in exc.errors()
    ]

    return JSONResponse(
        content=standard_response(
            status="error",
            message="Validation failed. Please check your input.",
            data={"errors": jsonable_encoder(errors)}
        ),
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
    )


async def persistence_failure_handler(request: Request, exc: PersistenceFailure):
    """503 Service Unavailable; storage details stay in the logs."""
    logger.error(
        f"Persistence failure during {exc.operation}",
        exc_info=exc.original or exc,
        extra={"method": request.method, "path": request.url.path, "status_code": 503},
    )

    return JSONResponse(
        content=standard_response(
            status="error",
            message="Something went wrong on our side. Please try again."
        ),
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """500 Internal Server Error"""
    logger.error("An unexpected error occurred", exc_info=exc)

    return JSONResponse(
        content=standard_response(
            status="error",
            message="An unexpected error occurred. Please contact support if the issue persists."
        ),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
