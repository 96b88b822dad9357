"""One error envelope for every failure the API reports."""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.domain.exceptions import DomainException, ErrorKind

logger = structlog.get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.AUTHORIZATION: 403,
    ErrorKind.INTERNAL: 500,
}


def error_response(kind: ErrorKind, message: str, details: Any = None) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_KIND[kind],
        content=jsonable_encoder(
            {
                "success": False,
                "error": {"kind": kind.value, "message": message, "details": details or {}},
            }
        ),
    )


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    logger.warning(
        "request_rejected",
        path=request.url.path,
        kind=exc.kind.value,
        error=exc.message,
        **exc.details,
    )
    return error_response(exc.kind, exc.message, exc.details)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    return error_response(ErrorKind.VALIDATION, "Invalid request.", {"errors": errors})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request_failed", path=request.url.path)
    return error_response(ErrorKind.INTERNAL, "Something went wrong")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
