from __future__ import annotations
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from components.authservice.contracts import AuthErrorCodes, ErrorPayload
from components.authservice.errors import AuthServiceException, InternalError

logger = logging.getLogger("gateway")


def _respond(status_code: int, payload: ErrorPayload) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True))


async def handle_auth_error(request: Request, ex: AuthServiceException) -> JSONResponse:
    return _respond(ex.status_code, ex.payload)


async def handle_request_validation(request: Request, ex: RequestValidationError) -> JSONResponse:
    fields = sorted({".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in ex.errors()})
    payload = ErrorPayload(
        type="VALIDATION",
        code=AuthErrorCodes.MISSING_FIELDS,
        message="Invalid request body",
        details={"fields": [f for f in fields if f]},
    )
    return _respond(400, payload)


async def handle_http_error(request: Request, ex: StarletteHTTPException) -> JSONResponse:
    if ex.status_code in (404, 405):
        # A known path with the wrong method is reported like any unmatched route.
        payload = ErrorPayload(type="NOT_FOUND", code=AuthErrorCodes.NOT_FOUND, message="Route not found")
        return _respond(404, payload)
    else:
        payload = ErrorPayload(
            type="VALIDATION" if ex.status_code < 500 else "INTERNAL",
            code=f"HTTP_{ex.status_code}",
            message=str(ex.detail or "Request failed"),
        )
    return JSONResponse(status_code=ex.status_code, content=payload.model_dump(exclude_none=True), headers=getattr(ex, "headers", None))


async def handle_unexpected(request: Request, ex: Exception) -> JSONResponse:
    logger.exception("request.unhandled", extra={"path": request.url.path})
    return _respond(500, InternalError().payload)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthServiceException, handle_auth_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected)
