import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "validation_error",
    status.HTTP_401_UNAUTHORIZED: "auth_error",
    status.HTTP_403_FORBIDDEN: "auth_error",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_429_TOO_MANY_REQUESTS: "rate_limited",
}


def _envelope(request: Request, status_code: int, message: str, details: object = None) -> JSONResponse:
    error: dict = {
        "code": _STATUS_CODES.get(status_code, "internal_error" if status_code >= 500 else "http_error"),
        "message": message,
    }
    if details is not None:
        error["details"] = details
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "request_id": getattr(request.state, "request_id", None),
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, str):
        message, details = detail, None
    elif isinstance(detail, dict) and "message" in detail:
        # {"message": ..., "issues": [...]} from the controllers
        details = {k: v for k, v in detail.items() if k != "message"} or None
        message = str(detail["message"])
    else:
        message, details = "Request failed", detail
    response = _envelope(request, exc.status_code, message, details)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed or incomplete bodies are client errors (400), not 422.
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    first = errors[0]["msg"] if errors else "Invalid request"
    return _envelope(request, status.HTTP_400_BAD_REQUEST, first, errors)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)


async def error_envelope_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    try:
        return await call_next(request)
    except StarletteHTTPException as exc:
        return await http_exception_handler(request, exc)
    except Exception:
        logger.exception("Unhandled exception")
        return _envelope(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred",
        )
