# src/authgateway/app/core/errors.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from botocore.exceptions import ClientError
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

_log = logging.getLogger("authgateway.errors")

ErrorDetail = Union[str, Dict[str, Any], List[Any]]


class AppError(Exception):
    """
    Error raised deliberately by the gateway.

    `detail` is fixed where the error is built: None means "report the message",
    anything else (dict / list) is returned as the structured error body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        detail: Optional[ErrorDetail] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail
        if status_code >= 500:
            _log.error(message)
        else:
            _log.warning(message)

    @property
    def body(self) -> ErrorDetail:
        return self.detail if self.detail is not None else self.message


# ------------------------------------------------------------
# Queue errors
# ------------------------------------------------------------

class QueueError(RuntimeError):
    """Base class for message queue failures."""


class QueueNotConnectedError(QueueError):
    def __init__(self, message: str = "Not connected to Amazon MQ") -> None:
        super().__init__(message)


class QueueFullError(QueueError):
    def __init__(self, message: str = "Failed to send message - queue is full") -> None:
        super().__init__(message)


class QueueNotInitializedError(QueueError):
    def __init__(
        self,
        message: str = "Queue Service is not initialized. Call initialize() first.",
    ) -> None:
        super().__init__(message)


class QueueUnavailableError(QueueError):
    def __init__(self, message: str = "Queue service is not available") -> None:
        super().__init__(message)


# ------------------------------------------------------------
# HTTP mapping
# ------------------------------------------------------------

def _field_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    errors: List[Dict[str, Any]] = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        errors.append({
            "field": ".".join(loc) or None,
            "message": err.get("msg", "invalid value"),
            "type": err.get("type"),
        })
    return errors


def provider_error_status(exc: ClientError) -> int:
    meta = exc.response.get("ResponseMetadata") or {}
    status = meta.get("HTTPStatusCode")
    return status if isinstance(status, int) and status >= 400 else 400


def provider_error_message(exc: ClientError) -> str:
    err = exc.response.get("Error") or {}
    return err.get("Message") or err.get("Code") or str(exc)


def error_response(exc: Exception) -> JSONResponse:
    """Translate any exception into the `{"error": ...}` body."""
    if isinstance(exc, AppError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.body})
    if isinstance(exc, ClientError):
        return JSONResponse(
            status_code=provider_error_status(exc),
            content={"error": provider_error_message(exc)},
        )

    status = getattr(exc, "status_code", None)
    if not isinstance(status, int):
        status = 400
    return JSONResponse(status_code=status, content={"error": str(exc) or exc.__class__.__name__})


async def _validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"errors": _field_errors(exc)})


async def _app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return error_response(exc)


async def _provider_error_handler(_: Request, exc: ClientError) -> JSONResponse:
    _log.error("identity provider error: %s", provider_error_message(exc))
    return error_response(exc)


class CatchAllMiddleware(BaseHTTPMiddleware):
    """Last-resort mapping for errors no handler claimed."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            _log.exception("unhandled error on %s %s", request.method, request.url.path)
            return error_response(exc)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _validation_handler)
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(ClientError, _provider_error_handler)
    app.add_middleware(CatchAllMiddleware)


__all__ = [
    "AppError",
    "QueueError",
    "QueueNotConnectedError",
    "QueueFullError",
    "QueueNotInitializedError",
    "QueueUnavailableError",
    "error_response",
    "provider_error_message",
    "provider_error_status",
    "register_error_handlers",
]
