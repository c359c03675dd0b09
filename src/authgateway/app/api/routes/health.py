# src/authgateway/app/api/routes/health.py
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

_log = logging.getLogger("authgateway.health")

router = APIRouter(tags=["health"])

# taken at import, i.e. when the worker process loads the app
PROCESS_STARTED_AT = time.monotonic()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _uptime() -> float:
    return round(time.monotonic() - PROCESS_STARTED_AT, 3)


@router.get("/")
def hello() -> Dict[str, str]:
    return {"message": "Hello, World!"}


@router.get("/health")
def health(request: Request):
    """
    Liveness plus queue connectivity. A disconnected broker is still a 200;
    only a failure while building the report answers 500.
    """
    try:
        connected = bool(request.app.state.queue.is_connected)
        body: Dict[str, Any] = {
            "status": "ok",
            "timestamp": _now_iso(),
            "uptime": _uptime(),
            "services": {
                "queue": {
                    "connected": connected,
                    "status": "healthy" if connected else "disconnected",
                },
            },
        }
        return body
    except Exception as exc:
        _log.exception("health check failed")
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "timestamp": _now_iso(),
                "uptime": _uptime(),
                "services": {
                    "queue": {"connected": False, "status": "error", "error": str(exc)},
                },
            },
        )
