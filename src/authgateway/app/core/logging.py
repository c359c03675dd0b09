# src/authgateway/app/core/logging.py
from __future__ import annotations
import logging
import os
from typing import Any, Mapping

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR":    logging.ERROR,
    "WARNING":  logging.WARNING,
    "INFO":     logging.INFO,
    "DEBUG":    logging.DEBUG,
    "NOTSET":   logging.NOTSET,
}

def _level_from_env(var: str, default: str = "INFO") -> int:
    val = (os.getenv(var, default) or "").strip().upper()
    return _LEVELS.get(val, _LEVELS[default])

def setup_logging(level: str | None = None) -> None:
    """
    Configure root logging once. Idempotent.
    LOG_LEVEL controls verbosity (default INFO) unless `level` is given.
    """
    resolved = _LEVELS.get((level or "").upper()) if level else None
    if resolved is None:
        resolved = _level_from_env("LOG_LEVEL", "INFO")

    root = logging.getLogger()
    if root.handlers:
        # already configured (pytest, uvicorn, etc.)
        root.setLevel(resolved)
        return

    fmt = "%(asctime)s.%(msecs)03d %(levelname)-8s %(name)s %(message)s"
    datefmt = "%Y-%m-%dT%H:%M:%S"

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))

    root.setLevel(resolved)
    root.addHandler(handler)


_flow_log = logging.getLogger("authgateway.flow")

def _fmt_kv(d: Mapping[str, Any]) -> str:
    return " ".join(f"{k}={d[k]}" for k in d)

def flow_trace(event: str, **kv: Any) -> None:
    """
    Emit a single-line step log ONLY when FLOW_TRACE=true.
    Example:
      [flow] signup.provider_ok username=jdoe sub=3f2a...
    """
    if (os.getenv("FLOW_TRACE", "")).lower() not in ("1", "true", "yes", "on"):
        return
    _flow_log.info("[flow] %s %s", event, _fmt_kv(kv))
