"""Per-request audit log for the hotel app.

Each request produces one line carrying the session user that made it, so
admin actions and reservations can be traced back to an account. Server
errors are logged at WARNING level.
"""
from __future__ import annotations

import logging
from pathlib import Path
from time import time
from typing import Optional

from fastapi import FastAPI, Request

from .config import get_settings
from .schemas import SessionUser


def _build_logger(service_name: str) -> logging.Logger:
    logger = logging.getLogger(f"audit.{service_name}")
    if logger.handlers:
        return logger

    log_dir = Path(get_settings().log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    logger.setLevel(logging.INFO)
    handler = logging.FileHandler(log_dir / f"{service_name}.log")
    handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    return logger


def describe_user(user: Optional[SessionUser]) -> str:
    if user is None:
        return "anonymous"
    role = "admin" if user.is_admin else "guest"
    return f"{user.id}:{role}"


def add_audit_middleware(app: FastAPI, service_name: str) -> None:
    logger = _build_logger(service_name)

    @app.middleware("http")
    async def audit_logger(request: Request, call_next):  # type: ignore[override]
        start = time()
        response = await call_next(request)
        duration_ms = (time() - start) * 1000
        # Set by the session dependency on page routes only.
        user = getattr(request.state, "user", None)
        client = request.client.host if request.client else "unknown"
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "%s %s | status=%s | user=%s | client=%s | duration=%.2fms",
            request.method,
            request.url.path,
            response.status_code,
            describe_user(user),
            client,
            duration_ms,
        )
        return response
