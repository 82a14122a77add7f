"""File logging for the service: HTTP audit lines plus engine and store events."""
from __future__ import annotations

import logging
from pathlib import Path
from time import time
from typing import Optional

from fastapi import FastAPI, Request

from .config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _file_handler(service_name: str) -> logging.Handler:
    log_dir = Path(get_settings().log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / f"{service_name}.log")
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def configure_service_logging(service_name: str) -> logging.Logger:
    """Send the audit logger and the ``hotel_booking`` package loggers to one file.

    Returns the audit logger. Safe to call more than once.
    """
    audit_logger = logging.getLogger(f"audit.{service_name}")
    if audit_logger.handlers:
        return audit_logger

    handler = _file_handler(service_name)
    for logger in (audit_logger, logging.getLogger("hotel_booking")):
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)
    return audit_logger


def add_audit_middleware(app: FastAPI, service_name: str) -> None:
    logger = configure_service_logging(service_name)

    @app.middleware("http")
    async def audit_logger(request: Request, call_next):  # type: ignore[override]
        start = time()
        response = await call_next(request)
        duration_ms = (time() - start) * 1000
        client_ip: Optional[str] = None
        if request.client:
            client_ip = request.client.host
        logger.info(
            "%s %s | status=%s | client=%s | duration=%.2fms",
            request.method,
            request.url.path,
            response.status_code,
            client_ip or "unknown",
            duration_ms,
        )
        return response
