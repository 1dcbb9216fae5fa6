from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from flask import Flask, g, has_request_context


LOG_FORMAT = "%(asctime)s [%(levelname)s] [req=%(request_id)s] %(name)s: %(message)s"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        request_id = None
        if has_request_context():
            request_id = getattr(g, "request_id", None)
        record.request_id = request_id or "-"
        return True


def _resolve_level(app: Flask) -> int:
    configured = str(app.config.get("LOG_LEVEL") or "").upper()
    level = logging.getLevelName(configured) if configured else None
    if isinstance(level, int):
        return level
    return logging.DEBUG if app.debug else logging.INFO


def _resolve_log_path(app: Flask) -> Path:
    logs_dir = Path(app.config.get("LOG_DIR") or Path(app.root_path).parent / "logs")
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir / (app.config.get("LOG_FILENAME") or "location_console.log")


def _prepare_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestIdFilter())
    return handler


def _has_stdout_handler(logger: logging.Logger) -> bool:
    return any(type(handler) is logging.StreamHandler for handler in logger.handlers)


def _has_file_handler(logger: logging.Logger, log_path: Path) -> bool:
    return any(
        isinstance(handler, RotatingFileHandler)
        and getattr(handler, "baseFilename", "") == str(log_path)
        for handler in logger.handlers
    )


def configure_logging(app: Flask) -> Path:
    """Send application logs to stdout and a rotating file, tagged with the request id."""

    level = _resolve_level(app)
    log_path = _resolve_log_path(app)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    if not _has_stdout_handler(root_logger):
        root_logger.addHandler(
            _prepare_handler(logging.StreamHandler(sys.stdout), level)
        )

    if not _has_file_handler(root_logger, log_path):
        root_logger.addHandler(
            _prepare_handler(
                RotatingFileHandler(
                    log_path,
                    maxBytes=LOG_MAX_BYTES,
                    backupCount=LOG_BACKUP_COUNT,
                ),
                level,
            )
        )

    for handler in app.logger.handlers:
        if not any(isinstance(existing, RequestIdFilter) for existing in handler.filters):
            handler.addFilter(RequestIdFilter())

    app.logger.setLevel(level)
    logging.getLogger("locapp").setLevel(level)
    logging.getLogger("werkzeug").setLevel(logging.INFO)

    return log_path
