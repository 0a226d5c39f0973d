"""
Logging setup: JSON lines in production, readable text while debugging,
and one rotating file under ``settings.log_dir``.
"""
import json
import logging
import logging.config
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path

from ..config import Settings, get_settings

# modules log through logging.getLogger(__name__), which lives under the src package
PACKAGE_LOGGERS = ("notevault", "src.notevault")

REQUEST_ID_HEADER = b"x-request-id"

_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` fields are kept under ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}
        if extra:
            entry['extra'] = extra
        return json.dumps(entry, ensure_ascii=False, default=str)


def build_logging_config(settings: Settings) -> dict:
    """dictConfig for the given settings."""
    level = settings.log_level.upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"

    package_logger = {'handlers': ['console', 'file'], 'level': level, 'propagate': False}

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'json': {'()': JSONFormatter},
            'text': {
                'format': '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'text' if settings.debug else 'json',
                'stream': sys.stdout,
            },
            'file': {
                'class': 'logging.handlers.RotatingFileHandler',
                'filename': str(Path(settings.log_dir) / 'notevault.log'),
                'maxBytes': 10_000_000,
                'backupCount': 5,
                'formatter': 'json',
            },
        },
        'loggers': {
            **{name: dict(package_logger) for name in PACKAGE_LOGGERS},
            'uvicorn.access': {'handlers': ['console'], 'level': 'WARNING', 'propagate': False},
            'sqlalchemy.engine': {'level': 'INFO' if settings.database_echo else 'WARNING'},
        },
        'root': {'handlers': ['console'], 'level': 'WARNING'},
    }


def setup_logging(settings: Settings = None) -> None:
    settings = settings or get_settings()
    Path(settings.log_dir).mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(build_logging_config(settings))


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``notevault`` namespace."""
    return logging.getLogger(f"notevault.{name}")


class LoggingMiddleware:
    """Logs one line per HTTP request and echoes its id in ``X-Request-ID``."""

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        incoming = dict(scope.get("headers") or []).get(REQUEST_ID_HEADER)
        request_id = incoming.decode("latin-1") if incoming else uuid.uuid4().hex[:12]
        status_code = 500

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = list(message.get("headers", []))
                headers.append((REQUEST_ID_HEADER, request_id.encode("latin-1")))
                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            self.logger.info(f"{scope['method']} {scope['path']} {status_code}", extra={
                'request_id': request_id,
                'status_code': status_code,
                'duration_ms': round((time.perf_counter() - started) * 1000, 2),
            })
