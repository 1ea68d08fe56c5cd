# app/core/middleware/logging.py

import datetime
import json
import logging
import sys
import time
from typing import Optional
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings
from app.core.security.hashing import hash_ip


ENV = settings.APP_ENV
LOG_RETENTION_DAYS = settings.LOG_RETENTION_DAYS
LOG_DIR = Path(__file__).parent.parent.parent / "logs"

# Files trimmed by cleanup_old_logs; activity_log.log keeps its full history
RETAINED_LOG_PATTERNS = ("*requests.log*", "*moderation.log*")

# ---------------------------
# Loggers
# ---------------------------
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

# Requests and service events
logger = logging.getLogger("bazaar")
# Warnings, bans and ban cascades
moderation_logger = logging.getLogger("bazaar.moderation")
# Log retention runs
cleanup_logger = logging.getLogger("activity_log")

for _logger, _level in ((logger, logging.DEBUG), (moderation_logger, logging.INFO), (cleanup_logger, logging.INFO)):
    _logger.setLevel(_level)
    _logger.propagate = False
    _logger.handlers.clear()


# ---------------------------
# JSON formatters
# ---------------------------
class JsonFormatter(logging.Formatter):
    FIELDS = ("method", "path", "status_code", "completed_in_ms", "ip_anonymized", "user_id", "event")

    def format(self, record: logging.LogRecord):
        log_entry = {
            "datetime": self.formatTime(record),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        log_entry.update({field: getattr(record, field, None) for field in self.FIELDS})
        return json.dumps(log_entry, default=str)


class CleanupJsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord):
        log_entry = {
            "datetime": self.formatTime(record),
            "event": getattr(record, "event", "log_cleanup"),
            "message": record.getMessage(),
        }
        return json.dumps(log_entry)


# ---------------------------
# Handlers: stdout outside development, rotating files outside production
# ---------------------------
def _rotating_file(name: str, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(LOG_DIR / name, maxBytes=5_000_000, backupCount=3)
    handler.setFormatter(formatter)
    return handler


if ENV != "development":
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(JsonFormatter())
    logger.addHandler(console_handler)
    moderation_logger.addHandler(console_handler)

if ENV != "production":
    LOG_DIR.mkdir(exist_ok=True)
    logger.addHandler(_rotating_file("requests.log", JsonFormatter()))
    moderation_logger.addHandler(_rotating_file("moderation.log", JsonFormatter()))
    cleanup_logger.addHandler(_rotating_file("activity_log.log", CleanupJsonFormatter()))


# ---------------------------
# Request logging middleware
# ---------------------------
STATUS_MESSAGES = {
    200: "Request successful",
    201: "Resource created",
    401: "Request unauthorized",
    403: "Request forbidden",
    429: "Request rate-limited",
}


def get_request_log_message(status_code: int) -> str:
    """Return a descriptive log message for an HTTP status code."""
    if status_code in STATUS_MESSAGES:
        return STATUS_MESSAGES[status_code]
    if status_code >= 500:
        return "Request returned server error"
    if status_code >= 400:
        return "Request returned client error"
    return "Request processed"


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        masked_ip = hash_ip(request.client.host if request.client else "unknown")
        start_time = time.time()

        def request_extra(status_code: int) -> dict:
            return {
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "completed_in_ms": (time.time() - start_time) * 1000,
                "ip_anonymized": masked_ip,
                # Set by get_current_user on authenticated routes
                "user_id": getattr(request.state, "user_id", None),
            }

        try:
            response = await call_next(request)
        except Exception as exc:
            from slowapi.errors import RateLimitExceeded

            if isinstance(exc, RateLimitExceeded):
                logger.warning(msg=STATUS_MESSAGES[429], extra=request_extra(429))
            # Re-raise for FastAPI exception handlers
            raise

        logger.info(
            msg=get_request_log_message(response.status_code),
            extra=request_extra(response.status_code),
        )
        return response


def log_moderation_event(event: str, user_id, message: str, level: int = logging.INFO):
    """Write one entry to the moderation audit trail."""
    moderation_logger.log(level, message, extra={"event": event, "user_id": str(user_id)})


# ---------------------------
# Log retention
# ---------------------------
def log_logs_cleanup(message: Optional[str] = None):
    cleanup_logger.info(
        message or "Log cleanup executed", extra={"event": "log_cleanup"}
    )


def _entry_timestamp(line: str) -> Optional[float]:
    try:
        return datetime.datetime.strptime(
            json.loads(line)["datetime"], "%Y-%m-%d %H:%M:%S,%f"
        ).timestamp()
    except (json.JSONDecodeError, KeyError, ValueError, TypeError):
        return None


def _trim_log_file(log_file: Path, cutoff_time: float) -> int:
    """Drop entries before the first one newer than the cutoff; returns how many were dropped."""
    with open(log_file, "r") as f:
        lines = f.readlines()

    first_valid_index = 0
    for i, line in enumerate(lines):
        timestamp = _entry_timestamp(line)
        if timestamp is not None and timestamp >= cutoff_time:
            first_valid_index = i
            break

    if first_valid_index > 0:
        with open(log_file, "w") as f:
            f.writelines(lines[first_valid_index:])
    return first_valid_index


def cleanup_old_logs(log_dir: Optional[Path] = None, retention_days: Optional[int] = None):
    """Delete request and moderation log entries older than the retention window."""
    if ENV == "production":
        return

    log_dir = log_dir or LOG_DIR
    if not log_dir.exists():
        return

    retention_days = retention_days or LOG_RETENTION_DAYS or 7
    cutoff_time = time.time() - (retention_days * 86400)

    for pattern in RETAINED_LOG_PATTERNS:
        for log_file in log_dir.glob(pattern):
            if not log_file.is_file():
                continue
            try:
                dropped = _trim_log_file(log_file, cutoff_time)
            except OSError as e:
                cleanup_logger.error(f"Error during log cleanup for {log_file.name}: {e}")
                continue
            if dropped:
                log_logs_cleanup(f"Deleted {dropped} old log entries from {log_file.name}")
