import json
import logging
from datetime import datetime, timezone

from inventory_tracker.config import get_settings

NO_USER = "-"


class UserContextFilter(logging.Filter):
    """Give every record a ``user_id`` so formatters can rely on it.

    Gateway and service loggers pass ``extra={"user_id": ...}``; records from
    third-party loggers get ``NO_USER``.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "user_id", None):
            record.user_id = NO_USER
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "user_id": getattr(record, "user_id", NO_USER),
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging() -> None:
    settings = get_settings()
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.addFilter(UserContextFilter())
    if settings.LOG_JSON:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s [%(user_id)s] - %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
