import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from cinegraph.core.config import settings


class ServiceContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.service = getattr(record, "service", None) or settings.APP_NAME
        record.env = getattr(record, "env", None) or settings.APP_ENV
        return True


def setup_json_logging(level: str | None = None) -> None:
    """Install a single JSON stdout handler on the root logger."""
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())

    fmt = JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(service)s %(env)s"
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(fmt)
    handler.addFilter(ServiceContextFilter())
    root.handlers = [handler]

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True

    # SQL echo goes through the same handler instead of SQLAlchemy's own
    if settings.SQL_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    logging.getLogger(__name__).info("logger_initialized")
