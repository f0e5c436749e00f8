import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path
from contextvars import ContextVar
from friendchat.config.settings import Config

DEFAULT_CORRELATION_ID = "NO Correlation ID"

# Context variable to store correlation ID across async task boundaries
correlation_id_var: ContextVar[str] = ContextVar(
    "correlation_id", default=DEFAULT_CORRELATION_ID
)

_HANDLER_MARKER = "_friendchat_handler"


class CorrelationIdFilter(logging.Filter):
    """Logging filter to add correlation ID to log records."""

    def filter(self, record):
        record.correlation_id = correlation_id_var.get()
        return True


class SafeFormatter(logging.Formatter):
    """Formatter that ensures correlation_id always exists."""

    def format(self, record):
        if not hasattr(record, "correlation_id"):
            record.correlation_id = DEFAULT_CORRELATION_ID
        return super().format(record)


def setup_logging(level: str = "INFO", log_file: str | None = None):
    root = logging.getLogger()
    root.setLevel(logging.WARNING)  # Set root to WARNING to avoid too much noise

    # Calling twice (app factory in tests) must not duplicate handlers
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root.removeHandler(handler)

    formatter = SafeFormatter(Config.LOG_FORMAT)
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    stream_handler.addFilter(CorrelationIdFilter())
    setattr(stream_handler, _HANDLER_MARKER, True)
    root.addHandler(stream_handler)

    # Set up file logging if log_file provided with rotation
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(CorrelationIdFilter())
        setattr(file_handler, _HANDLER_MARKER, True)
        root.addHandler(file_handler)

    # Only our own package logs at the configured level
    logging.getLogger("friendchat").setLevel(
        getattr(logging, level.upper(), logging.INFO)
    )
    logging.getLogger("friendchat").info(
        f"Logging is set up: level={level}, log_file={log_file}"
    )

    return root
