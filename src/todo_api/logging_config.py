"""
Logging configuration for the todo API.

Modules obtain loggers with ``get_logger(__name__)``; ``setup_logging`` is called
once when the application starts. Storage adapters attach ``operation``,
``table`` and ``todo_id`` through ``extra=``; the formatter appends them to the
line so backend failures can be traced to a row.
"""

import logging
import sys

STORAGE_FIELDS = ("operation", "table", "todo_id")


class StorageContextFormatter(logging.Formatter):
    """Formatter that appends storage context fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = [
            f"{name}={getattr(record, name)}"
            for name in STORAGE_FIELDS
            if getattr(record, name, None) is not None
        ]
        if context:
            line = f"{line} [{' '.join(context)}]"
        return line


def setup_logging(
    log_level: str = "INFO",
    service_name: str = "todo-api",
) -> None:
    """
    Configure root logging for the application.

    Args:
        log_level: Logging level name; unknown names fall back to INFO
        service_name: Name included in every log line
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        StorageContextFormatter(
            fmt=f"%(asctime)s - {service_name} - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        handlers=[handler],
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
