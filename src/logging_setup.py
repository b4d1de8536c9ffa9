"""
Logging configuration for Family Hub.

Call setup_logging() once at startup, before the first log line.
"""

import logging
import sys

_APP_PREFIX = "src."


class _ThirdPartyNoiseFilter(logging.Filter):
    """
    Keep application logs, quiet everything else:
    - src.* loggers pass at the configured level
    - uvicorn access/error logs pass at INFO+
    - other libraries (SQLAlchemy, httpx, ...) only at WARNING+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith(_APP_PREFIX) or name == "__main__":
            return True

        if name.startswith("uvicorn"):
            return record.levelno >= logging.INFO

        return record.levelno >= logging.WARNING


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger with a single stderr handler.

    Args:
        level: Level name for application loggers (DEBUG, INFO, ...)
    """
    root = logging.getLogger()
    root.setLevel(level)

    # Remove pre-existing handlers to avoid duplicates on reload
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(handler)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
