"""Log file setup for the dbdiff command line."""

import logging
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(level_code)s] %(message)s"
LEVEL_CODES = {
    "DEBUG": "DBG",
    "INFO": "INF",
    "WARNING": "WRN",
    "ERROR": "ERR",
    "CRITICAL": "FTL",
}
RETAINED_LOG_FILES = 7


class LogFormatter(logging.Formatter):
    """Writes ``2024-01-15 10:30:00.123 +0100 [WRN] message`` lines"""

    def format(self, record: logging.LogRecord) -> str:
        record.level_code = LEVEL_CODES.get(record.levelname, record.levelname[:3].upper())
        return super().format(record)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        created = datetime.fromtimestamp(record.created).astimezone()
        return f"{created:%Y-%m-%d %H:%M:%S}.{int(record.msecs):03d} {created:%z}"


def configure_logging(log_path: Path, level: str | int = logging.INFO) -> logging.Handler:
    """Send ``dbdiff`` logs to a file that rotates daily.

    Args:
        log_path: Log file path that has already passed ``validate_log_path``
        level: Minimum level, as a name (``"INFO"``) or number

    Returns:
        The installed handler, so callers can remove and close it
    """
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = TimedRotatingFileHandler(
        log_path,
        when="midnight",
        backupCount=RETAINED_LOG_FILES,
        encoding="utf-8",
    )
    handler.setFormatter(LogFormatter(LOG_FORMAT))

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO

    package_logger = logging.getLogger("dbdiff")
    package_logger.setLevel(level)
    package_logger.addHandler(handler)
    return handler
