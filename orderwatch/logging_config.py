"""Console and JSON file logging for the service."""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from pythonjsonlogger import jsonlogger

from orderwatch.config import settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"

# Third-party loggers that log every request or job run
QUIET_LOGGERS = ("httpx", "apscheduler")


class OrderWatchJsonFormatter(jsonlogger.JsonFormatter):
    """JSON records carrying a UTC timestamp and the emitting location."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["source"] = f"{record.filename}:{record.lineno}"
        if record.funcName:
            log_record["function"] = record.funcName


def _file_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.FileHandler(path)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(base_dir: str | Path | None = None) -> logging.Logger:
    """
    Route logs to stdout and to logs/app.log and logs/error.log as JSON.

    Args:
        base_dir: Directory holding logs/; defaults to settings.log_dir,
                  then the working directory
    """
    base_dir = base_dir or settings.log_dir or Path.cwd()
    logs_dir = Path(base_dir) / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level.upper())
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    json_formatter = OrderWatchJsonFormatter(JSON_FORMAT)
    root_logger.addHandler(_file_handler(logs_dir / "app.log", logging.DEBUG, json_formatter))
    root_logger.addHandler(_file_handler(logs_dir / "error.log", logging.ERROR, json_formatter))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
