import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else came in through extra={...}
_STANDARD_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
    "created", "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "taskName", "message", "asctime",
}


class JsonFormatter(logging.Formatter):
    """
    Formats log records as one JSON object per line.

    Keys: timestamp, level, logger, module, message, plus exc_info when an
    exception is attached and extra for fields passed via extra={...}.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_record: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS
        }
        if extra_fields:
            log_record["extra"] = extra_fields

        return json.dumps(log_record, ensure_ascii=False, default=str)


# PUBLIC_INTERFACE
def configure_logging(
    level: str = "INFO",
    log_dir: Optional[str] = None,
    log_file_name: str = "journal.log",
) -> None:
    """
    Configure the root logger with JSON output.

    A console handler is always installed; a rotating file handler is added
    when log_dir is given. Calling this again replaces the handlers it
    installed before instead of stacking duplicates.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = JsonFormatter()

    handlers = []
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    log_path = None
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, log_file_name)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "_journal_handler", False):
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        handler.setLevel(log_level)
        handler._journal_handler = True  # type: ignore[attr-defined]
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    logging.getLogger(__name__).info(
        "JSON logging configured",
        extra={"component": "logging", "log_path": log_path, "level": level},
    )
