"""
Root logger setup: console always, a rotating file when LOG_FILE is set.
"""

import json
import logging
import logging.handlers
import sys

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record):
        entry = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", structured: bool = True, log_file: str | None = None) -> None:
    formatter = JSONFormatter() if structured else logging.Formatter(PLAIN_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(
            logging.handlers.RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        )
    for handler in handlers:
        handler.setFormatter(formatter)

    # force=True replaces handlers left by uvicorn or an earlier call
    logging.basicConfig(level=level.upper(), handlers=handlers, force=True)
