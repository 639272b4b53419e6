"""Logging configuration for weightlog."""

import logging
import logging.config
import sys
import time
from typing import Optional

import ujson

from .config import STAND, env

loggers = {
    "httpx": {
        "level": "WARNING",
    },
    "httpcore": {
        "level": "WARNING",
    },
    "aiosqlite": {
        "level": "WARNING",
    },
}


class JSONFormatter(logging.Formatter):
    default_time_format = "%Y-%m-%d %H:%M:%S{ms} %z"
    msec_format = ",%03d"

    def __init__(self, *args, jsondumps_kwargs: Optional[dict] = None, **kwargs):
        """JSON format implementation of logging formatter."""
        super().__init__(*args, **kwargs)
        self._jsondumps_kwargs = jsondumps_kwargs.copy() if jsondumps_kwargs else {}

    def formatTime(self, record, *args) -> str:  # noqa: N802
        """Format TZ-time with milliseconds as this: 2024-01-15 11:26:07,080 +0300."""
        ct = self.converter(record.created)  # type: ignore
        formatted_ms = self.msec_format % record.msecs
        time_format_with_msec = self.default_time_format.format(ms=formatted_ms)
        return time.strftime(time_format_with_msec, ct)

    def format(self, record: logging.LogRecord) -> str:
        r"""Serialize a log record to JSON.

        {"time": "2024-01-15 13:26:51,910 +0000", "name": "weightlog.services.sync",
         "lvl": "INFO", "msg": "Synced entries", "place": "sync.process_sync_queue:180"}
        """
        record_representation = {
            "time": self.formatTime(record),
            "name": record.name,
            "lvl": record.levelname,
            "msg": record.getMessage(),
            "place": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        if record.exc_info:
            record_representation["exc_info"] = self.formatException(record.exc_info)

        return ujson.dumps(record_representation, **self._jsondumps_kwargs)


def create_logger_config(log_level: str, stand: str, loggers: dict):
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "loggers": {
            **loggers,
            "": {
                "level": log_level,
                "handlers": ["console"],
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "generic" if stand == "local" else "json",
                "stream": sys.stderr,
            },
        },
        "formatters": {
            "generic": {
                "format": "%(asctime)s (%(name)s)[%(levelname)s] %(message)s",
                "datefmt": "[%Y-%m-%d %H:%M:%S %z]",
                "class": "logging.Formatter",
            },
            "json": {
                "()": JSONFormatter,
                "jsondumps_kwargs": {
                    "ensure_ascii": False,
                },
            },
        },
    }


class LogsConfig:
    LOG_LEVEL = env.str("LOG_LEVEL", default="INFO")
    LOGGING = create_logger_config(log_level=LOG_LEVEL, loggers=loggers, stand=STAND)


def configure_logging(log_level: str | None = None) -> None:
    """Apply the logging dictConfig, optionally overriding the level."""
    if log_level is None:
        config = LogsConfig.LOGGING
    else:
        config = create_logger_config(log_level=log_level.upper(), loggers=loggers, stand=STAND)
    logging.config.dictConfig(config)
