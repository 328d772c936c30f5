import atexit
import copy
import datetime as dt
import json
import logging
import logging.config
from pathlib import Path
from typing import override

DEFAULT_LOG_DIR = Path("data") / "logs"

JSON_EXTRA_KEYS = ("info_hash", "torrent_path", "error_kind")


class JSONLogFormatter(logging.Formatter):
    """
    One JSON object per line.

    `fmt_keys` maps output keys to LogRecord attributes. `extra_keys` names the
    fields callers attach with `extra={...}`; they are written when present.
    """

    def __init__(
        self,
        *,
        fmt_keys: dict[str, str] | None = None,
        extra_keys: tuple[str, ...] = JSON_EXTRA_KEYS,
    ):
        super().__init__()
        self.fmt_keys = fmt_keys if fmt_keys is not None else {}
        self.extra_keys = extra_keys

    @override
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": dt.datetime.fromtimestamp(
                record.created, tz=dt.timezone.utc
            ).isoformat(),
            "message": record.getMessage(),
        }
        for key, attr in self.fmt_keys.items():
            entry.setdefault(key, getattr(record, attr))

        for key in self.extra_keys:
            if hasattr(record, key):
                entry[key] = getattr(record, key)

        if record.exc_info is not None:
            entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "[%(levelname)s|%(module)s|L%(lineno)d] %(asctime)s: %(message)s",
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
        "json": {
            "()": JSONLogFormatter,
            "fmt_keys": {
                "level": "levelname",
                "logger": "name",
                "line": "lineno",
            },
        },
    },
    "handlers": {
        "stderr": {
            "class": "logging.StreamHandler",
            "level": "WARNING",
            "formatter": "simple",
            "stream": "ext://sys.stderr",
        },
        "file_json": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "json",
            "filename": "default",
            "maxBytes": 5000000,
            "backupCount": 5,
        },
        "queue_handler": {
            "class": "logging.handlers.QueueHandler",
            "handlers": ["stderr", "file_json"],
            "respect_handler_level": True,
        },
    },
    "loggers": {"root": {"level": "DEBUG", "handlers": ["queue_handler"]}},
}


def config_logging(
    file_name: str, log_dir: Path = DEFAULT_LOG_DIR, verbose: bool = False
) -> Path:
    """Configure the root logger and start the queue listener. Returns the log file path."""
    log_path = Path(log_dir) / file_name
    log_path.parent.mkdir(parents=True, exist_ok=True)

    d_config = copy.deepcopy(LOGGING_CONFIG)
    d_config["handlers"]["file_json"]["filename"] = str(log_path)
    if verbose:
        d_config["handlers"]["stderr"]["level"] = "DEBUG"

    logging.config.dictConfig(d_config)
    queue_handler = logging.getHandlerByName("queue_handler")
    if queue_handler is not None:
        queue_handler.listener.start()
        atexit.register(queue_handler.listener.stop)

    return log_path


def stop_logging():
    """Flush and stop the queue listener started by config_logging."""
    queue_handler = logging.getHandlerByName("queue_handler")
    if queue_handler is not None and queue_handler.listener is not None:
        atexit.unregister(queue_handler.listener.stop)
        queue_handler.listener.stop()
