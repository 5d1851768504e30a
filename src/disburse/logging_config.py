import logging
import logging.config
import os
import sys

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("DISBURSE_LOG_FILE", "/tmp/disburse.log")

# Libraries that log every request at INFO
QUIET_LOGGERS = ("xrpl", "httpx", "httpcore")


def logging_config(level: str = LOG_LEVEL, log_file: str | None = LOG_FILE) -> dict:
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": sys.stdout,
        },
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "default",
            "filename": log_file,
            "mode": "a",
        }
    names = list(handlers)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)-6s %(name)8s:%(lineno)d %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "loggers": {
            "disburse": {
                "level": level,
                "handlers": names,
                "propagate": False, # Keep run logs out of the root logger
            },
            **{name: {"level": "WARNING", "handlers": names, "propagate": False} for name in QUIET_LOGGERS},
        },
        "root": {
            "level": "WARNING",
            "handlers": names,
        },
    }


def setup_logging(level: str | None = None, log_file: str | None = LOG_FILE):
    """ Apply the logging configuration. An empty log_file logs to the console only. """
    logging.config.dictConfig(logging_config((level or LOG_LEVEL).upper(), log_file or None))
    os.environ.setdefault("PYTHONUNBUFFERED", "1")
