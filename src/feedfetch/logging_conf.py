"""Logging configuration built around structlog."""

from __future__ import annotations

import logging
import logging.config

import structlog

_LOGGING_INITIALISED = False


def configure_logging(verbose: bool = False, json: bool = False) -> structlog.BoundLogger:
    """Route structlog through stdlib logging to stderr and return the app logger."""

    global _LOGGING_INITIALISED
    if not _LOGGING_INITIALISED:
        level = "DEBUG" if verbose else "WARNING"
        renderer = (
            structlog.processors.JSONRenderer()
            if json
            else structlog.dev.ConsoleRenderer(colors=False)
        )
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "structlog": {
                        "()": structlog.stdlib.ProcessorFormatter,
                        "processor": renderer,
                        "foreign_pre_chain": [
                            structlog.stdlib.add_log_level,
                            structlog.processors.TimeStamper(fmt="iso"),
                        ],
                    }
                },
                "handlers": {
                    "console": {
                        "class": "logging.StreamHandler",
                        "level": level,
                        "formatter": "structlog",
                    },
                },
                "loggers": {
                    "feedfetch": {
                        "handlers": ["console"],
                        "level": level,
                        "propagate": False,
                    },
                },
            }
        )

        # Configure structlog to forward events to stdlib logging
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.filter_by_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        _LOGGING_INITIALISED = True
    return structlog.get_logger("feedfetch")


__all__ = ["configure_logging"]
