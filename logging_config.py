# logging_config.py
#
# Description:
# Structured logging with structlog. Output goes to a log file because the
# terminal belongs to the interactive session.
#

import logging

import structlog

from settings import LOG_FILE, LOG_LEVEL


def setup_logging(path: str = LOG_FILE, level: str = LOG_LEVEL):
    """
    Configures structlog to append key/value lines to a file.

    Args:
        path: The log file, created if missing.
        level: Minimum level name, e.g. "INFO" or "DEBUG".
    """
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=open(path, "a", encoding="utf-8")),
        cache_logger_on_first_use=False,
    )
