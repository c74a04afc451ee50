from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

_LOGGER_NAME = "repo_dump"
_STRUCTLOG_CONFIGURED = False


def setup_logging(filename: str | Path | None = None) -> structlog.BoundLogger:
    """Set up structured logging for the repo_dump module.

    Diagnostics never share standard output with rendered results: they go to
    stderr, or to ``filename`` when one is given. Calling this again with a
    file name swaps the handler, so ``--log-file`` can be honoured after the
    module-level logger already exists. Records do not propagate to the root
    logger, so a host application's handlers do not print them a second time.

    Args:
        filename: Optional path to a log file. If None, logs are written to stderr.

    Returns:
        A structlog logger instance configured for the repo_dump module.
    """
    global _STRUCTLOG_CONFIGURED  # noqa: PLW0603
    std_logger = logging.getLogger(_LOGGER_NAME)
    if filename or not std_logger.handlers:
        handler: logging.Handler
        if filename:
            handler = logging.FileHandler(str(filename), encoding="utf-8")
        else:
            handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        for old in list(std_logger.handlers):
            std_logger.removeHandler(old)
            old.close()
        std_logger.addHandler(handler)
        std_logger.setLevel(logging.INFO)
        std_logger.propagate = False

    if not _STRUCTLOG_CONFIGURED:
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _STRUCTLOG_CONFIGURED = True

    return structlog.get_logger(_LOGGER_NAME)


logger = setup_logging()
