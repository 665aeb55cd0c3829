"""Logging setup for the ``webready`` logger tree.

Every logger under ``webready`` writes to stdout through one named handler
and does not propagate, so the host application's root logger (and its
third-party loggers) keep their own configuration.

Environment Variables:
    WEBREADY_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (falls back to LOG_LEVEL)
    WEBREADY_LOG_FORMAT: "structured" or "simple" (falls back to LOG_FORMAT)
"""

import os
import sys
import logging
from typing import Optional

PACKAGE_LOGGER = "webready"
HANDLER_NAME = "webready-stdout"

FORMATS = {
    "structured": (
        "%(asctime)s | %(name)s | %(levelname)-8s | "
        "%(filename)s:%(lineno)d | %(funcName)s() | %(message)s"
    ),
    "simple": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Set by the CLI's --debug flag; wins over the environment.
_level_override: Optional[int] = None


def _env(name: str, default: str) -> str:
    return os.getenv(f"WEBREADY_{name}") or os.getenv(name) or default


def resolve_level(level: Optional[str] = None) -> int:
    """Explicit level, else the --debug override, else the environment."""
    if level is None and _level_override is not None:
        return _level_override
    value = logging.getLevelName(str(level or _env("LOG_LEVEL", "INFO")).upper())
    return value if isinstance(value, int) else logging.INFO


def _own_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if handler.get_name() == HANDLER_NAME:
            return handler
    return None


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: Optional[str] = None,
    format_type: Optional[str] = None,
) -> logging.Logger:
    """
    Configure `name` with the package's stdout handler and level.

    Safe to call repeatedly: the handler is added once and its format and
    level are refreshed on every call.
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    handler = _own_handler(logger)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(HANDLER_NAME)
        logger.addHandler(handler)

    fmt = _env("LOG_FORMAT", format_type or "structured").lower()
    handler.setFormatter(
        logging.Formatter(FORMATS.get(fmt, FORMATS["structured"]), datefmt=DATE_FORMAT)
    )

    logger.propagate = False
    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    return setup_logger(name)


def set_debug_logging(enabled: bool) -> None:
    """
    Switch the whole ``webready`` tree to DEBUG, or back to the environment level.

    Only loggers in the package tree are touched.
    """
    global _level_override
    _level_override = logging.DEBUG if enabled else None

    level = resolve_level()
    for name, existing in list(logging.root.manager.loggerDict.items()):
        in_tree = name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + ".")
        if in_tree and isinstance(existing, logging.Logger):
            existing.setLevel(level)


def configure_multiprocessing_logging() -> None:
    """
    Give a process-pool worker its own ``webready.<process>`` logger.

    Call this at the start of worker functions.
    """
    import multiprocessing

    process_name = multiprocessing.current_process().name
    setup_logger(f"{PACKAGE_LOGGER}.{process_name}")


logger = setup_logger()
