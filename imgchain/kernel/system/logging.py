import logging
import os
import sys
import io
from typing import TextIO

ROOT_LOGGER = "imgchain"
LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _NullStream(io.TextIOBase):
    """
    Swallows writes. Stands in for sys.stdout/stderr when the interpreter
    runs without a console (pythonw, frozen apps).
    """

    def write(self, x: str) -> int:
        return len(x)

    def flush(self) -> None:
        pass


def init_streams() -> None:
    if sys.stdout is None:
        sys.stdout = _NullStream()
    if sys.stderr is None:
        sys.stderr = _NullStream()


def resolve_level(level: int | str | None) -> int:
    """
    Accepts a logging level number or name; None reads IMGCHAIN_LOG_LEVEL
    and falls back to INFO.
    """
    if level is None:
        level = os.getenv("IMGCHAIN_LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: int | str | None = None, stream: TextIO | None = None
) -> logging.Logger:
    """
    Configures the package root logger with a single console handler.
    Calling it again only updates the level.
    """
    init_streams()
    resolved = resolve_level(level)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(resolved)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(resolved)
        return logger

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Returns the package logger, or `imgchain.<name>` for a module.
    """
    if name:
        return logging.getLogger(f"{ROOT_LOGGER}.{name}")
    return logging.getLogger(ROOT_LOGGER)
