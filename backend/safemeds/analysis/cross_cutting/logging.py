"""
Logging Configuration

Every module logs under the ``safemeds`` tree, so a single call here
configures the API, the CLI and the pipeline alike.
"""

import logging
import sys
from typing import Optional, Union, TextIO, List

from ..config.settings import LoggingConfig


ROOT_LOGGER_NAME = "safemeds"

# HTTP client libraries log every request at INFO/DEBUG
NOISY_LOGGERS = ("urllib3", "httpx", "httpcore", "openai")


def parse_level(level: Union[int, str, None], default: int = logging.INFO) -> int:
    """Resolve a level given as a number or a name such as "debug"."""
    if isinstance(level, int):
        return level
    if not level:
        return default

    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else default


def _build_handlers(
    config: LoggingConfig,
    stream: Optional[TextIO]
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))

    formatter = logging.Formatter(config.format)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(
    config: Optional[LoggingConfig] = None,
    level: Union[int, str, None] = None,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Attach console (and optional file) handlers to the ``safemeds`` logger.

    Calling it again replaces the previous handlers. The package logger
    does not propagate, so records are not duplicated when a server
    (uvicorn) has configured the root logger too.

    Args:
        config: Level, file and format; defaults to ``LoggingConfig()``
        level: Overrides ``config.level``
        stream: Console stream (default: stdout)

    Returns:
        The configured package logger
    """
    config = config or LoggingConfig()
    resolved = parse_level(level if level is not None else config.level)

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(resolved)
    package_logger.propagate = False

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    for handler in _build_handlers(config, stream):
        package_logger.addHandler(handler)

    if resolved > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return package_logger
