"""
Structured logging for the geo_distance package.

Events are emitted through structlog on stdlib loggers named after the
emitting module (geo_distance.query.builder, geo_distance.behavior, ...).
configure_logging attaches a handler to the package's own 'geo_distance'
logger only; the root logger and any handlers an application installed
there are left alone.
"""
import sys
import logging
import structlog
from pathlib import Path
from typing import IO, Optional

PACKAGE_LOGGER = "geo_distance"

# Marks handlers installed by configure_logging so a second call replaces them
_HANDLER_FLAG = "_geo_distance_handler"

_SHARED_PROCESSORS = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
]


def _formatter(json_output: bool) -> structlog.stdlib.ProcessorFormatter:
    if json_output:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=False)]
    return structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta] + renderers,
        foreign_pre_chain=_SHARED_PROCESSORS,
    )


def configure_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    json_output: bool = False,
    stream: Optional[IO[str]] = None,
    propagate: bool = False,
) -> logging.Logger:
    """
    Route geo_distance events to a stream and optionally a file.

    Calling it again replaces the handlers from the previous call.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for log output
        json_output: If True, output JSON logs; else human-readable console
        stream: Stream for console output (default: stderr)
        propagate: Also pass records on to the application's root handlers

    Returns:
        The configured 'geo_distance' stdlib logger

    Example:
        >>> from geo_distance.utils.logging_config import configure_logging
        >>> configure_logging(log_level="DEBUG", json_output=True)
        >>> geo.build({"latitude": 52.48, "longitude": -1.9, "radius": 0.9})  # logs distance_filter_built
    """
    level = getattr(logging, log_level.upper())

    structlog.configure(
        processors=_SHARED_PROCESSORS + [
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module-level loggers are created at import time, before configuration
        cache_logger_on_first_use=False,
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            package_logger.removeHandler(handler)
            handler.close()

    formatter = _formatter(json_output)
    handlers = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_FLAG, True)
        package_logger.addHandler(handler)

    package_logger.setLevel(level)
    package_logger.propagate = propagate
    return package_logger


def get_logger(name: str):
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Structured logger with bound context

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("geo_distance_attached", table="foo", dialect="mysql")
    """
    return structlog.get_logger(name)
