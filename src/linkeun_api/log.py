"""Logging setup.

Configures the ``linkeun_api`` logger tree once at startup. Modules obtain
their own logger with ``logging.getLogger(__name__)`` and pass structured
fields through ``extra``; structlog renders every record as JSON or as a
console line.
"""

import gzip
import logging
import logging.handlers
import os
import shutil
import sys

import structlog

from linkeun_api.config import Settings

LOGGER_NAME = "linkeun_api"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _shared_processors() -> list:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def build_formatter(settings: Settings) -> structlog.stdlib.ProcessorFormatter:
    """Create the handler formatter for ``settings.log_format``.

    ``json`` emits one object per line with ``event``, ``level``, ``logger``,
    ``timestamp`` and any ``extra`` fields. Anything else uses the console
    renderer without colors so files stay readable.
    """
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def _gzip_namer(name: str) -> str:
    return name + ".gz"


def _gzip_rotator(source: str, dest: str) -> None:
    with open(source, "rb") as src, gzip.open(dest, "wb") as dst:
        shutil.copyfileobj(src, dst)
    os.remove(source)


def _file_handler(settings: Settings) -> logging.Handler:
    log_dir = os.path.dirname(settings.log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    handler: logging.handlers.BaseRotatingHandler
    if settings.log_rotation == "daily":
        handler = logging.handlers.TimedRotatingFileHandler(
            settings.log_file_path,
            when="midnight",
            backupCount=settings.log_file_max_age,
            encoding="utf-8",
        )
    else:
        handler = logging.handlers.RotatingFileHandler(
            settings.log_file_path,
            maxBytes=settings.log_file_max_size * 1024 * 1024,
            backupCount=settings.log_file_max_backups,
            encoding="utf-8",
        )

    if settings.log_file_compress:
        handler.namer = _gzip_namer
        handler.rotator = _gzip_rotator
    return handler


def setup_logging(settings: Settings) -> logging.Logger:
    """Configure handlers and level for the application logger.

    Args:
        settings: Application settings (level, format, outputs, rotation)

    Returns:
        The configured ``linkeun_api`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_LEVELS.get(settings.log_level.lower(), logging.INFO))
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = build_formatter(settings)

    handlers: list[logging.Handler] = []
    if settings.log_file_path:
        handlers.append(_file_handler(settings))
    if settings.log_output_path == "stderr":
        handlers.append(logging.StreamHandler(sys.stderr))
    elif settings.log_output_path == "stdout" or not handlers:
        handlers.append(logging.StreamHandler(sys.stdout))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
