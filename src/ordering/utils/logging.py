"""Logging setup for the order service.

One ``configure_logging()`` call at startup covers both contexts: stdlib
handlers (stdout plus rotating files) and the structlog processor chain.
Settings come from the environment:

    LOG_LEVEL      explicit level; otherwise derived from the environment name
    ENV / ENVIRONMENT / PROTEAN_ENV
                   production and staging render JSON, anything else the
                   coloured console renderer with rich tracebacks
    LOG_DIR        directory for ``ordering.log`` and ``ordering_error.log``
                   (default ``logs``); an empty value disables file output
"""

import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

_LEVEL_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
_JSON_ENVS = {"production", "staging"}
_NOISY_LOGGERS = ("protean", "asyncio", "uvicorn.access")

_MAX_LOG_BYTES = 10 * 1024 * 1024
_LOG_BACKUPS = 5


def _environment() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    json_output: bool
    log_dir: Path | None

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        env = _environment()
        log_dir = os.getenv("LOG_DIR", "logs")
        return cls(
            level=os.getenv("LOG_LEVEL", _LEVEL_BY_ENV.get(env, "INFO")).upper(),
            json_output=env in _JSON_ENVS,
            log_dir=Path(log_dir) if log_dir else None,
        )


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def _stdlib_handlers(settings: LoggingSettings) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(settings.level)
    handlers = [console]

    if settings.log_dir is not None:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating_handler(settings.log_dir / "ordering.log", settings.level))
        handlers.append(_rotating_handler(settings.log_dir / "ordering_error.log", logging.ERROR))
    return handlers


def setup_stdlib_logging(settings: LoggingSettings) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.level)
    root_logger.handlers = _stdlib_handlers(settings)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _processors(settings: LoggingSettings) -> list:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ),
    ]

    if settings.json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
            )
        )
    return processors


def setup_structlog(settings: LoggingSettings) -> None:
    structlog.configure(
        processors=_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(settings: LoggingSettings | None = None) -> LoggingSettings:
    """Configure stdlib and structlog logging; returns the settings applied."""
    settings = settings or LoggingSettings.from_env()
    setup_stdlib_logging(settings)
    setup_structlog(settings)
    get_logger(__name__).debug("Logging configured", level=settings.level, json_output=settings.json_output)
    return settings


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind values to every log line emitted until ``clear_context()``."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
