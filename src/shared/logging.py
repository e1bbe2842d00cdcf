"""Logging for the bakery processes.

structlog owns formatting end to end: our own events and the stdlib
records emitted by Protean, uvicorn and httpx pass through one shared
processor chain and one renderer, so a log line looks the same whoever
wrote it. Production and staging render JSON; everything else renders
for a human at a terminal.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

JSON_ENVIRONMENTS = {"production", "staging"}

QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")

LOG_FILE = "bakery.log"
ERROR_LOG_FILE = "bakery_error.log"
MAX_LOG_BYTES = 10 * 1024 * 1024

# Applied to structlog events and to foreign stdlib records alike
SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]


def environment() -> str:
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENVIRONMENT") or "development").lower()


def log_level(env: str | None = None) -> str:
    """LOG_LEVEL wins; otherwise the level follows the environment."""
    env = env or environment()
    return os.getenv("LOG_LEVEL", LEVELS.get(env, "INFO")).upper()


def renderer_processors(env: str) -> list:
    if env in JSON_ENVIRONMENTS:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=4),
        )
    ]


def _formatter(env: str) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=SHARED_PROCESSORS,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderer_processors(env)],
    )


def _rotating(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=5, encoding="utf-8")
    handler.setLevel(level)
    return handler


def build_handlers(env: str, level: str, log_dir: str | None = None) -> list[logging.Handler]:
    """Console always; rotating files (all records plus errors only) when log_dir is given."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    handlers[0].setLevel(level)

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating(directory / LOG_FILE, level))
        handlers.append(_rotating(directory / ERROR_LOG_FILE, logging.ERROR))

    formatter = _formatter(env)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(log_dir: str | None = None) -> None:
    """Wire stdlib logging and structlog for this process.

    Call once at startup. ``log_dir`` defaults to LOG_DIR; without either,
    records go to stdout only.
    """
    env = environment()
    level = log_level(env)

    root = logging.getLogger()
    root.handlers = build_handlers(env, level, log_dir or os.getenv("LOG_DIR"))
    root.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *SHARED_PROCESSORS,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
