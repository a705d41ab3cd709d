"""Structured logging setup shared by the API server and the CLI."""

import logging
import os
import sys
from typing import IO, Optional

import structlog


def configure_logging(stream: Optional[IO[str]] = None) -> None:
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_name, logging.INFO)
    json_logs = os.getenv("LOG_JSON", "false").lower() == "true"
    service_name = os.getenv("SERVICE_NAME", "stats-simulator")
    stream = stream or sys.stdout

    logging.basicConfig(level=log_level, stream=stream)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )

    # Bind common fields
    structlog.contextvars.bind_contextvars(service=service_name)


def configure_logging_once() -> None:
    """Configure logging unless an entrypoint (e.g. the CLI) already did."""
    if not structlog.is_configured():
        configure_logging()
