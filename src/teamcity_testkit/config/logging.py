"""Logging configuration using structlog."""

import logging

import structlog

from teamcity_testkit.config.settings import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog for the harness.

    Called from ``pytest_configure``. Stdlib handlers belong to pytest's
    logging plugin, so third-party loggers only get their levels set here.
    """
    settings = settings or get_settings()

    log_level = getattr(logging, settings.log_level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
            if settings.debug
            else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        # Uncached: every event goes to the sys.stdout pytest is capturing
        # at that moment, and capture_logs() keeps working
        cache_logger_on_first_use=False,
    )

    third_party_level = log_level if settings.log_level == "DEBUG" else logging.WARNING
    for name in ("httpx", "httpcore", "faker"):
        logging.getLogger(name).setLevel(third_party_level)

