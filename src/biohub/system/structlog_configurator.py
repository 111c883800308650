"""Structlog-based logging configuration for Biodiversity Hub.

Processors add context variables, static service fields, the log level and an
ISO timestamp, then render either JSON (containers, production) or coloured
console output (development). Records go through the stdlib root logger so
third-party libraries share the same handlers.
"""

import logging
import os
import sys
from collections.abc import Callable
from typing import Any

import structlog

from biohub.config.models import BiohubConfig
from biohub.system.log_filters import MessageSuppressionFilter


def is_docker_environment() -> bool:
    """Check if running in a Docker container."""
    return os.path.exists("/.dockerenv") or os.environ.get("DOCKER_CONTAINER") == "true"


def is_development_environment() -> bool:
    """Check whether the developer opted into development logging."""
    return os.environ.get("BIOHUB_ENV", "production") == "development"


def get_deployment_environment() -> str:
    """Get deployment environment with 'unknown' fallback."""
    if is_docker_environment():
        return "docker"
    elif is_development_environment():
        return "development"
    else:
        return "unknown"


def _add_static_context(extra_fields: dict[str, str]) -> Callable:
    """Processor to add static context fields to all log entries."""

    def processor(
        logger: structlog.BoundLogger, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict.update(extra_fields)
        return event_dict

    return processor


def _use_json(config: BiohubConfig) -> bool:
    use_json = config.logging.json_logs
    if use_json is None:
        # Auto-detect: JSON unless running in development
        use_json = not is_development_environment()
    if is_development_environment():
        if os.environ.get("BIOHUB_JSON_LOGS", "false").lower() == "true":
            use_json = True
    return use_json


def _configure_processors(config: BiohubConfig) -> list:
    """Configure structlog processors based on environment."""
    extra_fields = {
        "service": "biodiversity-hub",
        "deployment": get_deployment_environment(),
        **config.logging.extra_fields,
    }
    if config.site_name:
        extra_fields["site_name"] = config.site_name

    processors = [
        structlog.contextvars.merge_contextvars,
        _add_static_context(extra_fields),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
    ]

    if config.logging.include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if _use_json(config):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    return processors


def _configure_handlers(config: BiohubConfig) -> None:
    """Replace the root handlers with a filtered stdout handler."""
    root_logger = logging.getLogger()
    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    if config.logging.suppressed_messages:
        console_handler.addFilter(MessageSuppressionFilter(config.logging.suppressed_messages))
    root_logger.addHandler(console_handler)


def configure_structlog(config: BiohubConfig) -> None:
    """Configure structlog-based logging system.

    Args:
        config: The BiohubConfig instance containing logging settings.
    """
    processors = _configure_processors(config)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, config.logging.level.upper(), logging.INFO)
        ),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configure_handlers(config)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Structured logging configured",
        log_level=config.logging.level,
        environment=get_deployment_environment(),
        json_output=config.logging.json_logs,
    )
