"""
Structured logging infrastructure for asset-catalog.
Provides consistent, machine-readable logs across the data-access layer.

Log Structure:
    {
        "app": "asset-catalog",        # Application identifier
        "layer": "storage",            # Architectural layer
        "component": "asset-repo",     # Specific component
        "module": "...",               # Python module (optional)
        "event": "asset_created",      # What happened
        ...
    }

Architectural Layers:
    - infrastructure: Store and cache clients, configuration
    - storage: Repositories and the catalog aggregate
"""

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict

Layer = Literal["infrastructure", "storage"]

APP_NAME = "asset-catalog"


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add the application identifier to every log entry."""
    event_dict["app"] = APP_NAME
    return event_dict


def add_severity_level(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Add severity level for cloud logging compatibility.
    Maps structlog level names to upper-case severities.
    """
    level = event_dict.get("level")
    if level:
        event_dict["severity"] = {
            "debug": "DEBUG",
            "info": "INFO",
            "warning": "WARNING",
            "error": "ERROR",
            "critical": "CRITICAL",
        }.get(level, "INFO")
    return event_dict


def setup_logging(
    level: str = "INFO",
    json_logs: bool = True,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structured logging for the catalog.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON. If False, use human-readable format.
        include_timestamp: Whether to include ISO timestamps in logs

    Usage:
        >>> from asset_catalog.infrastructure.observability import setup_logging
        >>> setup_logging(level="DEBUG", json_logs=False)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        add_severity_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    name: str | None = None,
    layer: Layer | None = None,
    component: str | None = None,
    **initial_context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance with architectural context bound.

    Args:
        name: Logger name (typically __name__ of the calling module)
        layer: Architectural layer (infrastructure, storage)
        component: Specific component within the layer
        **initial_context: Additional context key-value pairs to bind

    Usage:
        >>> log = get_logger(__name__, layer="storage", component="asset-repo")
        >>> log.info("asset_created", symbol="WBTC")
    """
    logger = structlog.get_logger(name)

    context = {}
    if layer:
        context["layer"] = layer
    if component:
        context["component"] = component
    if name:
        context["module"] = name
    context.update(initial_context)

    if context:
        logger = logger.bind(**context)

    return logger


def get_infrastructure_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for infrastructure components (database pool, redis client).

    Usage:
        >>> log = get_infrastructure_logger("database-adapter", store="postgres")
        >>> log.info("pool_created")
    """
    return get_logger(
        "infrastructure",
        layer="infrastructure",
        component=component,
        **context,
    )


def get_storage_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for the storage layer (repositories, catalog aggregate).

    Usage:
        >>> log = get_storage_logger("asset-catalog")
        >>> log.info("catalog_connected")
    """
    return get_logger(
        "storage",
        layer="storage",
        component=component,
        **context,
    )
