"""
Structured logging for dcrwebapi.

Every entry is one JSON object (console lines in development) carrying the
application, the architectural layer and the component that emitted it:

    {"app": "dcrwebapi", "layer": "ingestion", "component": "refresh",
     "event": "refresh_unit_failed", "instance": "stakepool:Echo", ...}

Layers: infrastructure (HTTP fetcher), ingestion (refresh loop, aggregates),
storage (state store), api (query surface).
"""

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict

Layer = Literal["infrastructure", "ingestion", "storage", "api"]

APP_NAME = "dcrwebapi"


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["app"] = APP_NAME
    return event_dict


def add_severity_level(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mirror the level as an upper-case ``severity`` for log collectors."""
    level = event_dict.get("level")
    if level:
        event_dict["severity"] = str(level).upper()
    return event_dict


def setup_logging(
    level: str = "INFO",
    json_logs: bool = True,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structlog on top of the standard library root logger.

    Args:
        level: Root level name; unknown names fall back to INFO
        json_logs: JSON lines when True, coloured console output otherwise
        include_timestamp: Prefix every entry with an ISO timestamp
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    # basicConfig is a no-op once the root logger has handlers (uvicorn, pytest)
    logging.root.setLevel(log_level)

    processors: list[Any] = []
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        add_severity_level,
        structlog.processors.format_exc_info,
    ]

    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True, exception_formatter=structlog.dev.plain_traceback
        )
    processors.append(renderer)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None, **context: Any) -> structlog.stdlib.BoundLogger:
    """structlog logger named ``name`` with ``context`` bound to every entry."""
    logger = structlog.get_logger(name)
    return logger.bind(**context) if context else logger


def _layer_logger(layer: Layer, component: str) -> structlog.stdlib.BoundLogger:
    return get_logger(layer, layer=layer, component=component)


def get_infrastructure_logger(component: str) -> structlog.stdlib.BoundLogger:
    return _layer_logger("infrastructure", component)


def get_ingestion_logger(component: str) -> structlog.stdlib.BoundLogger:
    return _layer_logger("ingestion", component)


def get_storage_logger(component: str) -> structlog.stdlib.BoundLogger:
    return _layer_logger("storage", component)


def get_api_logger(component: str = "fastapi") -> structlog.stdlib.BoundLogger:
    return _layer_logger("api", component)
