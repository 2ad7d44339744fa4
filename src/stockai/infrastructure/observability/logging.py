"""
structlog setup for the stockai gateway.

Every entry carries the layer and component that emitted it, so a crumb
refresh can be followed from the credential store through the forwarder to
the route that triggered it:

    {
        "app": "stockai",
        "layer": "ingestion",
        "component": "credential-store",
        "provider": "yahoo",
        "event": "crumb_refreshed",
        "cycle": 3,
        "crumb": "Abc***"
    }

Layers:
    - infrastructure: config loading, the shared aiohttp session
    - ingestion: crumb acquisition and upstream forwarding
    - api: FastAPI routes and lifespan

Crumbs and session cookies never reach the renderer in clear text; see
``redact_credentials``.
"""

import logging
import re
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict

Layer = Literal["infrastructure", "ingestion", "api"]

SECRET_KEYS = ("crumb", "token", "cookie", "cookie_header")
URL_KEYS = ("url", "target_url")

_CRUMB_PARAM = re.compile(r"([?&]crumb=)[^&#]*")

_SEVERITY = {
    "debug": "DEBUG",
    "info": "INFO",
    "warning": "WARNING",
    "error": "ERROR",
    "critical": "CRITICAL",
}


def _mask(value: str) -> str:
    return value[:3] + "***" if len(value) > 3 else "***"


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["app"] = "stockai"
    return event_dict


def add_severity_level(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """Copy the level into ``severity`` for log collectors that key on it."""
    level = event_dict.get("level")
    if level:
        event_dict["severity"] = _SEVERITY.get(level, "INFO")
    return event_dict


def redact_credentials(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Mask crumb and cookie values before rendering.

    Secret fields keep their first three characters. A ``crumb=`` query
    parameter inside a logged URL has its value dropped. Masking an already
    masked value is a no-op, so components may mask on their own as well.
    """
    for key in SECRET_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str) and value:
            event_dict[key] = _mask(value)
    for key in URL_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str) and "crumb=" in value:
            event_dict[key] = _CRUMB_PARAM.sub(r"\1***", value)
    return event_dict


def setup_logging(
    level: str = "INFO",
    json_logs: bool = True,
    include_timestamp: bool = True,
) -> None:
    """
    Route structlog through stdlib logging and set the root level.

    Called once from the FastAPI app factory with the ``logging`` section of
    the loaded config. Unknown level names fall back to INFO.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        json_logs: JSON lines when True, coloured console output otherwise
        include_timestamp: prepend an ISO timestamp to every entry
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    # basicConfig leaves the level alone once a handler is installed (uvicorn, pytest)
    logging.root.setLevel(log_level)

    processors = [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        add_severity_level,
        redact_credentials,
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
    Return a structlog logger bound to ``layer``, ``component`` and ``module``.

    Extra keyword arguments are bound as well, e.g. ``symbol="AAPL"`` for a
    logger that only serves one ticker.
    """
    context: dict[str, Any] = {}
    if layer:
        context["layer"] = layer
    if component:
        context["component"] = component
    if name:
        context["module"] = name
    context.update(initial_context)

    logger = structlog.get_logger(name)
    return logger.bind(**context) if context else logger


# ============================================================================
# Per-layer factories
# ============================================================================


def get_infrastructure_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """Logger for the HTTP session and config loader."""
    return get_logger("infrastructure", layer="infrastructure", component=component, **context)


def get_ingestion_logger(
    component: str,
    provider: str | None = "yahoo",
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Logger for crumb acquisition and forwarding.

    Usage:
        >>> log = get_ingestion_logger("credential-store")
        >>> log.info("crumb_refreshed", cycle=3, crumb=crumb)
    """
    ctx: dict[str, Any] = {}
    if provider:
        ctx["provider"] = provider
    ctx.update(context)
    return get_logger("ingestion", layer="ingestion", component=component, **ctx)


def get_api_logger(
    component: str = "fastapi",
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    return get_logger("api", layer="api", component=component, **context)
