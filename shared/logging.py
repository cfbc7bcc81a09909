"""
Shared logging configuration for the Storefront services.

Every service logs JSON lines to stdout through structlog. Loggers are named
``<service>.<component>``; the request id and forwarding flag of the request
being served are attached to every line logged while handling it.
"""

import sys
import structlog
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple
from contextvars import ContextVar, Token

from opentelemetry import trace

# Correlation for the request currently being served
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
replicated_var: ContextVar[bool] = ContextVar('replicated', default=False)

RequestContextTokens = Tuple[Token, Token]


def _processors() -> List[Any]:
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        add_service_context,
        add_trace_context,
        add_request_context,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(service_name: str, log_level: str = "info") -> None:
    """Configure structured logging for a service.

    Safe to call more than once per process; several services share one
    process in tests and the last call sets the level.
    """
    structlog.configure(
        processors=_processors(),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Split ``<service>.<component>`` logger names into two fields."""
    service, _, component = event_dict.get("logger", "").partition(".")
    if component:
        event_dict["service"] = service
        event_dict["component"] = component
    return event_dict


def add_trace_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add trace context to log events."""
    current_span = trace.get_current_span()
    if current_span and current_span.is_recording():
        span_context = current_span.get_span_context()
        if span_context.trace_id != 0:
            event_dict["trace_id"] = f"{span_context.trace_id:032x}"
        if span_context.span_id != 0:
            event_dict["span_id"] = f"{span_context.span_id:016x}"

    return event_dict


def add_request_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    request_id = request_id_var.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)
    if replicated_var.get():
        event_dict["replicated"] = True
    return event_dict


def bind_request_context(request_id: Optional[str] = None, replicated: bool = False) -> Tuple[str, RequestContextTokens]:
    """Bind request ID and forwarding flag to the current context.

    Returns the request ID and the tokens needed to restore the previous
    values. In-process calls between services share one context, so the
    values are restored rather than cleared.
    """
    if request_id is None:
        request_id = str(uuid.uuid4())
    tokens = (request_id_var.set(request_id), replicated_var.set(replicated))
    return request_id, tokens


def reset_request_context(tokens: RequestContextTokens) -> None:
    """Restore the context values saved by bind_request_context."""
    request_id_token, replicated_token = tokens
    replicated_var.reset(replicated_token)
    request_id_var.reset(request_id_token)


def get_request_id() -> Optional[str]:
    """Request ID of the request currently being served, if any."""
    return request_id_var.get()


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger named ``<service>.<component>``."""
    return structlog.get_logger(name)
