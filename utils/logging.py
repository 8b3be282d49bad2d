"""Logging utilities for the image relay.

structlog on top of stdlib logging. Every event carries the process id,
hostname and the correlation id of the request being served. Provider
credentials and image payloads are masked before rendering, and prompts are
reduced to their length.
"""

import json
import logging
import os
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Mapping, Optional

import structlog

correlation_id_context: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset({
    "authorization",
    "replicate_api_token",
    "api_token",
    "token",
    "image",
    "image_input",
})

_NOISY_LOGGERS = ("urllib3", "requests", "asyncio", "uvicorn.access")
JSON_RENDERER = structlog.processors.JSONRenderer(sort_keys=True, default=str)


def _mask(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            k: REDACTED if str(k).lower() in SENSITIVE_KEYS else _mask(v)
            for k, v in value.items()
        }
    return value


def redact_sensitive(logger: Any, name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Mask credentials and image data, and log prompts by length only."""
    prompt = event_dict.pop("prompt", None)
    if isinstance(prompt, str):
        event_dict["prompt_length"] = len(prompt)

    for key in list(event_dict):
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
        elif key != "event":
            event_dict[key] = _mask(event_dict[key])
    return event_dict


def _add_process_context(logger: Any, name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    event_dict["pid"] = os.getpid()
    event_dict["hostname"] = os.uname().nodename

    correlation_id = correlation_id_context.get()
    if correlation_id and "correlation_id" not in event_dict:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def _line_renderer(logger: Any, name: str, event_dict: Dict[str, Any]) -> str:
    """Render `timestamp [level]: message {context}`."""
    timestamp = event_dict.pop("timestamp", "")
    level = event_dict.pop("level", "info")
    event = event_dict.pop("event", "")
    event_dict.pop("logger", None)

    if not event_dict:
        return f"{timestamp} [{level}]: {event}"
    context = json.dumps(event_dict, sort_keys=True, separators=(",", ":"), default=str)
    return f"{timestamp} [{level}]: {event} {context}"


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Bind a correlation id to the current context, generating one if needed."""
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    correlation_id_context.set(correlation_id)
    return correlation_id


def get_correlation_id() -> Optional[str]:
    return correlation_id_context.get()


def clear_correlation_id() -> None:
    correlation_id_context.set(None)


def configure_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_output: Render JSON lines instead of `timestamp [level]: message {context}`.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
        force=True,
    )
    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        _add_process_context,
        redact_sensitive,
        JSON_RENDERER if json_output else _line_renderer,
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **initial_context: Any) -> structlog.stdlib.BoundLogger:
    """Get a logger, optionally bound to fixed context such as `service=`."""
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


def log_exception(
    logger: structlog.stdlib.BoundLogger,
    exception: BaseException,
    message: str = "An error occurred",
    **additional_context: Any
) -> None:
    """Log an exception with its type, message and stack trace."""
    logger.error(
        message,
        exc_info=exception,
        exception_type=type(exception).__name__,
        exception_message=str(exception),
        **additional_context,
    )
