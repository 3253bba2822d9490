"""
structlog setup for swell_token.

One JSON line per event on stderr (stdout belongs to the CLI's results). Events
are snake_case names such as swell_transfer_confirmed, with addresses, raw
amounts and signatures as keys. Secret keys are never logged.

Imports nothing from swell_token so any module can import it first.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

# "json" or anything else for the console renderer
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

_PLAIN_TYPES = (str, int, float, bool, list, dict)


def _add_timestamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _normalize_event(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """event -> event_type, mirrored into message for log viewers that only show message."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "event_type" in event_dict:
        event_dict.setdefault("message", str(event_dict["event_type"]))
    return event_dict


def _stringify_keys(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Pubkey, Signature and Decimal values become strings."""
    for key, value in event_dict.items():
        if value is not None and not isinstance(value, _PLAIN_TYPES):
            event_dict[key] = str(value)
    return event_dict


def configure_structlog() -> None:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
        _stringify_keys,
    ]
    if LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Logger bound to the module name.

        logger = get_logger(__name__)
        logger.info("swell_balance_read", owner=str(owner), raw_amount=1500000000)
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_transfer(sender: Any, recipient: Any) -> structlog.BoundLogger:
    """Logger carrying sender and recipient on every event of one transfer."""
    return get_logger("swell_token.transfer").bind(sender=str(sender), recipient=str(recipient))
