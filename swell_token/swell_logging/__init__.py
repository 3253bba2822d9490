"""
Structured logging for the SWELL token core.

JSON logs with timestamp, event_type and key-value context (owner, signature, raw amounts).
Use get_logger() in every module.
"""

from swell_token.swell_logging.logger import bind_transfer, get_logger

__all__ = ["bind_transfer", "get_logger"]
