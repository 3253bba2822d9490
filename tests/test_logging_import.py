"""
Test that swell_logging can be imported without circular import and logger works.
"""

from __future__ import annotations

from solders.pubkey import Pubkey


def test_logging_import():
    """Import get_logger from swell_logging and use the logger."""
    from swell_token.swell_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    logger.info("test_message", key="value")


def test_bind_transfer_accepts_pubkeys():
    """Pubkey context values are rendered without raising."""
    from swell_token.swell_logging import bind_transfer

    log = bind_transfer(Pubkey.new_unique(), Pubkey.new_unique())
    log.info("swell_transfer_started", raw_amount=10)
