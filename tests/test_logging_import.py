"""
Test that indexer_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from indexer_logging and use the logger."""
    from transfer_indexer.indexer_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "warning")
    logger.info("test_message", key="value")


def test_bind_wallet_logger():
    from transfer_indexer.indexer_logging import bind_wallet

    log = bind_wallet("9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka")
    log.warning("test_wallet_message", signature="s1")
