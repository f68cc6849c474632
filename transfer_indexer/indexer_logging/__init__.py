"""
Structured logging for the transfer indexer.

Use get_logger() in every module for consistent, aggregation-friendly output.
"""

from transfer_indexer.indexer_logging.logger import bind_wallet, configure_structlog, get_logger

__all__ = ["bind_wallet", "configure_structlog", "get_logger"]
