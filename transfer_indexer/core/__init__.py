"""
Core utilities: the exception taxonomy shared by config, RPC client and engine.
"""

from transfer_indexer.core.exceptions import (
    ConfigurationError,
    IndexerError,
    MissingMetadataError,
    MissingTimestampError,
    TransactionNotFoundError,
    TransportError,
)

__all__ = [
    "ConfigurationError",
    "IndexerError",
    "MissingMetadataError",
    "MissingTimestampError",
    "TransactionNotFoundError",
    "TransportError",
]
