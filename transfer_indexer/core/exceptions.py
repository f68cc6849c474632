"""
Application-level exceptions.

Fatal errors (ConfigurationError, TransportError) abort a run; per-signature
errors (MissingMetadataError, MissingTimestampError, TransactionNotFoundError)
are recovered by skipping that signature.
"""

from __future__ import annotations


class IndexerError(Exception):
    """Base class for all indexer errors. `code` is stable for logs and exit messages."""

    code = "indexer_error"

    def __init__(self, message: str, *, signature: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.signature = signature


class ConfigurationError(IndexerError):
    """Missing or invalid wallet/mint/day count; raised before any scan begins."""

    code = "configuration_error"


class TransportError(IndexerError):
    """Network, timeout or JSON-RPC failure while talking to the node."""

    code = "transport_error"

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        signature: str | None = None,
        rpc_code: int | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, signature=signature)
        self.method = method
        self.rpc_code = rpc_code
        self.status_code = status_code


class MissingMetadataError(IndexerError):
    """Transaction found but carries no execution metadata (no token balances)."""

    code = "missing_metadata"


class MissingTimestampError(IndexerError):
    """Signature entry has no blockTime and cannot be placed in the time window."""

    code = "missing_timestamp"


class TransactionNotFoundError(IndexerError):
    """Node returned no transaction for a listed signature."""

    code = "transaction_not_found"
