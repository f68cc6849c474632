"""
Transaction resolver: signature to tracked-mint balance snapshots.

Fetches the full transaction and keeps only the pre/post token balances of
the tracked mint; everything else in the payload is dropped immediately.
"""

from __future__ import annotations

from typing import Any

from transfer_indexer.core.exceptions import (
    MissingMetadataError,
    MissingTimestampError,
    TransactionNotFoundError,
)
from transfer_indexer.indexer_logging import get_logger
from transfer_indexer.solana_rpc.models import SignatureInfo, TokenBalance
from transfer_indexer.transfer_engine.models import ResolvedTransaction

logger = get_logger(__name__)


def extract_token_balances(items: Any, mint: str) -> tuple[TokenBalance, ...]:
    """Parse a pre/postTokenBalances list, keeping only entries for `mint`."""
    if not isinstance(items, list):
        return ()
    out: list[TokenBalance] = []
    for item in items:
        if not isinstance(item, dict) or item.get("mint") != mint:
            continue
        out.append(TokenBalance.from_rpc_item(item))
    return tuple(out)


def resolve_transaction(client: Any, entry: SignatureInfo, mint: str) -> ResolvedTransaction:
    """
    Fetch the transaction for `entry` and return its tracked-mint snapshots.

    The record's timestamp is the scanned entry's blockTime (already checked
    against the window). Raises TransactionNotFoundError when the node has no
    transaction, MissingMetadataError when meta is absent; TransportError from
    the client propagates.
    """
    raw = client.get_transaction(entry.signature)
    if raw is None:
        raise TransactionNotFoundError(
            f"Transaction {entry.signature} not found",
            signature=entry.signature,
        )

    meta = raw.get("meta")
    if not isinstance(meta, dict):
        raise MissingMetadataError(
            f"Transaction {entry.signature} has no metadata",
            signature=entry.signature,
        )

    pre = extract_token_balances(meta.get("preTokenBalances"), mint)
    post = extract_token_balances(meta.get("postTokenBalances"), mint)

    timestamp = entry.block_time
    if timestamp is None:
        timestamp = raw.get("blockTime")
    if timestamp is None:
        raise MissingTimestampError(
            f"Transaction {entry.signature} has no blockTime",
            signature=entry.signature,
        )
    slot = raw.get("slot", entry.slot)

    logger.debug(
        "resolve_transaction_done",
        signature=entry.signature,
        pre_count=len(pre),
        post_count=len(post),
    )
    return ResolvedTransaction(
        signature=entry.signature,
        timestamp=int(timestamp),
        pre_balances=pre,
        post_balances=post,
        slot=int(slot) if slot is not None else None,
    )
