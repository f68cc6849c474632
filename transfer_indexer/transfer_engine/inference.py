"""
Transfer inference from token balance deltas.

The ledger exposes balance snapshots, not transfer events, so transfers are
inferred per (owner, mint) from |post - pre|. Purely structural; no I/O.

Direction follows ownership of the changed balance, not the sign of the
delta: a change on the tracked wallet's own balance is Incoming, a change on
any other owner's balance is Outgoing from the tracked wallet.

Counterparty resolution is best-effort:
- Incoming: sender is the owner of the first pre-state balance for the mint.
- Outgoing: receiver is the owner of the first post-state balance for the mint
  whose owner is not the tracked wallet.
- Nothing found resolves to "unknown".
This is exact for two-party transfers and approximate for multi-party
transactions (swaps, batched payouts); first match wins and no further
guessing is done.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from transfer_indexer.solana_rpc.models import TokenBalance
from transfer_indexer.transfer_engine.models import (
    UNKNOWN_ADDRESS,
    ResolvedTransaction,
    TransferDirection,
    TransferRecord,
)

ZERO = Decimal(0)


def _pre_amount(pre: list[TokenBalance], owner: str, mint: str) -> Decimal:
    """Pre-state amount for (owner, mint); 0 for an account created in this tx."""
    for b in pre:
        if b.owner == owner and b.mint == mint:
            return b.ui_amount
    return ZERO


def _incoming_source(pre: list[TokenBalance], mint: str) -> str:
    for b in pre:
        if b.mint == mint and b.owner:
            return b.owner
    return UNKNOWN_ADDRESS


def _outgoing_destination(post: list[TokenBalance], mint: str, sender: str) -> str:
    for b in post:
        if b.mint == mint and b.owner and b.owner != sender:
            return b.owner
    return UNKNOWN_ADDRESS


def infer_transfers(
    wallet: str,
    mint: str,
    pre: Iterable[TokenBalance],
    post: Iterable[TokenBalance],
    *,
    signature: str = "",
    timestamp: int = 0,
) -> list[TransferRecord]:
    """
    Infer transfer records for one transaction from its pre/post balances.

    Each post-state balance of `mint` whose amount changed yields exactly one
    record; unchanged balances yield none. Never raises on missing data.
    """
    pre_list = [b for b in pre if b.mint == mint]
    post_list = [b for b in post if b.mint == mint]

    records: list[TransferRecord] = []
    for p in post_list:
        amount = abs(p.ui_amount - _pre_amount(pre_list, p.owner, p.mint))
        if amount == ZERO:
            continue

        if p.owner == wallet:
            direction = TransferDirection.INCOMING
            from_address = _incoming_source(pre_list, mint)
            to_address = wallet
        else:
            direction = TransferDirection.OUTGOING
            from_address = wallet
            to_address = _outgoing_destination(post_list, mint, from_address)

        records.append(
            TransferRecord(
                signature=signature,
                timestamp=timestamp,
                from_address=from_address,
                to_address=to_address,
                amount=amount,
                direction=direction,
            )
        )
    return records


def infer_from_resolved(wallet: str, mint: str, tx: ResolvedTransaction) -> list[TransferRecord]:
    """infer_transfers() for a ResolvedTransaction, stamping its signature and time."""
    return infer_transfers(
        wallet,
        mint,
        tx.pre_balances,
        tx.post_balances,
        signature=tx.signature,
        timestamp=tx.timestamp,
    )
