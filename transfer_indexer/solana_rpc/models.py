"""
Data models for Solana JSON-RPC responses.

Thin, immutable views over getSignaturesForAddress items and the
pre/postTokenBalances entries of getTransaction metadata.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from transfer_indexer.core.exceptions import MissingTimestampError


@dataclass(frozen=True)
class SignatureInfo:
    """
    Transaction signature info from getSignaturesForAddress.

    Mirrors Solana RPC response fields; the unit of work the scanner
    hands to the resolver.
    """

    signature: str
    slot: int | None = None
    err: Any = None  # None if success; dict/object from RPC if failed
    block_time: int | None = None  # Unix timestamp; None if not available
    memo: str | None = None
    confirmation_status: str | None = None  # processed | confirmed | finalized

    @classmethod
    def from_rpc_item(cls, item: dict[str, Any]) -> "SignatureInfo":
        """Build from a single getSignaturesForAddress result item."""
        slot = item.get("slot")
        block_time = item.get("blockTime")
        return cls(
            signature=item["signature"],
            slot=int(slot) if slot is not None else None,
            err=item.get("err"),
            block_time=int(block_time) if block_time is not None else None,
            memo=item.get("memo"),
            confirmation_status=item.get("confirmationStatus"),
        )

    def require_block_time(self) -> int:
        """Return block_time or raise MissingTimestampError."""
        if self.block_time is None:
            raise MissingTimestampError(
                f"Signature {self.signature} has no blockTime",
                signature=self.signature,
            )
        return self.block_time


@dataclass(frozen=True)
class SignaturePage:
    """One page of getSignaturesForAddress, newest first."""

    entries: list[SignatureInfo] = field(default_factory=list)
    next_cursor: str | None = None
    """Signature to pass as `before` for the next (older) page; None when exhausted."""


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        # str() keeps float reprs like 0.1 exact as written by the node
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def ui_amount_from_rpc(ui_token_amount: dict[str, Any] | None) -> Decimal:
    """
    Decimal UI amount from an uiTokenAmount object.

    Prefers uiAmountString, then uiAmount; absent or unparseable counts as 0.
    """
    if not isinstance(ui_token_amount, dict):
        return Decimal(0)
    for key in ("uiAmountString", "uiAmount"):
        amount = _to_decimal(ui_token_amount.get(key))
        if amount is not None:
            return amount
    return Decimal(0)


@dataclass(frozen=True)
class TokenBalance:
    """Token balance of one (owner, mint) pair before or after a transaction."""

    owner: str
    mint: str
    ui_amount: Decimal = Decimal(0)
    account_index: int | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.owner, self.mint)

    @classmethod
    def from_rpc_item(cls, item: dict[str, Any]) -> "TokenBalance":
        """Build from a preTokenBalances / postTokenBalances entry."""
        idx = item.get("accountIndex")
        return cls(
            owner=item.get("owner") or "",
            mint=item.get("mint") or "",
            ui_amount=ui_amount_from_rpc(item.get("uiTokenAmount")),
            account_index=int(idx) if idx is not None else None,
        )
