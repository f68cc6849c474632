"""Transfer aggregation: ordered records plus in/out/net totals."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from transfer_indexer.transfer_engine.models import TransferDirection, TransferRecord, TransferSummary


def aggregate(records: Iterable[TransferRecord]) -> TransferSummary:
    """Collect records in the given order (no re-sorting) and total them by direction."""
    ordered = tuple(records)
    total_in = sum(
        (r.amount for r in ordered if r.direction == TransferDirection.INCOMING),
        Decimal(0),
    )
    total_out = sum(
        (r.amount for r in ordered if r.direction == TransferDirection.OUTGOING),
        Decimal(0),
    )
    return TransferSummary(
        records=ordered,
        total_in=total_in,
        total_out=total_out,
        net=total_in - total_out,
    )
