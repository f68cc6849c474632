"""
Aggregation: order preserved, totals by direction, net identity.
"""

from __future__ import annotations

from decimal import Decimal

from ledger_fakes import COUNTERPARTY, WALLET
from transfer_indexer.transfer_engine.aggregator import aggregate
from transfer_indexer.transfer_engine.models import TransferDirection, TransferRecord


def record(sig: str, amount: str, direction: TransferDirection, ts: int = 0) -> TransferRecord:
    incoming = direction == TransferDirection.INCOMING
    return TransferRecord(
        signature=sig,
        timestamp=ts,
        from_address=COUNTERPARTY if incoming else WALLET,
        to_address=WALLET if incoming else COUNTERPARTY,
        amount=Decimal(amount),
        direction=direction,
    )


def test_aggregate_totals_and_net():
    records = [
        record("a", "50", TransferDirection.INCOMING),
        record("b", "12.5", TransferDirection.OUTGOING),
        record("c", "0.25", TransferDirection.INCOMING),
        record("d", "100", TransferDirection.OUTGOING),
    ]
    summary = aggregate(records)
    assert summary.total_in == Decimal("50.25")
    assert summary.total_out == Decimal("112.5")
    assert summary.net == summary.total_in - summary.total_out
    assert summary.net == Decimal("-62.25")


def test_aggregate_preserves_order_without_sorting():
    records = [
        record("newest", "1", TransferDirection.INCOMING, ts=300),
        record("oldest", "1", TransferDirection.INCOMING, ts=100),
        record("middle", "1", TransferDirection.OUTGOING, ts=200),
    ]
    summary = aggregate(iter(records))
    assert [r.signature for r in summary.records] == ["newest", "oldest", "middle"]


def test_aggregate_empty():
    summary = aggregate([])
    assert summary.records == ()
    assert summary.total_in == Decimal(0)
    assert summary.total_out == Decimal(0)
    assert summary.net == Decimal(0)


def test_summary_to_dict_uses_decimal_strings():
    summary = aggregate([record("a", "1.5", TransferDirection.INCOMING, ts=1_700_000_000)])
    out = summary.to_dict()
    assert out["total_in"] == "1.5"
    assert out["total_out"] == "0"
    assert out["net"] == "1.5"
    assert out["records"][0]["timestamp"] == "2023-11-14T22:13:20+00:00"
    assert out["records"][0]["from"] == COUNTERPARTY
    assert out["records"][0]["to"] == WALLET
