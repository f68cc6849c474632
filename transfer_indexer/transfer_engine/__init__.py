"""
Transfer reconstruction engine.

scanner (signatures in window), resolver (tracked-mint balances),
inference (balance deltas to transfers), aggregator (ordered records, totals).
"""

from transfer_indexer.transfer_engine.aggregator import aggregate
from transfer_indexer.transfer_engine.indexer import TransferIndexer, run_index
from transfer_indexer.transfer_engine.inference import infer_transfers
from transfer_indexer.transfer_engine.models import (
    IndexReport,
    ResolvedTransaction,
    ScanStats,
    TimeWindow,
    TransferDirection,
    TransferRecord,
    TransferSummary,
)
from transfer_indexer.transfer_engine.resolver import resolve_transaction
from transfer_indexer.transfer_engine.scanner import scan_signatures

__all__ = [
    "IndexReport",
    "ResolvedTransaction",
    "ScanStats",
    "TimeWindow",
    "TransferDirection",
    "TransferIndexer",
    "TransferRecord",
    "TransferSummary",
    "aggregate",
    "infer_transfers",
    "resolve_transaction",
    "run_index",
    "scan_signatures",
]
