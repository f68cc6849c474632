"""
Transaction resolver and RPC balance models.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from ledger_fakes import COUNTERPARTY, NOW, OTHER_MINT, USDC_MINT, WALLET, token_balance, tx_payload
from transfer_indexer.core.exceptions import (
    MissingMetadataError,
    MissingTimestampError,
    TransactionNotFoundError,
)
from transfer_indexer.solana_rpc.models import SignatureInfo, TokenBalance, ui_amount_from_rpc
from transfer_indexer.transfer_engine.resolver import extract_token_balances, resolve_transaction


def entry(sig: str = "s1", block_time: int | None = NOW - 60) -> SignatureInfo:
    return SignatureInfo(signature=sig, slot=10, block_time=block_time)


def test_resolve_filters_to_tracked_mint(ledger):
    ledger.transactions["s1"] = tx_payload(
        pre=[
            token_balance(WALLET, "100", account_index=1),
            token_balance(WALLET, "3", mint=OTHER_MINT, account_index=2),
        ],
        post=[
            token_balance(WALLET, "150", account_index=1),
            token_balance(COUNTERPARTY, "9", mint=OTHER_MINT, account_index=3),
        ],
        block_time=NOW - 60,
        slot=42,
    )

    tx = resolve_transaction(ledger, entry(), USDC_MINT)
    assert tx.signature == "s1"
    assert tx.timestamp == NOW - 60
    assert tx.slot == 42
    assert [b.owner for b in tx.pre_balances] == [WALLET]
    assert [b.owner for b in tx.post_balances] == [WALLET]
    assert tx.post_balances[0].ui_amount == Decimal("150")
    assert tx.post_balances[0].account_index == 1
    assert ledger.get_calls == ["s1"]


def test_resolve_not_found(ledger):
    ledger.transactions["s1"] = None
    with pytest.raises(TransactionNotFoundError) as exc:
        resolve_transaction(ledger, entry(), USDC_MINT)
    assert exc.value.signature == "s1"


def test_resolve_missing_metadata(ledger):
    ledger.transactions["s1"] = tx_payload(with_meta=False)
    with pytest.raises(MissingMetadataError):
        resolve_transaction(ledger, entry(), USDC_MINT)


def test_resolve_without_token_balances_is_empty(ledger):
    payload = tx_payload()
    del payload["meta"]["preTokenBalances"]
    payload["meta"]["postTokenBalances"] = None
    ledger.transactions["s1"] = payload

    tx = resolve_transaction(ledger, entry(), USDC_MINT)
    assert tx.pre_balances == ()
    assert tx.post_balances == ()


def test_resolve_falls_back_to_transaction_block_time(ledger):
    ledger.transactions["s1"] = tx_payload(block_time=NOW - 5)
    tx = resolve_transaction(ledger, entry(block_time=None), USDC_MINT)
    assert tx.timestamp == NOW - 5

    ledger.transactions["s1"] = tx_payload(block_time=None)
    with pytest.raises(MissingTimestampError):
        resolve_transaction(ledger, entry(block_time=None), USDC_MINT)


def test_ui_amount_parsing():
    assert ui_amount_from_rpc({"uiAmountString": "1.000001", "uiAmount": 1.000001}) == Decimal("1.000001")
    assert ui_amount_from_rpc({"uiAmount": 2.5}) == Decimal("2.5")
    assert ui_amount_from_rpc({"uiAmount": None, "decimals": 6}) == Decimal(0)
    assert ui_amount_from_rpc(None) == Decimal(0)
    assert ui_amount_from_rpc({"uiAmountString": "not-a-number"}) == Decimal(0)


def test_token_balance_from_rpc_missing_ui_amount_is_zero():
    b = TokenBalance.from_rpc_item(token_balance(WALLET, None))
    assert b.ui_amount == Decimal(0)
    assert b.key == (WALLET, USDC_MINT)


def test_extract_token_balances_ignores_garbage():
    items = [token_balance(WALLET, "1"), "junk", {"mint": OTHER_MINT}]
    assert [b.owner for b in extract_token_balances(items, USDC_MINT)] == [WALLET]
    assert extract_token_balances(None, USDC_MINT) == ()
