"""
Solana JSON-RPC access.

Pages a wallet's signatures newest first and fetches transactions by
signature; the only part of the indexer that touches the network.
"""

from transfer_indexer.solana_rpc.client import SolanaRpcClient
from transfer_indexer.solana_rpc.models import SignatureInfo, SignaturePage, TokenBalance

__all__ = [
    "SignatureInfo",
    "SignaturePage",
    "SolanaRpcClient",
    "TokenBalance",
]
