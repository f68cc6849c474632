"""Address validation utilities."""

from solders.pubkey import Pubkey


def is_valid_address(w: str) -> bool:
    """Return True if w is a valid Solana address (base58 32-byte Pubkey)."""
    if not isinstance(w, str) or not w.strip():
        return False
    try:
        Pubkey.from_string(w.strip())
        return True
    except Exception:
        return False


def short_address(w: str, keep: int = 4) -> str:
    """Shorten an address for display: first and last `keep` chars."""
    if len(w) <= 3 * keep:
        return w
    return f"{w[:keep]}...{w[-keep:]}"
