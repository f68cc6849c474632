"""Small shared helpers (address validation, display)."""
