"""Address normalization utilities."""

from typing import Any


def normalize_address(address: Any) -> str:
    """Return the canonical form of an account address: trimmed and lower-cased."""
    if address is None:
        return ""
    if not isinstance(address, str):
        address = str(address)
    return address.strip().lower()
