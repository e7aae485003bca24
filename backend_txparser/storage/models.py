"""
Domain models for stored transactions.

A Transaction is recorded against one subscribed address and carries its
direction relative to that address. The same on-chain transaction may be
recorded twice under two different addresses, once per perspective.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Direction(str, Enum):
    """Direction of a transaction relative to the address it is recorded against."""

    INCOMING = "incoming"
    OUTGOING = "outgoing"


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction record for one subscribed address."""

    hash: str
    from_address: str
    to_address: str
    value: str
    """Decimal-string amount in wei; opaque to the engine."""
    direction: Direction

    @property
    def incoming(self) -> bool:
        return self.direction is Direction.INCOMING

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON wire shape served by the API."""
        return {
            "hash": self.hash,
            "from": self.from_address,
            "to": self.to_address,
            "value": self.value,
            "incoming": self.incoming,
        }
