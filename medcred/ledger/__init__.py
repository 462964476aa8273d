"""Identity ledger module."""

from medcred.ledger.store import IdentityLedger

__all__ = [
    "IdentityLedger",
]
