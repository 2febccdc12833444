"""
Voting credentials

Provides:
  - CredentialLedger : read-only ledger protocol consumed by governance
  - CredentialToken  : in-memory fungible token implementing it
"""

from .credential import (
    CredentialError,
    CredentialLedger,
    CredentialToken,
    InsufficientBalanceError,
    TransferEvent,
)

__all__ = [
    "CredentialError",
    "CredentialLedger",
    "CredentialToken",
    "InsufficientBalanceError",
    "TransferEvent",
]
