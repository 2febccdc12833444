"""
Voting Credential Token

The governance engine only needs a read-only view of a fungible ledger:
``balance_of(holder)`` plus ``name`` / ``symbol`` metadata. That view is the
CredentialLedger protocol. CredentialToken is an in-memory ERC-20–style
implementation of it, used for local deployments and tests.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, runtime_checkable

from ..constants import DEFAULT_CREDENTIAL_DECIMALS
from ..exceptions import TokenVoteException
from ..logger import get_logger

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  EXCEPTIONS
# ══════════════════════════════════════════════════════════════════════

class CredentialError(TokenVoteException):
    """Base exception for credential token operations."""


class InsufficientBalanceError(CredentialError):
    """Raised when sender balance is too low."""


# ══════════════════════════════════════════════════════════════════════
#  LEDGER PROTOCOL
# ══════════════════════════════════════════════════════════════════════

@runtime_checkable
class CredentialLedger(Protocol):
    """Read-only ledger capability consumed by governance."""

    name: str
    symbol: str

    def balance_of(self, holder: str) -> int:
        ...


# ══════════════════════════════════════════════════════════════════════
#  EVENTS
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TransferEvent:
    """Emitted on every successful transfer."""
    token_symbol: str
    sender: str
    recipient: str
    amount: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "Transfer",
            "token": self.token_symbol,
            "from": self.sender,
            "to": self.recipient,
            "amount": self.amount,
            "timestamp": self.timestamp,
        }


# ══════════════════════════════════════════════════════════════════════
#  CREDENTIAL TOKEN
# ══════════════════════════════════════════════════════════════════════

class CredentialToken:
    """
    Fungible voting credential.

    Mirrors ERC-20 semantics:
        - balance_of(address) → int (smallest units)
        - transfer(sender, recipient, amount)
        - total_supply → int

    The whole initial supply is credited to the deployer.
    """

    def __init__(
        self,
        name: str,
        symbol: str,
        total_supply: int = 0,
        deployer: str = "",
        decimals: int = DEFAULT_CREDENTIAL_DECIMALS,
    ):
        if not name:
            raise CredentialError("Token name cannot be empty")
        if not symbol:
            raise CredentialError("Token symbol cannot be empty")
        if decimals < 0 or decimals > 18:
            raise CredentialError(f"Decimals must be 0-18, got {decimals}")
        if total_supply < 0:
            raise CredentialError("Total supply cannot be negative")
        if total_supply > 0 and not deployer:
            raise CredentialError("Deployer is required to hold the initial supply")

        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.deployer = deployer
        self._total_supply = total_supply
        self._balances: Dict[str, int] = {}
        self._events: List[TransferEvent] = []

        if total_supply > 0:
            self._balances[deployer] = total_supply

        logger.info(f"Credential deployed: {symbol} ({name}), supply={total_supply}")

    # ── Read-only views ───────────────────────────────────────────────

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, holder: str) -> int:
        return self._balances.get(holder, 0)

    @property
    def holders(self) -> List[str]:
        return [h for h, bal in self._balances.items() if bal > 0]

    @property
    def events(self) -> List[TransferEvent]:
        return list(self._events)

    # ── Transfers ─────────────────────────────────────────────────────

    def transfer(self, sender: str, recipient: str, amount: int) -> TransferEvent:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise CredentialError("Transfer amount must be a positive integer")
        if not recipient:
            raise CredentialError("Recipient is required")
        if sender == recipient:
            raise CredentialError("Cannot transfer to self")

        bal = self.balance_of(sender)
        if bal < amount:
            raise InsufficientBalanceError(
                f"{sender} balance {bal} < transfer amount {amount}"
            )

        self._balances[sender] = bal - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount

        event = TransferEvent(
            token_symbol=self.symbol,
            sender=sender,
            recipient=recipient,
            amount=amount,
        )
        self._events.append(event)
        logger.debug(f"Transfer: {sender} → {recipient} {amount} {self.symbol}")
        return event

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "totalSupply": self._total_supply,
            "deployer": self.deployer,
            "holders": len(self.holders),
        }

    def __repr__(self) -> str:
        return f"<CredentialToken {self.symbol} supply={self._total_supply}>"
