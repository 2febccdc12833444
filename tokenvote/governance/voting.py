"""
Vote Tally

Implements:
  - One vote per eligible holder per proposal
  - Eligibility: credential balance >= 1 and caller is not the organiser
  - Fixed vote weight: the balance gates eligibility, it never multiplies
  - Per-choice counters with vote_count == sum(choice_counters)
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..constants import (
    CHOICE_COUNT,
    CREDENTIAL_MIN_BALANCE,
    VOTE_WEIGHT,
)
from ..logger import get_logger
from ..tokens.credential import CredentialLedger
from .access import AccessControl
from .proposals import (
    GovernanceError,
    Proposal,
    ProposalStatus,
)

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  EXCEPTIONS
# ══════════════════════════════════════════════════════════════════════

class VotingError(GovernanceError):
    """Base voting error."""


class InvalidChoiceError(VotingError):
    def __init__(self, choice: Any):
        super().__init__("Incorrect choice")
        self.choice = choice


class InvalidStatusError(VotingError):
    """Proposal is not OPENED."""

    def __init__(self, current: ProposalStatus):
        super().__init__("Incorrect proposal status")
        self.current = current


class ForbiddenCallerError(VotingError):
    """The organiser may not vote."""

    def __init__(self):
        super().__init__("Forbidden to organiser")


class InsufficientCredentialError(VotingError):
    """Voter holds less than CREDENTIAL_MIN_BALANCE."""

    def __init__(self, balance: int = 0):
        super().__init__("Access only with appropriate token balance")
        self.balance = balance


class DuplicateVoteError(VotingError):
    """Voter already cast a vote on this proposal."""

    def __init__(self):
        super().__init__("Already voted")


# ══════════════════════════════════════════════════════════════════════
#  VOTE DATA
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class VoteRecord:
    """An individual vote cast by a holder."""
    proposal_id: int
    voter: str
    choice: int
    balance: int          # Balance observed at vote time (eligibility only)
    weight: int = VOTE_WEIGHT
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proposalId": self.proposal_id,
            "voter": self.voter,
            "choice": self.choice,
            "balance": self.balance,
            "weight": self.weight,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VoteRecord":
        return cls(
            proposal_id=data["proposalId"],
            voter=data["voter"],
            choice=data["choice"],
            balance=data["balance"],
            weight=data.get("weight", VOTE_WEIGHT),
            timestamp=data.get("timestamp", 0),
        )


# ══════════════════════════════════════════════════════════════════════
#  VOTE TALLY
# ══════════════════════════════════════════════════════════════════════

class VoteTally:
    """
    Records votes and maintains per-choice counters.

    Checks run in a fixed order so that the first failing rule decides
    the error: status, then organiser exclusion, then balance, then
    duplicate vote. Nothing is mutated until every check has passed.
    """

    def __init__(self, access: AccessControl, ledger: CredentialLedger):
        self._access = access
        self._ledger = ledger
        self._votes: Dict[int, List[VoteRecord]] = {}

    # ── Validation ────────────────────────────────────────────────────

    @staticmethod
    def validate_choice(choice: Any) -> int:
        if isinstance(choice, bool) or not isinstance(choice, int) or not 0 <= choice < CHOICE_COUNT:
            raise InvalidChoiceError(choice)
        return choice

    def check_eligibility(self, proposal: Proposal, voter: str, status: ProposalStatus) -> int:
        """
        Check that *voter* may vote on *proposal* once its status is *status*.

        Returns the voter's credential balance.
        """
        if status != ProposalStatus.OPENED:
            raise InvalidStatusError(status)
        if self._access.is_organiser(voter):
            raise ForbiddenCallerError()
        balance = self._ledger.balance_of(voter)
        if balance < CREDENTIAL_MIN_BALANCE:
            raise InsufficientCredentialError(balance)
        if proposal.has_voted(voter):
            raise DuplicateVoteError()
        return balance

    # ── Recording ─────────────────────────────────────────────────────

    def record(self, proposal: Proposal, voter: str, choice: int, balance: int, timestamp: float) -> VoteRecord:
        """Apply an already-validated vote."""
        proposal.voters.add(voter)
        proposal.choice_counters[choice] += VOTE_WEIGHT
        proposal.vote_count += VOTE_WEIGHT

        record = VoteRecord(
            proposal_id=proposal.id,
            voter=voter,
            choice=choice,
            balance=balance,
            timestamp=timestamp,
        )
        self._votes.setdefault(proposal.id, []).append(record)
        logger.info(
            f"Vote: {voter} → choice {choice} "
            f"('{proposal.choice_descriptions[choice]}') on Proposal #{proposal.id} "
            f"(total={proposal.vote_count})"
        )
        return record

    def cast_vote(self, proposal: Proposal, voter: str, choice: int, timestamp: float) -> VoteRecord:
        """Validate against the proposal's stored status and record the vote."""
        self.validate_choice(choice)
        balance = self.check_eligibility(proposal, voter, proposal.status)
        return self.record(proposal, voter, choice, balance, timestamp)

    def restore(self, record: VoteRecord):
        """Re-attach a persisted record. Proposal counters are restored with the proposal."""
        self._votes.setdefault(record.proposal_id, []).append(record)

    # ── Queries ───────────────────────────────────────────────────────

    def get_votes(self, proposal_id: int) -> List[VoteRecord]:
        return list(self._votes.get(proposal_id, []))

    def voter_count(self, proposal_id: int) -> int:
        return len(self._votes.get(proposal_id, []))

    def to_dict(self) -> Dict[str, Any]:
        return {
            pid: [v.to_dict() for v in votes]
            for pid, votes in self._votes.items()
        }

    def __repr__(self) -> str:
        return f"<VoteTally proposals={len(self._votes)}>"
