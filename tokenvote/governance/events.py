"""
Governance events.

Every successful mutation on the Governance facade produces one of these
immutable records. They are appended to the facade's event log and returned
to the caller.
"""

from dataclasses import dataclass
from typing import Any, Dict

from .proposals import ProposalStatus


@dataclass(frozen=True)
class OwnershipTransferredEvent:
    previous_owner: str
    new_owner: str
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "OwnershipTransferred",
            "previousOwner": self.previous_owner,
            "newOwner": self.new_owner,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class QuorumUpdatedEvent:
    """Emitted by set_quorum with the value before and after the change."""
    before: int
    after: int
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "QuorumUpdated",
            "before": self.before,
            "after": self.after,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class DateRangeUpdatedEvent:
    min_start_offset: int
    min_stop_offset: int
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "DateRangeUpdated",
            "minStartOffset": self.min_start_offset,
            "minStopOffset": self.min_stop_offset,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ProposalAddedEvent:
    proposal_id: int
    title: str
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "ProposalAdded",
            "id": self.proposal_id,
            "title": self.title,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class StatusUpdatedEvent:
    """Emitted whenever a proposal's status actually changes."""
    proposal_id: int
    status: ProposalStatus
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "StatusUpdated",
            "id": self.proposal_id,
            "status": self.status.name,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class VotePerformedEvent:
    proposal_id: int
    voter: str
    choice: int
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": "VotePerformed",
            "id": self.proposal_id,
            "address": self.voter,
            "choice": self.choice,
            "timestamp": self.timestamp,
        }
