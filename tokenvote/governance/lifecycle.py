"""
Proposal Lifecycle Engine

    WAITING ──(now >= start)──▶ OPENED ──(now >= stop, quorum met)──▶ CLOSED
                                   └────(now >= stop, quorum missed)─▶ FAILED

    any status ──(organiser override)──▶ any status (DISABLED included)

Transitions are pull-based: nothing advances on a timer. The status only
moves when update_status, vote or an override touches the proposal, so
callers refresh before relying on it. update_status takes one step per
call; a vote is judged on the settled status, so a WAITING proposal whose
window has already elapsed never accepts votes.
"""

from typing import Dict, FrozenSet, Optional

from ..logger import get_logger
from .events import StatusUpdatedEvent
from .proposals import (
    GovernanceError,
    Proposal,
    ProposalStatus,
)

logger = get_logger(__name__)


class ProposalLifecycleError(GovernanceError):
    """Raised on an automatic transition the state machine does not allow."""


_AUTOMATIC_TRANSITIONS: Dict[ProposalStatus, FrozenSet[ProposalStatus]] = {
    ProposalStatus.WAITING:  frozenset({ProposalStatus.OPENED}),
    ProposalStatus.OPENED:   frozenset({ProposalStatus.CLOSED, ProposalStatus.FAILED}),
    # Terminal states
    ProposalStatus.CLOSED:   frozenset(),
    ProposalStatus.FAILED:   frozenset(),
    ProposalStatus.DISABLED: frozenset(),
}


def quorum_reached(vote_count: int, quorum: int) -> bool:
    return vote_count >= quorum


class LifecycleEngine:
    """Computes and commits proposal status changes."""

    def next_status(self, proposal: Proposal, now: int, quorum: int) -> ProposalStatus:
        """
        Status *proposal* should have at *now*. Pure: the proposal is not
        modified, so a caller can still abandon the change.
        """
        if proposal.status == ProposalStatus.WAITING and now >= proposal.start:
            return ProposalStatus.OPENED
        if proposal.status == ProposalStatus.OPENED and now >= proposal.stop:
            if quorum_reached(proposal.vote_count, quorum):
                return ProposalStatus.CLOSED
            return ProposalStatus.FAILED
        return proposal.status

    def settled_status(self, proposal: Proposal, now: int, quorum: int) -> ProposalStatus:
        """
        Status *proposal* ends up with at *now* once every pending step is
        taken. A WAITING proposal already past ``stop`` settles on
        CLOSED / FAILED. Pure, like next_status.

        update_status commits one step per call; vote eligibility is
        judged on the settled status.
        """
        status = proposal.status
        if status == ProposalStatus.WAITING and now >= proposal.start:
            status = ProposalStatus.OPENED
        if status == ProposalStatus.OPENED and now >= proposal.stop:
            if quorum_reached(proposal.vote_count, quorum):
                return ProposalStatus.CLOSED
            return ProposalStatus.FAILED
        return status

    def apply(self, proposal: Proposal, new_status: ProposalStatus, now: int) -> Optional[StatusUpdatedEvent]:
        """Commit an automatic transition computed by next_status."""
        if new_status == proposal.status:
            return None
        if new_status not in _AUTOMATIC_TRANSITIONS[proposal.status]:
            raise ProposalLifecycleError(
                f"Cannot transition from {proposal.status.name} → {new_status.name}"
            )
        if new_status == ProposalStatus.OPENED:
            reason = "Voting window opened"
        elif new_status == ProposalStatus.CLOSED:
            reason = f"Voting window closed with quorum ({proposal.vote_count} votes)"
        else:
            reason = f"Voting window closed without quorum ({proposal.vote_count} votes)"
        proposal.transition_to(new_status, reason, now)
        return StatusUpdatedEvent(proposal_id=proposal.id, status=new_status, timestamp=now)

    def refresh(self, proposal: Proposal, now: int, quorum: int) -> Optional[StatusUpdatedEvent]:
        """Advance *proposal* if its window says so. Idempotent once terminal."""
        return self.apply(proposal, self.next_status(proposal, now, quorum), now)

    def override(self, proposal: Proposal, status: ProposalStatus, now: int) -> Optional[StatusUpdatedEvent]:
        """
        Force *status* regardless of the voting window. Vote data is left
        untouched. Returns None when the status is already *status*.
        """
        if status == proposal.status:
            return None
        proposal.transition_to(status, "Administrative override", now)
        return StatusUpdatedEvent(proposal_id=proposal.id, status=status, timestamp=now)
