"""
Governance Facade

Composes access control, the proposal store, the lifecycle engine and the
vote tally into the externally visible governance operations. Every
operation takes the caller identity explicitly and runs under one lock, so
no caller can observe a partially applied operation. A rejected operation
raises before anything is mutated.
"""

import copy
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config.loader import TokenVoteConfig
from ..logger import get_logger, set_log_level
from ..tokens.credential import CredentialLedger
from .access import AccessControl, Role
from .events import (
    DateRangeUpdatedEvent,
    OwnershipTransferredEvent,
    ProposalAddedEvent,
    QuorumUpdatedEvent,
    StatusUpdatedEvent,
    VotePerformedEvent,
)
from .lifecycle import LifecycleEngine
from .proposals import (
    GovernanceError,
    InvalidProposalError,
    Proposal,
    ProposalStatus,
    ProposalStore,
)
from .settings import GovernanceSettings
from .voting import VoteTally, VoteRecord

logger = get_logger(__name__)

Clock = Callable[[], float]


class Governance:
    """
    Token-gated proposal voting.

    Args:
        ledger:           Credential ledger queried for voter balances
        organiser:        Identity allowed to add proposals, set quorum and
                          override statuses
        quorum:           Minimum vote count for a proposal to close as passed
        owner:            Administrator identity (the deployer)
        clock:            Wall-clock source, seconds
        min_start_offset: Minimum seconds between creation and voting start
        min_stop_offset:  Minimum seconds between voting start and stop
        max_field_length: Upper bound on proposal text fields
    """

    def __init__(
        self,
        ledger: CredentialLedger,
        organiser: str,
        quorum: int,
        owner: str,
        *,
        clock: Clock = time.time,
        min_start_offset: Optional[int] = None,
        min_stop_offset: Optional[int] = None,
        max_field_length: Optional[int] = None,
    ):
        settings_kwargs: Dict[str, Any] = {}
        if min_start_offset is not None:
            settings_kwargs["min_start_offset"] = min_start_offset
        if min_stop_offset is not None:
            settings_kwargs["min_stop_offset"] = min_stop_offset
        if max_field_length is not None:
            settings_kwargs["max_field_length"] = max_field_length

        self._settings = GovernanceSettings(
            owner=owner, organiser=organiser, quorum=quorum, **settings_kwargs
        )
        self._ledger = ledger
        self._clock = clock
        self._lock = threading.RLock()

        self._access = AccessControl(self._settings)
        self._proposals = ProposalStore(max_field_length=self._settings.max_field_length)
        self._lifecycle = LifecycleEngine()
        self._tally = VoteTally(self._access, ledger)
        self._events: List[Any] = []

        logger.info(
            f"Governance deployed: owner={owner} organiser={organiser} "
            f"quorum={quorum} token={ledger.symbol}"
        )

    @classmethod
    def from_config(
        cls,
        config: TokenVoteConfig,
        ledger: CredentialLedger,
        *,
        clock: Clock = time.time,
    ) -> "Governance":
        """Build a governance instance from a validated TokenVoteConfig."""
        config.validate()
        set_log_level(config.logging.level)
        gov = config.governance
        return cls(
            ledger,
            organiser=gov.organiser,
            quorum=gov.quorum,
            owner=gov.owner,
            clock=clock,
            min_start_offset=gov.min_start_offset,
            min_stop_offset=gov.min_stop_offset,
            max_field_length=config.proposals.max_field_length,
        )

    # ── Helpers ───────────────────────────────────────────────────────

    def _now(self) -> int:
        return int(self._clock())

    def _emit(self, event):
        self._events.append(event)
        return event

    # ── Roles ─────────────────────────────────────────────────────────

    @property
    def owner(self) -> str:
        with self._lock:
            return self._settings.owner

    @property
    def organiser(self) -> str:
        with self._lock:
            return self._settings.organiser

    def role_of(self, caller: Optional[str]) -> Role:
        with self._lock:
            return self._access.classify(caller)

    def transfer_ownership(self, new_owner: str, caller: str) -> OwnershipTransferredEvent:
        with self._lock:
            self._access.require("transfer_ownership", caller)
            previous = self._access.transfer_ownership(new_owner)
            return self._emit(OwnershipTransferredEvent(
                previous_owner=previous, new_owner=new_owner, timestamp=self._now()
            ))

    # ── Credential metadata ───────────────────────────────────────────

    @property
    def token_name(self) -> str:
        return self._ledger.name

    @property
    def token_symbol(self) -> str:
        return self._ledger.symbol

    # ── Quorum ────────────────────────────────────────────────────────

    def get_quorum(self, caller: Optional[str] = None) -> int:
        with self._lock:
            self._access.require("get_quorum", caller)
            return self._settings.quorum

    def set_quorum(self, value: int, caller: str) -> QuorumUpdatedEvent:
        with self._lock:
            self._access.require("set_quorum", caller)
            before = self._settings.update_quorum(value)
            logger.info(f"Quorum updated: {before} → {value}")
            return self._emit(QuorumUpdatedEvent(before=before, after=value, timestamp=self._now()))

    # ── Date range ────────────────────────────────────────────────────

    def get_date_range(self, caller: str) -> Tuple[int, int]:
        with self._lock:
            self._access.require("get_date_range", caller)
            return self._settings.date_range

    def set_date_range(self, min_start_offset: int, min_stop_offset: int, caller: str) -> DateRangeUpdatedEvent:
        with self._lock:
            self._access.require("set_date_range", caller)
            self._settings.update_date_range(min_start_offset, min_stop_offset)
            logger.info(f"Date range updated: start>={min_start_offset}s stop>={min_stop_offset}s")
            return self._emit(DateRangeUpdatedEvent(
                min_start_offset=min_start_offset,
                min_stop_offset=min_stop_offset,
                timestamp=self._now(),
            ))

    # ── Proposals ─────────────────────────────────────────────────────

    def get_nn_proposals(self, caller: Optional[str] = None) -> int:
        with self._lock:
            self._access.require("get_nn_proposals", caller)
            return self._proposals.count

    def add_proposal(
        self,
        title: str,
        description: str,
        display_date: str,
        choice1: str,
        choice2: str,
        choice3: str,
        start_offset: int,
        stop_offset: int,
        caller: str,
    ) -> int:
        """Create a WAITING proposal and return its index."""
        with self._lock:
            self._access.require("add_proposal", caller)
            now = self._now()
            proposal = self._proposals.add(
                title,
                description,
                display_date,
                (choice1, choice2, choice3),
                start_offset,
                stop_offset,
                now=now,
                min_start_offset=self._settings.min_start_offset,
                min_stop_offset=self._settings.min_stop_offset,
            )
            self._emit(ProposalAddedEvent(proposal_id=proposal.id, title=title, timestamp=now))
            return proposal.id

    def get_proposal_by_id(self, proposal_id: int, caller: Optional[str] = None) -> Proposal:
        """Snapshot of a proposal. The stored status is returned as is."""
        with self._lock:
            self._access.require("get_proposal_by_id", caller)
            return copy.deepcopy(self._proposals.get(proposal_id))

    def get_votes(self, proposal_id: int) -> List[VoteRecord]:
        with self._lock:
            self._proposals.check_index(proposal_id)
            return self._tally.get_votes(proposal_id)

    # ── Lifecycle ─────────────────────────────────────────────────────

    def set_status(self, proposal_id: int, status: Any, caller: str) -> Optional[StatusUpdatedEvent]:
        """Organiser override of a proposal's status."""
        with self._lock:
            self._access.require("set_status", caller)
            proposal = self._proposals.get(proposal_id)
            new_status = ProposalStatus.coerce(status)
            event = self._lifecycle.override(proposal, new_status, self._now())
            if event is not None:
                self._emit(event)
            return event

    def update_status(self, proposal_id: int, caller: Optional[str] = None) -> Optional[StatusUpdatedEvent]:
        """Advance a proposal according to its voting window. Returns the event if the status changed."""
        with self._lock:
            self._access.require("update_status", caller)
            proposal = self._proposals.get(proposal_id)
            event = self._lifecycle.refresh(proposal, self._now(), self._settings.quorum)
            if event is not None:
                self._emit(event)
            return event

    # ── Voting ────────────────────────────────────────────────────────

    def vote(self, proposal_id: int, choice: int, caller: str) -> VotePerformedEvent:
        """
        Cast *caller*'s vote for *choice* on a proposal.

        Checks, in order: proposal index, choice, refreshed status,
        organiser exclusion, credential balance, duplicate vote.
        """
        with self._lock:
            self._access.require("vote", caller)
            proposal = self._proposals.get(proposal_id, message="Incorrect proposal index")
            self._tally.validate_choice(choice)

            now = self._now()
            status = self._lifecycle.settled_status(proposal, now, self._settings.quorum)
            try:
                balance = self._tally.check_eligibility(proposal, caller, status)
            except GovernanceError as e:
                logger.debug(f"Rejected vote from {caller} on Proposal #{proposal_id}: {e}")
                raise

            status_event = self._lifecycle.apply(proposal, status, now)
            if status_event is not None:
                self._emit(status_event)
            self._tally.record(proposal, caller, choice, balance, now)
            return self._emit(VotePerformedEvent(
                proposal_id=proposal.id, voter=caller, choice=choice, timestamp=now
            ))

    # ── Events / state ────────────────────────────────────────────────

    @property
    def events(self) -> List[Any]:
        with self._lock:
            return list(self._events)

    def to_dict(self) -> Dict[str, Any]:
        """Configuration record, every proposal in index order and every vote record."""
        with self._lock:
            return {
                "configuration": self._settings.to_dict(),
                "token": {"name": self._ledger.name, "symbol": self._ledger.symbol},
                "proposals": self._proposals.to_list(),
                "votes": [
                    record.to_dict()
                    for proposal in self._proposals
                    for record in self._tally.get_votes(proposal.id)
                ],
            }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        ledger: CredentialLedger,
        *,
        clock: Clock = time.time,
    ) -> "Governance":
        """Rebuild a governance instance from to_dict() output."""
        settings = GovernanceSettings.from_dict(data["configuration"])
        gov = cls(
            ledger,
            organiser=settings.organiser,
            quorum=settings.quorum,
            owner=settings.owner,
            clock=clock,
            min_start_offset=settings.min_start_offset,
            min_stop_offset=settings.min_stop_offset,
            max_field_length=settings.max_field_length,
        )
        for item in data.get("proposals", []):
            gov._proposals.restore(Proposal.from_dict(item))
        for item in data.get("votes", []):
            record = VoteRecord.from_dict(item)
            proposal = gov._proposals.get(record.proposal_id)
            if not proposal.has_voted(record.voter):
                raise InvalidProposalError(
                    f"Vote record for {record.voter} has no voter entry on Proposal #{proposal.id}"
                )
            gov._tally.restore(record)
        return gov

    def __repr__(self) -> str:
        return (
            f"<Governance proposals={self._proposals.count} "
            f"quorum={self._settings.quorum} token={self._ledger.symbol}>"
        )
