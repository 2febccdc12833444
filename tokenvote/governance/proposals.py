"""
Governance Proposals

Defines the proposal lifecycle states, the Proposal dataclass that tracks a
single three-choice ballot, and the append-only ProposalStore that owns
creation, field validation and indexed retrieval.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from ..constants import (
    CHOICE_COUNT,
    FIELD_MAX_LENGTH,
    FIELD_MIN_LENGTH,
)
from ..exceptions import TokenVoteException
from ..logger import get_logger

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  EXCEPTIONS
# ══════════════════════════════════════════════════════════════════════

class GovernanceError(TokenVoteException):
    """Base governance exception."""


class InvalidParameterError(GovernanceError):
    """Raised when a governance parameter (quorum, date range) is invalid."""


class IndexOutOfBoundsError(GovernanceError):
    """Raised when a proposal index is outside ``[0, count)``."""

    def __init__(self, proposal_id: Any, count: int, message: str = "out of bound index (> max)"):
        super().__init__(message)
        self.proposal_id = proposal_id
        self.count = count


class InvalidStatusValueError(GovernanceError):
    """Raised when a status value does not name a ProposalStatus."""

    def __init__(self, value: Any):
        super().__init__("incorrect status")
        self.value = value


class InvalidProposalError(GovernanceError):
    """Raised when proposal data is invalid."""


class FieldTooShortError(InvalidProposalError):
    """A text field is shorter than FIELD_MIN_LENGTH."""

    def __init__(self, field_name: str):
        super().__init__("too short string")
        self.field = field_name


class FieldTooLongError(InvalidProposalError):
    """A text field is longer than the configured maximum."""

    def __init__(self, field_name: str):
        super().__init__("too long string")
        self.field = field_name


class StartTooCloseError(InvalidProposalError):
    def __init__(self):
        super().__init__("Start date too close")


class StopTooCloseError(InvalidProposalError):
    def __init__(self):
        super().__init__("Stop date too close")


# ══════════════════════════════════════════════════════════════════════
#  ENUMS
# ══════════════════════════════════════════════════════════════════════

class ProposalStatus(IntEnum):
    """Lifecycle stage of a proposal."""
    WAITING = 0     # Created, voting window not reached yet
    OPENED = 1      # Voting in progress
    CLOSED = 2      # Window elapsed with quorum
    FAILED = 3      # Window elapsed without quorum
    DISABLED = 4    # Administrative override

    @classmethod
    def coerce(cls, value: Any) -> "ProposalStatus":
        """Resolve an int / name / member into a ProposalStatus."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                raise InvalidStatusValueError(value) from None
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidStatusValueError(value)
        try:
            return cls(value)
        except ValueError:
            raise InvalidStatusValueError(value) from None


TERMINAL_STATUSES = frozenset({
    ProposalStatus.CLOSED,
    ProposalStatus.FAILED,
    ProposalStatus.DISABLED,
})


# ══════════════════════════════════════════════════════════════════════
#  PROPOSAL
# ══════════════════════════════════════════════════════════════════════

@dataclass
class Proposal:
    """
    A single ballot item with three choices and a bounded voting window.

    Fields:
        id:                  Sequential index assigned by the store
        title:               Short title
        description:         Longer description
        display_date:        Free-text date shown to voters
        choice_descriptions: Labels of the three choices
        start:               Timestamp at which voting opens
        stop:                Timestamp at which voting closes
        choice_counters:     Votes received per choice
        vote_count:          Total votes (== sum(choice_counters))
        status:              Current lifecycle stage
        voters:              Holders that already voted
        created_at:          Timestamp of creation
        exists:              Always True for a stored proposal
    """
    id: int
    title: str
    description: str
    display_date: str
    choice_descriptions: Tuple[str, ...]
    start: int
    stop: int
    choice_counters: List[int] = field(default_factory=lambda: [0] * CHOICE_COUNT)
    vote_count: int = 0
    status: ProposalStatus = ProposalStatus.WAITING
    voters: Set[str] = field(default_factory=set)
    created_at: int = 0
    exists: bool = True
    _history: List[Dict[str, Any]] = field(default_factory=list, repr=False)

    def __post_init__(self):
        if len(self.choice_descriptions) != CHOICE_COUNT:
            raise InvalidProposalError(
                f"Proposal needs exactly {CHOICE_COUNT} choices, "
                f"got {len(self.choice_descriptions)}"
            )
        self.choice_descriptions = tuple(self.choice_descriptions)
        if len(self.choice_counters) != CHOICE_COUNT or any(c < 0 for c in self.choice_counters):
            raise InvalidProposalError(f"Invalid choice counters: {self.choice_counters}")
        if self.vote_count != sum(self.choice_counters):
            raise InvalidProposalError(
                f"vote_count {self.vote_count} != sum of choice counters {sum(self.choice_counters)}"
            )
        if len(self.voters) != self.vote_count:
            raise InvalidProposalError(
                f"{len(self.voters)} voters recorded for {self.vote_count} votes"
            )
        if self.start >= self.stop:
            raise InvalidProposalError(f"Voting window [{self.start}, {self.stop}) is empty")
        if not self._history:
            self._history.append({
                "from": "INIT",
                "to": self.status.name,
                "reason": "created",
                "timestamp": self.created_at,
            })

    # ── Properties ────────────────────────────────────────────────────

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def is_votable(self) -> bool:
        return self.status == ProposalStatus.OPENED

    @property
    def history(self) -> List[Dict[str, Any]]:
        return list(self._history)

    def has_voted(self, holder: str) -> bool:
        return holder in self.voters

    # ── State transitions ─────────────────────────────────────────────

    def transition_to(self, new_status: ProposalStatus, reason: str, timestamp: int) -> ProposalStatus:
        """
        Set *new_status* and record the change. Returns the previous status.

        Which transitions are legal is decided by the LifecycleEngine.
        """
        old = self.status
        self._history.append({
            "from": old.name,
            "to": new_status.name,
            "reason": reason,
            "timestamp": timestamp,
        })
        self.status = new_status
        logger.info(
            f"Proposal #{self.id} ({self.title}): "
            f"{old.name} → {new_status.name} | {reason}"
        )
        return old

    # ── Serialization ─────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "displayDate": self.display_date,
            "choiceDesc": list(self.choice_descriptions),
            "choiceCounter": list(self.choice_counters),
            "voteCount": self.vote_count,
            "status": self.status.name,
            "start": self.start,
            "stop": self.stop,
            "voters": sorted(self.voters),
            "createdAt": self.created_at,
            "magic": self.exists,
            "history": [dict(h) for h in self._history],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Proposal":
        return cls(
            id=data["id"],
            title=data["title"],
            description=data["description"],
            display_date=data["displayDate"],
            choice_descriptions=tuple(data["choiceDesc"]),
            start=data["start"],
            stop=data["stop"],
            choice_counters=list(data.get("choiceCounter", [0] * CHOICE_COUNT)),
            vote_count=data.get("voteCount", 0),
            status=ProposalStatus[data.get("status", "WAITING")],
            voters=set(data.get("voters", [])),
            created_at=data.get("createdAt", 0),
            _history=[dict(h) for h in data.get("history", [])],
        )

    def __repr__(self) -> str:
        return (
            f"<Proposal #{self.id} '{self.title}' "
            f"status={self.status.name} votes={self.vote_count}>"
        )


# ══════════════════════════════════════════════════════════════════════
#  PROPOSAL STORE
# ══════════════════════════════════════════════════════════════════════

class ProposalStore:
    """
    Append-only, indexed collection of proposals.

    Proposals are never removed; the index of a proposal is its position
    in the store and doubles as its id.
    """

    FIELD_NAMES = (
        "title",
        "description",
        "display_date",
        "choice1",
        "choice2",
        "choice3",
    )

    def __init__(
        self,
        max_field_length: int = FIELD_MAX_LENGTH,
        min_field_length: int = FIELD_MIN_LENGTH,
    ):
        if min_field_length < 1:
            raise InvalidParameterError("Minimum field length must be >= 1")
        if max_field_length < min_field_length:
            raise InvalidParameterError(
                f"Maximum field length {max_field_length} < minimum {min_field_length}"
            )
        self.max_field_length = max_field_length
        self.min_field_length = min_field_length
        self._proposals: List[Proposal] = []

    def __len__(self) -> int:
        return len(self._proposals)

    def __iter__(self) -> Iterator[Proposal]:
        return iter(list(self._proposals))

    @property
    def count(self) -> int:
        return len(self._proposals)

    # ── Validation ────────────────────────────────────────────────────

    def validate_fields(self, values: Tuple[str, ...]):
        """Check every text field against the length bounds, in order."""
        for name, value in zip(self.FIELD_NAMES, values):
            if not isinstance(value, str):
                raise InvalidProposalError(f"Field {name} must be text")
            if len(value) < self.min_field_length:
                raise FieldTooShortError(name)
            if len(value) > self.max_field_length:
                raise FieldTooLongError(name)

    @staticmethod
    def validate_window(
        now: int,
        start_offset: int,
        stop_offset: int,
        min_start_offset: int,
        min_stop_offset: int,
    ) -> Tuple[int, int]:
        """
        Turn offsets into absolute ``(start, stop)`` timestamps.

        ``start`` must sit at least *min_start_offset* after *now* and
        ``stop`` at least *min_stop_offset* after ``start`` (and strictly
        after it).
        """
        start = now + start_offset
        stop = now + stop_offset
        if start_offset < 0 or start < now + min_start_offset:
            raise StartTooCloseError()
        if stop <= start or stop < start + min_stop_offset:
            raise StopTooCloseError()
        return start, stop

    def check_index(self, proposal_id: Any, message: Optional[str] = None) -> int:
        count = len(self._proposals)
        if (
            isinstance(proposal_id, bool)
            or not isinstance(proposal_id, int)
            or not 0 <= proposal_id < count
        ):
            if message:
                raise IndexOutOfBoundsError(proposal_id, count, message)
            raise IndexOutOfBoundsError(proposal_id, count)
        return proposal_id

    # ── Mutations / lookups ───────────────────────────────────────────

    def add(
        self,
        title: str,
        description: str,
        display_date: str,
        choices: Tuple[str, str, str],
        start_offset: int,
        stop_offset: int,
        *,
        now: int,
        min_start_offset: int,
        min_stop_offset: int,
    ) -> Proposal:
        """Validate and append a new WAITING proposal. Nothing is stored on failure."""
        self.validate_fields((title, description, display_date) + tuple(choices))
        start, stop = self.validate_window(
            now, start_offset, stop_offset, min_start_offset, min_stop_offset
        )

        proposal = Proposal(
            id=len(self._proposals),
            title=title,
            description=description,
            display_date=display_date,
            choice_descriptions=tuple(choices),
            start=start,
            stop=stop,
            created_at=now,
        )
        self._proposals.append(proposal)
        logger.info(
            f"Proposal #{proposal.id} added: '{title}' "
            f"window=[{start}, {stop})"
        )
        return proposal

    def restore(self, proposal: Proposal):
        """Append an already-built proposal (state reload). Ids must stay sequential."""
        if proposal.id != len(self._proposals):
            raise InvalidProposalError(
                f"Expected proposal id {len(self._proposals)}, got {proposal.id}"
            )
        self._proposals.append(proposal)

    def get(self, proposal_id: int, message: Optional[str] = None) -> Proposal:
        return self._proposals[self.check_index(proposal_id, message)]

    def to_list(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self._proposals]

    def __repr__(self) -> str:
        return f"<ProposalStore proposals={len(self._proposals)}>"
