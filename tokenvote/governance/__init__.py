"""
TokenVote Governance

Provides:
  - Proposal / ProposalStatus / ProposalStore   (proposals.py)
  - Role / AccessControl                        (access.py)
  - LifecycleEngine                             (lifecycle.py)
  - VoteTally / VoteRecord                      (voting.py)
  - Governance facade                           (facade.py)
"""

from .proposals import (
    FieldTooLongError,
    FieldTooShortError,
    GovernanceError,
    IndexOutOfBoundsError,
    InvalidParameterError,
    InvalidProposalError,
    InvalidStatusValueError,
    Proposal,
    ProposalStatus,
    ProposalStore,
    StartTooCloseError,
    StopTooCloseError,
)
from .settings import GovernanceSettings
from .access import (
    OPERATION_ROLES,
    AccessControl,
    Role,
    UnauthorizedError,
)
from .events import (
    DateRangeUpdatedEvent,
    OwnershipTransferredEvent,
    ProposalAddedEvent,
    QuorumUpdatedEvent,
    StatusUpdatedEvent,
    VotePerformedEvent,
)
from .lifecycle import (
    LifecycleEngine,
    ProposalLifecycleError,
    quorum_reached,
)
from .voting import (
    DuplicateVoteError,
    ForbiddenCallerError,
    InsufficientCredentialError,
    InvalidChoiceError,
    InvalidStatusError,
    VoteRecord,
    VoteTally,
    VotingError,
)
from .facade import Governance

__all__ = [
    # Proposals
    "FieldTooLongError",
    "FieldTooShortError",
    "GovernanceError",
    "IndexOutOfBoundsError",
    "InvalidParameterError",
    "InvalidProposalError",
    "InvalidStatusValueError",
    "Proposal",
    "ProposalStatus",
    "ProposalStore",
    "StartTooCloseError",
    "StopTooCloseError",
    # Settings / access
    "GovernanceSettings",
    "OPERATION_ROLES",
    "AccessControl",
    "Role",
    "UnauthorizedError",
    # Events
    "DateRangeUpdatedEvent",
    "OwnershipTransferredEvent",
    "ProposalAddedEvent",
    "QuorumUpdatedEvent",
    "StatusUpdatedEvent",
    "VotePerformedEvent",
    # Lifecycle
    "LifecycleEngine",
    "ProposalLifecycleError",
    "quorum_reached",
    # Voting
    "DuplicateVoteError",
    "ForbiddenCallerError",
    "InsufficientCredentialError",
    "InvalidChoiceError",
    "InvalidStatusError",
    "VoteRecord",
    "VoteTally",
    "VotingError",
    # Facade
    "Governance",
]
