"""
Access Control

Classifies callers as Administrator, Organiser or Ordinary and gates every
facade operation through one static table, so the role requirements of the
whole governance surface can be audited in a single place.
"""

from enum import IntEnum
from typing import Dict, Optional

from ..logger import get_logger
from .proposals import GovernanceError
from .settings import GovernanceSettings, require_identity

logger = get_logger(__name__)


class Role(IntEnum):
    ORDINARY = 0
    ORGANISER = 1
    ADMINISTRATOR = 2

    @property
    def label(self) -> str:
        return self.name.lower()


class UnauthorizedError(GovernanceError):
    """Caller lacks the role an operation requires."""

    def __init__(self, required_role: Role, caller: Optional[str] = None):
        super().__init__(f"Access granted only to {required_role.label}")
        self.required_role = required_role
        self.caller = caller


# None → any caller. Voting eligibility (credential balance, organiser
# exclusion) is checked by the VoteTally after the status check.
OPERATION_ROLES: Dict[str, Optional[Role]] = {
    "transfer_ownership": Role.ADMINISTRATOR,
    "get_quorum":         None,
    "set_quorum":         Role.ORGANISER,
    "get_nn_proposals":   None,
    "add_proposal":       Role.ORGANISER,
    "get_proposal_by_id": None,
    "set_status":         Role.ORGANISER,
    "update_status":      None,
    "get_date_range":     Role.ADMINISTRATOR,
    "set_date_range":     Role.ADMINISTRATOR,
    "vote":               None,
}


class AccessControl:
    """Role checks backed by the shared GovernanceSettings record."""

    def __init__(self, settings: GovernanceSettings):
        self._settings = settings

    @property
    def owner(self) -> str:
        return self._settings.owner

    @property
    def organiser(self) -> str:
        return self._settings.organiser

    def has_role(self, caller: Optional[str], role: Role) -> bool:
        if role == Role.ADMINISTRATOR:
            return caller is not None and caller == self._settings.owner
        if role == Role.ORGANISER:
            return caller is not None and caller == self._settings.organiser
        return True

    def classify(self, caller: Optional[str]) -> Role:
        """Highest role held by *caller*."""
        if self.has_role(caller, Role.ADMINISTRATOR):
            return Role.ADMINISTRATOR
        if self.has_role(caller, Role.ORGANISER):
            return Role.ORGANISER
        return Role.ORDINARY

    def is_organiser(self, caller: Optional[str]) -> bool:
        return self.has_role(caller, Role.ORGANISER)

    def require(self, operation: str, caller: Optional[str]):
        """Raise UnauthorizedError unless *caller* may run *operation*."""
        try:
            role = OPERATION_ROLES[operation]
        except KeyError:
            raise GovernanceError(f"Unknown governance operation: {operation}") from None
        if role is None or self.has_role(caller, role):
            return
        logger.debug(f"Rejected {operation} from {caller}: requires {role.name}")
        raise UnauthorizedError(role, caller)

    def transfer_ownership(self, new_owner: str) -> str:
        """Replace the administrator. Returns the previous one."""
        require_identity(new_owner, "New administrator")
        previous = self._settings.owner
        self._settings.owner = new_owner
        logger.info(f"Ownership transferred: {previous} → {new_owner}")
        return previous
