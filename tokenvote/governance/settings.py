"""
Governance configuration record.

One GovernanceSettings instance is owned by each Governance facade and shared
by reference with the access-control layer. It only changes through the
role-gated facade operations.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from ..constants import (
    DEFAULT_MIN_START_OFFSET,
    DEFAULT_MIN_STOP_OFFSET,
    FIELD_MAX_LENGTH,
)
from ..exceptions import InvalidIdentityError
from .proposals import InvalidParameterError


def require_identity(identity: Any, label: str) -> str:
    if not isinstance(identity, str) or not identity.strip():
        raise InvalidIdentityError(f"{label} identity is required")
    return identity


@dataclass
class GovernanceSettings:
    """
    Process-wide governance parameters.

    Fields:
        owner:            Administrator identity (transferable)
        organiser:        Organiser identity (fixed at construction)
        quorum:           Minimum vote count for a proposal to close as passed
        min_start_offset: Minimum seconds between creation and voting start
        min_stop_offset:  Minimum seconds between voting start and stop
        max_field_length: Upper bound on proposal text fields
    """
    owner: str
    organiser: str
    quorum: int
    min_start_offset: int = DEFAULT_MIN_START_OFFSET
    min_stop_offset: int = DEFAULT_MIN_STOP_OFFSET
    max_field_length: int = FIELD_MAX_LENGTH

    def __post_init__(self):
        require_identity(self.owner, "Administrator")
        require_identity(self.organiser, "Organiser")
        self._check_quorum(self.quorum)
        self._check_date_range(self.min_start_offset, self.min_stop_offset)

    @staticmethod
    def _check_quorum(value: Any):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidParameterError(f"Quorum must be an integer, got {value!r}")
        if value < 0:
            raise InvalidParameterError("Quorum cannot be negative")

    @staticmethod
    def _check_date_range(min_start: Any, min_stop: Any):
        for v in (min_start, min_stop):
            if isinstance(v, bool) or not isinstance(v, int):
                raise InvalidParameterError(f"Date range values must be integers, got {v!r}")
            if v < 0:
                raise InvalidParameterError("Date range values cannot be negative")

    def update_quorum(self, value: int) -> int:
        """Replace the quorum. Returns the previous value."""
        self._check_quorum(value)
        before = self.quorum
        self.quorum = value
        return before

    def update_date_range(self, min_start_offset: int, min_stop_offset: int):
        self._check_date_range(min_start_offset, min_stop_offset)
        self.min_start_offset = min_start_offset
        self.min_stop_offset = min_stop_offset

    @property
    def date_range(self) -> Tuple[int, int]:
        return self.min_start_offset, self.min_stop_offset

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "organiser": self.organiser,
            "quorum": self.quorum,
            "minStartOffset": self.min_start_offset,
            "minStopOffset": self.min_stop_offset,
            "maxFieldLength": self.max_field_length,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GovernanceSettings":
        return cls(
            owner=data["owner"],
            organiser=data["organiser"],
            quorum=data["quorum"],
            min_start_offset=data.get("minStartOffset", DEFAULT_MIN_START_OFFSET),
            min_stop_offset=data.get("minStopOffset", DEFAULT_MIN_STOP_OFFSET),
            max_field_length=data.get("maxFieldLength", FIELD_MAX_LENGTH),
        )
