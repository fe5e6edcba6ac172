"""Matching and authentication value objects."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MatchOutcome(BaseModel):
    """Result of a nearest-neighbour search over enrolled identities."""
    accepted: bool = Field(..., description="Whether the nearest identity is within the threshold")
    name: Optional[str] = Field(None, description="Matched identity name, only set when accepted")
    distance: float = Field(..., description="Distance to the nearest identity, +inf when none enrolled")

    model_config = ConfigDict(frozen=True)


class AuthenticationStatus(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    NO_FACE_DETECTED = "no_face_detected"


class AuthenticationResult(BaseModel):
    """Outcome of a single authentication attempt.

    A rejected match still implies a face was detected; ``outcome`` is only
    missing when the detector found no face.
    """
    status: AuthenticationStatus = Field(..., description="Kind of outcome")
    outcome: Optional[MatchOutcome] = Field(None, description="Match result when a face was detected")

    model_config = ConfigDict(frozen=True)

    @property
    def accepted(self) -> bool:
        return self.status is AuthenticationStatus.ACCEPTED

    @property
    def name(self) -> Optional[str]:
        return self.outcome.name if self.outcome is not None else None
