"""Value objects package."""
from .enrollment import (
    Committed,
    CollectingFace,
    CollectingName,
    EnrollmentIssue,
    EnrollmentStage,
    EnrollmentState,
    EnrollmentStep,
)
from .matching import AuthenticationResult, AuthenticationStatus, MatchOutcome
from .storage import LoadReport

__all__ = [
    "AuthenticationResult",
    "AuthenticationStatus",
    "Committed",
    "CollectingFace",
    "CollectingName",
    "EnrollmentIssue",
    "EnrollmentStage",
    "EnrollmentState",
    "EnrollmentStep",
    "LoadReport",
    "MatchOutcome",
]
