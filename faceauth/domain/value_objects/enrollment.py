"""Enrollment workflow states.

The workflow moves ``CollectingName -> CollectingFace -> Committed``; each
state is an immutable value tagged by ``stage``.
"""
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from faceauth.domain.entities.identity import Identity


class EnrollmentStage(str, Enum):
    COLLECTING_NAME = "collecting_name"
    COLLECTING_FACE = "collecting_face"
    COMMITTED = "committed"


class EnrollmentIssue(str, Enum):
    """Recoverable conditions reported to the user during enrollment."""
    EMPTY_NAME = "empty_name"
    NAME_EXISTS = "name_exists"
    NO_FACE_DETECTED = "no_face_detected"
    # Another enrollment committed the same name between name entry and capture.
    NAME_CONFLICT = "name_conflict"


class CollectingName(BaseModel):
    stage: Literal[EnrollmentStage.COLLECTING_NAME] = EnrollmentStage.COLLECTING_NAME

    model_config = ConfigDict(frozen=True)


class CollectingFace(BaseModel):
    stage: Literal[EnrollmentStage.COLLECTING_FACE] = EnrollmentStage.COLLECTING_FACE
    name: str = Field(..., min_length=1, description="Name accepted in the previous step")

    model_config = ConfigDict(frozen=True)


class Committed(BaseModel):
    stage: Literal[EnrollmentStage.COMMITTED] = EnrollmentStage.COMMITTED
    identity: Identity = Field(..., description="Identity stored in the repository")

    model_config = ConfigDict(frozen=True)


EnrollmentState = Union[CollectingName, CollectingFace, Committed]


class EnrollmentStep(BaseModel):
    """Result of a single enrollment transition."""
    state: EnrollmentState = Field(..., discriminator="stage")
    issue: Optional[EnrollmentIssue] = Field(None, description="Why the transition did not advance")

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return self.issue is None
