"""Core identity domain entities."""
from typing import Any, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from faceauth.core.exceptions import InvalidDescriptorError

# A face descriptor is a 1-D, read-only float64 vector produced by the upstream model.
FaceDescriptor = np.ndarray


def make_descriptor(values: Any, length: Optional[int] = None) -> FaceDescriptor:
    """Build an immutable descriptor from any numeric sequence.

    float32 input (the usual model output) widens to float64 exactly.

    Args:
        values: Sequence or array of numbers
        length: Expected number of elements, if known

    Returns:
        Read-only float64 array

    Raises:
        InvalidDescriptorError: If the input is not a finite 1-D numeric vector
            of the expected length
    """
    try:
        vec = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidDescriptorError(f"Descriptor is not numeric: {e}")

    if vec.ndim != 1:
        raise InvalidDescriptorError(
            "Descriptor must be one-dimensional",
            details={"shape": vec.shape},
        )
    if length is not None and vec.shape[0] != length:
        raise InvalidDescriptorError(
            f"Descriptor has length {vec.shape[0]}, expected {length}",
            details={"length": int(vec.shape[0]), "expected": length},
        )
    if not np.all(np.isfinite(vec)):
        raise InvalidDescriptorError("Descriptor contains NaN or infinite values")

    vec.setflags(write=False)
    return vec


def descriptor_distance(a: FaceDescriptor, b: FaceDescriptor) -> float:
    """Euclidean distance between two descriptors."""
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.sqrt(np.sum(diff * diff)))


class Identity(BaseModel):
    """An enrolled person: a unique name and the descriptor captured at enrollment."""
    name: str = Field(..., min_length=1, description="Unique, case-sensitive identity key")
    descriptor: FaceDescriptor = Field(..., description="Face descriptor captured at enrollment")

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @field_validator("descriptor", mode="before")
    @classmethod
    def validate_descriptor(cls, v: Any) -> FaceDescriptor:
        """Copy the descriptor into an immutable float64 vector owned by the identity."""
        return make_descriptor(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject whitespace-only names; the name itself is kept exactly as given."""
        if not v.strip():
            raise ValueError("Identity name must not be blank")
        return v
