"""Descriptor codec: converts descriptors to and from their durable form."""
import math
from numbers import Real
from typing import Any, List

import numpy as np

from faceauth.core.exceptions import CorruptDescriptorError, InvalidDescriptorError
from faceauth.domain.entities.identity import FaceDescriptor, make_descriptor

DEFAULT_DESCRIPTOR_LENGTH = 128


class DescriptorCodec:
    """Encodes descriptors as JSON-compatible lists of floats.

    Python floats are IEEE doubles and ``json`` writes their shortest
    round-trip repr, so ``decode(encode(d))`` is bit-for-bit equal to ``d``.
    """

    def __init__(self, length: int = DEFAULT_DESCRIPTOR_LENGTH) -> None:
        if length <= 0:
            raise ValueError(f"Descriptor length must be positive, got {length}")
        self.length = length

    def encode(self, descriptor: FaceDescriptor) -> List[float]:
        vec = np.asarray(descriptor, dtype=np.float64)
        if vec.shape != (self.length,):
            raise InvalidDescriptorError(
                f"Cannot encode descriptor of shape {vec.shape}, expected ({self.length},)",
                details={"shape": vec.shape, "expected": self.length},
            )
        return [float(x) for x in vec]

    def decode(self, raw: Any) -> FaceDescriptor:
        """Rebuild a descriptor from its durable form.

        Raises:
            CorruptDescriptorError: If ``raw`` is not a list of finite numbers
                of the configured length
        """
        if isinstance(raw, (str, bytes)) or not isinstance(raw, (list, tuple)):
            raise CorruptDescriptorError(
                f"Descriptor must be a sequence of numbers, got {type(raw).__name__}"
            )
        if len(raw) != self.length:
            raise CorruptDescriptorError(
                f"Descriptor has {len(raw)} values, expected {self.length}",
                details={"length": len(raw), "expected": self.length},
            )
        for index, value in enumerate(raw):
            if isinstance(value, bool) or not isinstance(value, Real):
                raise CorruptDescriptorError(
                    f"Descriptor value at index {index} is not a number",
                    details={"index": index},
                )
            try:
                finite = math.isfinite(value)
            except OverflowError:
                finite = False
            if not finite:
                raise CorruptDescriptorError(
                    f"Descriptor value at index {index} is not finite",
                    details={"index": index},
                )

        try:
            return make_descriptor(raw, self.length)
        except InvalidDescriptorError as e:
            raise CorruptDescriptorError(str(e), details=e.details) from e

    def validate(self, descriptor: Any) -> FaceDescriptor:
        """Coerce a live descriptor handed to the core, checking its length.

        Raises:
            InvalidDescriptorError: If the descriptor is malformed
        """
        return make_descriptor(descriptor, self.length)
