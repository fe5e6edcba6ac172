"""Nearest-neighbour matching of a presented descriptor against enrolled identities."""
import math
from typing import Sequence

import numpy as np

from faceauth.core.exceptions import InvalidDescriptorError
from faceauth.core.logging import get_logger
from faceauth.domain.entities.identity import FaceDescriptor, Identity
from faceauth.domain.value_objects.matching import MatchOutcome

logger = get_logger(__name__)

DEFAULT_MATCH_THRESHOLD = 0.6


class Matcher:
    """Euclidean nearest-neighbour matcher with a strict distance threshold.

    The nearest candidate is accepted only when its distance is strictly below
    ``threshold``. Ties go to the candidate that comes first.
    """

    def __init__(self, threshold: float = DEFAULT_MATCH_THRESHOLD) -> None:
        if not math.isfinite(threshold) or threshold <= 0:
            raise ValueError(f"Match threshold must be a positive finite number, got {threshold}")
        self.threshold = float(threshold)

    def find_best_match(
        self,
        query: FaceDescriptor,
        candidates: Sequence[Identity],
    ) -> MatchOutcome:
        """Find the enrolled identity closest to ``query``.

        Args:
            query: Descriptor of the face presented for authentication
            candidates: Enrolled identities in iteration order

        Returns:
            MatchOutcome; ``name`` is only set when the match is accepted

        Raises:
            InvalidDescriptorError: If query and candidate descriptors differ in shape
        """
        if not candidates:
            return MatchOutcome(accepted=False, name=None, distance=math.inf)

        query = np.asarray(query, dtype=np.float64).reshape(-1)
        try:
            matrix = np.stack([np.asarray(c.descriptor, dtype=np.float64) for c in candidates])
        except ValueError as e:
            raise InvalidDescriptorError(f"Enrolled descriptors differ in length: {e}") from e
        if matrix.ndim != 2 or matrix.shape[1] != query.shape[0]:
            raise InvalidDescriptorError(
                "Query descriptor does not match enrolled descriptor length",
                details={"query_length": int(query.shape[0]), "candidate_shape": matrix.shape},
            )

        diff = matrix - query
        distances = np.sqrt(np.sum(diff * diff, axis=1))

        # argmin returns the first index on ties
        best_idx = int(np.argmin(distances))
        best_distance = float(distances[best_idx])
        accepted = best_distance < self.threshold

        logger.debug(
            "Nearest identity",
            candidate=candidates[best_idx].name,
            distance=best_distance,
            threshold=self.threshold,
            accepted=accepted,
        )

        return MatchOutcome(
            accepted=accepted,
            name=candidates[best_idx].name if accepted else None,
            distance=best_distance,
        )
