"""Face recognition types."""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple

import numpy as np

# Distance reported when no valid comparison was possible
NO_COMPARISON = -1.0


@dataclass(frozen=True)
class IdentityRecord:
    """A known person and their reference embedding.

    Records compare and hash by name only, so a set of records holds each
    person once no matter how many faces matched them.
    """

    name: str
    embedding: np.ndarray = field(compare=False, hash=False, repr=False)
    metadata: dict = field(default_factory=dict, compare=False, hash=False, repr=False)


@dataclass(frozen=True)
class MatchResult:
    """Closest registered identity for one face and its distance."""

    identity: Optional[IdentityRecord]
    distance: float

    @classmethod
    def unavailable(cls) -> "MatchResult":
        """Result for a face that could not be compared."""
        return cls(identity=None, distance=NO_COMPARISON)

    @property
    def is_comparable(self) -> bool:
        """Check if the distance comes from a real comparison."""
        return self.identity is not None and self.distance >= 0


def is_accepted(distance: float, threshold: float) -> bool:
    """Return True when ``distance`` counts as a match under ``threshold``.

    Negative distances mark failed comparisons and are never accepted.
    """
    return 0 <= distance < threshold


@dataclass(frozen=True)
class RecognitionOutcome:
    """Result of recognizing all faces in one frame."""

    matched: FrozenSet[IdentityRecord] = frozenset()
    last_distance: Optional[float] = None
    # Accepted identities in the order their faces were processed
    order: Tuple[IdentityRecord, ...] = ()

    @property
    def recognized(self) -> bool:
        """Check if any face in the frame matched a known identity."""
        return bool(self.matched)

    @property
    def first_match(self) -> Optional[IdentityRecord]:
        """Return the first accepted identity, if any."""
        return self.order[0] if self.order else None

    @property
    def names(self) -> List[str]:
        """Return names of matched identities in processing order."""
        return [record.name for record in self.order]

    @property
    def match_percent(self) -> Optional[float]:
        """Similarity readout derived from the last distance, in percent."""
        if self.last_distance is None:
            return None
        return (1.0 - self.last_distance) * 100.0

    def __bool__(self) -> bool:
        return self.recognized

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "recognized": self.recognized,
            "matched": self.names,
            "last_distance": self.last_distance,
            "match_percent": self.match_percent,
        }
