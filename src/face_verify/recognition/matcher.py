"""Nearest-neighbor identity matching for cropped faces."""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

import numpy as np

from .embeddings import BaseEmbeddingBackend, create_embedding_backend
from .types import IdentityRecord, MatchResult
from ..constants import get_embedding_config

logger = logging.getLogger(__name__)


class BaseIdentityMatcher(ABC):
    """Abstract base class for identity matchers.

    A matcher finds the registered identity closest to a face crop. When no
    comparison is possible it returns ``MatchResult.unavailable()`` rather
    than raising.
    """

    @abstractmethod
    def best_match(
        self,
        face_image: np.ndarray,
        registry: Iterable[IdentityRecord],
    ) -> MatchResult:
        """Return the closest identity to ``face_image`` and its distance."""
        pass

    def close(self) -> None:
        """Release resources held by the matcher."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class EmbeddingIdentityMatcher(BaseIdentityMatcher):
    """Matcher that compares embeddings by the backend's distance.

    The query embedding is extracted once per face and compared against
    every registered embedding in a single vectorized pass.
    """

    def __init__(self, backend: Optional[BaseEmbeddingBackend] = None):
        """Initialize the matcher.

        Args:
            backend: Embedding backend (created from config if None)
        """
        if backend is None:
            backend = create_embedding_backend(get_embedding_config().backend)
        self.backend = backend
        self._closed = False

    def best_match(
        self,
        face_image: np.ndarray,
        registry: Iterable[IdentityRecord],
    ) -> MatchResult:
        records: List[IdentityRecord] = list(registry)
        if not records:
            return MatchResult.unavailable()
        if face_image is None or face_image.size == 0:
            return MatchResult.unavailable()

        embedding = self.backend.extract(face_image)
        if embedding is None:
            logger.debug("Embedding extraction failed, face not comparable")
            return MatchResult.unavailable()

        query = np.asarray(embedding, dtype=np.float32).reshape(-1)
        candidates = [r for r in records if np.size(r.embedding) == query.size]
        if not candidates:
            logger.warning(
                f"No registered embedding has dimension {query.size}"
            )
            return MatchResult.unavailable()

        matrix = np.stack(
            [np.asarray(r.embedding, dtype=np.float32).reshape(-1) for r in candidates]
        )
        distances = self.backend.distances(query, matrix)
        best = int(np.argmin(distances))

        return MatchResult(identity=candidates[best], distance=float(distances[best]))

    def close(self) -> None:
        """Release the embedding backend. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self.backend.close()
        logger.info(f"Closed {self.backend.name} embedding backend")
