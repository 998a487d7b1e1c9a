"""Base class for face embedding backends."""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np


class BaseEmbeddingBackend(ABC):
    """Abstract base class for face embedding extraction."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of the embedding backend."""
        pass

    @property
    @abstractmethod
    def embedding_dim(self) -> int:
        """Return the dimensionality of the embedding vector."""
        pass

    @abstractmethod
    def extract(self, face_image: np.ndarray) -> Optional[np.ndarray]:
        """Extract embedding from a face image.

        Args:
            face_image: RGB face image (cropped)

        Returns:
            Embedding vector as numpy array, or None if extraction failed
        """
        pass

    def distance(self, embedding1: np.ndarray, embedding2: np.ndarray) -> float:
        """Calculate Euclidean distance between two embeddings.

        Args:
            embedding1: First embedding vector
            embedding2: Second embedding vector

        Returns:
            Euclidean distance (lower means more similar)
        """
        return float(self.distances(embedding1, np.reshape(embedding2, -1))[0])

    def distances(self, query: np.ndarray, embeddings: np.ndarray) -> np.ndarray:
        """Calculate Euclidean distances from one embedding to many.

        Args:
            query: Query embedding vector
            embeddings: Matrix with one embedding per row (a single vector
                is treated as one row)

        Returns:
            One distance per row of ``embeddings``
        """
        matrix = np.atleast_2d(embeddings)
        return np.linalg.norm(matrix - np.reshape(query, -1), axis=1)

    def close(self) -> None:
        """Release native resources held by the backend."""
        pass
