"""Face embedding backends.

Embedding backends extract numerical representations (embeddings) from face images
for comparison and recognition.
"""

from .base import BaseEmbeddingBackend
from .openface import OpenFaceEmbeddingBackend

EMBEDDING_BACKENDS = {
    "openface": OpenFaceEmbeddingBackend,
}


def create_embedding_backend(name: str, **kwargs) -> BaseEmbeddingBackend:
    """Instantiate an embedding backend by name.

    Raises:
        ValueError: If the backend is unknown
    """
    if name not in EMBEDDING_BACKENDS:
        raise ValueError(
            f"Unknown embedding backend: {name}. "
            f"Available: {list(EMBEDDING_BACKENDS.keys())}"
        )
    return EMBEDDING_BACKENDS[name](**kwargs)


__all__ = [
    "BaseEmbeddingBackend",
    "OpenFaceEmbeddingBackend",
    "EMBEDDING_BACKENDS",
    "create_embedding_backend",
]
