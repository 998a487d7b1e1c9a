"""Identity matching: records, registry, embeddings and matchers."""

from .types import (
    NO_COMPARISON,
    IdentityRecord,
    MatchResult,
    RecognitionOutcome,
    is_accepted,
)
from .registry import IdentityRegistry
from .embeddings import (
    BaseEmbeddingBackend,
    OpenFaceEmbeddingBackend,
    EMBEDDING_BACKENDS,
    create_embedding_backend,
)
from .matcher import BaseIdentityMatcher, EmbeddingIdentityMatcher

__all__ = [
    "NO_COMPARISON",
    "IdentityRecord",
    "MatchResult",
    "RecognitionOutcome",
    "is_accepted",
    "IdentityRegistry",
    "BaseEmbeddingBackend",
    "OpenFaceEmbeddingBackend",
    "EMBEDDING_BACKENDS",
    "create_embedding_backend",
    "BaseIdentityMatcher",
    "EmbeddingIdentityMatcher",
]
