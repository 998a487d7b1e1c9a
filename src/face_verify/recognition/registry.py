"""Registry of known identities with persistent storage."""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

import numpy as np

from .types import IdentityRecord

logger = logging.getLogger(__name__)

EMBEDDINGS_FILE = "embeddings.npz"
METADATA_FILE = "metadata.json"


class IdentityRegistry:
    """Ordered collection of known identities keyed by name."""

    def __init__(self, records: Optional[Iterable[IdentityRecord]] = None):
        """Initialize the registry.

        Args:
            records: Initial identity records; a later record with the
                same name replaces an earlier one
        """
        self._records: Dict[str, IdentityRecord] = {}
        for record in records or ():
            self.add(record)

    def add(self, record: IdentityRecord) -> None:
        """Add or replace an identity."""
        if record.name in self._records:
            logger.debug(f"Replacing identity: {record.name}")
        self._records[record.name] = record

    def add_embedding(
        self,
        name: str,
        embedding: np.ndarray,
        metadata: Optional[dict] = None,
    ) -> IdentityRecord:
        """Create a record from a raw embedding and add it."""
        record = IdentityRecord(
            name=name,
            embedding=np.asarray(embedding, dtype=np.float32).reshape(-1).copy(),
            metadata=dict(metadata or {}),
        )
        self.add(record)
        return record

    def get(self, name: str) -> Optional[IdentityRecord]:
        """Get a record by name."""
        return self._records.get(name)

    def remove(self, name: str) -> bool:
        """Remove an identity.

        Returns:
            True if removed, False if not found
        """
        if name in self._records:
            del self._records[name]
            logger.info(f"Removed identity: {name}")
            return True
        return False

    def clear(self) -> None:
        """Remove all identities."""
        self._records.clear()

    @property
    def names(self) -> List[str]:
        """Return registered names in insertion order."""
        return list(self._records.keys())

    @property
    def records(self) -> List[IdentityRecord]:
        """Return registered records in insertion order."""
        return list(self._records.values())

    def save(self, directory: Union[str, Path]) -> Path:
        """Save embeddings and metadata to ``directory``.

        Embeddings go to a compressed NPZ under generated keys (``e0``,
        ``e1``, ...); the JSON sidecar maps each key to its name and
        metadata, so any name can be stored.

        Returns:
            The directory written to
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        arrays: Dict[str, np.ndarray] = {}
        identities: List[dict] = []
        for index, record in enumerate(self._records.values()):
            key = f"e{index}"
            arrays[key] = record.embedding
            identities.append({"key": key, "name": record.name, "metadata": record.metadata})

        np.savez_compressed(directory / EMBEDDINGS_FILE, **arrays)
        with open(directory / METADATA_FILE, "w") as f:
            json.dump({"identities": identities}, f, indent=2)

        logger.info(f"Saved {len(self)} identities to {directory}")
        return directory

    @classmethod
    def load(cls, directory: Union[str, Path]) -> "IdentityRegistry":
        """Load a registry written by :meth:`save`.

        Raises:
            FileNotFoundError: If the embeddings file or sidecar is missing
            KeyError: If the sidecar names a key the embeddings file lacks
        """
        directory = Path(directory)
        embeddings_file = directory / EMBEDDINGS_FILE
        metadata_file = directory / METADATA_FILE
        for path in (embeddings_file, metadata_file):
            if not path.exists():
                raise FileNotFoundError(f"No registry found at {path}")

        with open(metadata_file, "r") as f:
            identities = json.load(f).get("identities", [])

        registry = cls()
        with np.load(embeddings_file) as npz:
            for entry in identities:
                registry.add_embedding(entry["name"], npz[entry["key"]], entry.get("metadata"))

        logger.info(f"Loaded {len(registry)} identities from {directory}")
        return registry

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[IdentityRecord]:
        return iter(list(self._records.values()))

    def __contains__(self, name: object) -> bool:
        if isinstance(name, IdentityRecord):
            name = name.name
        return name in self._records
