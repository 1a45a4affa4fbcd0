"""Approximate nearest-neighbor index boundary and its in-process implementation."""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

import numpy as np

from job_feed.errors import VectorIndexError

logger = logging.getLogger("job_feed.vectors.index")


@dataclass
class VectorMatch:
    id: str
    score: float
    metadata: dict = field(default_factory=dict)


class VectorIndex(ABC):
    @abstractmethod
    def upsert(self, item_id: str, vector: list[float], metadata: Optional[dict] = None) -> None:
        ...

    @abstractmethod
    def query(self, vector: list[float], k: int, filter: Optional[dict] = None) -> list[VectorMatch]:
        """Up to k matches, best first."""

    @abstractmethod
    def delete(self, item_id: str) -> None:
        ...

    @abstractmethod
    def count(self) -> int:
        ...


class InMemoryVectorIndex(VectorIndex):
    """Exact cosine-similarity search over unit-normalized vectors.

    Metadata filters match on equality of every given key. Safe to share
    between threads.
    """

    def __init__(self, dimensions: int):
        self.dimensions = dimensions
        self._vectors: dict[str, np.ndarray] = {}
        self._metadata: dict[str, dict] = {}
        self._lock = threading.Lock()

    def _normalize(self, vector: list[float]) -> np.ndarray:
        array = np.asarray(vector, dtype=float)
        if array.shape != (self.dimensions,):
            raise VectorIndexError(
                f"Vector has shape {array.shape}, index expects ({self.dimensions},)"
            )
        norm = np.linalg.norm(array)
        return array / norm if norm > 0 else array

    def upsert(self, item_id: str, vector: list[float], metadata: Optional[dict] = None) -> None:
        normalized = self._normalize(vector)
        stored = dict(metadata or {})
        stored.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
        with self._lock:
            self._vectors[item_id] = normalized
            self._metadata[item_id] = stored
        logger.debug("Upserted vector %s", item_id)

    def query(self, vector: list[float], k: int, filter: Optional[dict] = None) -> list[VectorMatch]:
        query = self._normalize(vector)
        with self._lock:
            ids = [
                item_id for item_id, meta in self._metadata.items()
                if not filter or all(meta.get(key) == value for key, value in filter.items())
            ]
            if not ids or k <= 0:
                return []
            matrix = np.stack([self._vectors[item_id] for item_id in ids])
            metadata = [dict(self._metadata[item_id]) for item_id in ids]

        scores = matrix @ query
        order = np.argsort(-scores, kind="stable")[:k]
        return [
            VectorMatch(id=ids[i], score=float(scores[i]), metadata=metadata[i])
            for i in order
        ]

    def delete(self, item_id: str) -> None:
        with self._lock:
            self._vectors.pop(item_id, None)
            self._metadata.pop(item_id, None)

    def count(self) -> int:
        with self._lock:
            return len(self._vectors)
