"""Embedding gateway: text -> fixed-length vector for jobs and users."""

import hashlib
import logging
import re
import threading
from abc import ABC, abstractmethod

import numpy as np
from cachetools import LRUCache

from job_feed.errors import EmbeddingError
from job_feed.jobs.models import JobRecord, PreferenceProfile, UserProfile

logger = logging.getLogger("job_feed.vectors.embedding")

DEFAULT_DIMENSIONS = 1536


def job_text(job: JobRecord) -> str:
    """Text summary of a job used for its embedding."""
    parts = []
    if job.title:
        parts.append(f"Title: {job.title}")
    if job.company:
        parts.append(f"Company: {job.company}")
    if job.description:
        parts.append(f"Description: {job.description}")
    if job.industry:
        parts.append(f"Industry: {job.industry}")
    if job.requirements:
        parts.append(f"Requirements: {', '.join(job.requirements)}")
    if job.location:
        parts.append(f"Location: {job.location}")
    if job.remote_type:
        parts.append(f"Work Type: {job.remote_type}")
    return ". ".join(parts)


def profile_text(profile: UserProfile, preferences: PreferenceProfile) -> str:
    """Text summary of a user and their learned preferences, used as the query."""
    parts = []
    if profile.major:
        parts.append(f"Major: {profile.major}")
    if profile.class_year:
        parts.append(f"Graduation Year: {profile.class_year}")
    if preferences.preferred_industries:
        parts.append(f"Interested in: {', '.join(sorted(preferences.preferred_industries))}")
    if preferences.liked_companies:
        parts.append(f"Likes companies like: {', '.join(sorted(preferences.liked_companies))}")
    if preferences.work_style != "any":
        parts.append(f"Prefers: {preferences.work_style} work")
    if preferences.location_preference:
        parts.append(f"Location preference: {', '.join(preferences.location_preference)}")
    return ". ".join(parts)


class EmbeddingService(ABC):
    """Produces vectors of one fixed dimensionality."""

    def __init__(self, dimensions: int = DEFAULT_DIMENSIONS):
        self.dimensions = dimensions

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        ...

    def embed_job(self, job: JobRecord) -> list[float]:
        return self.embed(job_text(job))

    def embed_profile(self, profile: UserProfile, preferences: PreferenceProfile) -> list[float]:
        return self.embed(profile_text(profile, preferences))

    def _check(self, vector: list[float]) -> list[float]:
        if len(vector) != self.dimensions:
            raise EmbeddingError(
                f"Expected a {self.dimensions}-dimensional embedding, got {len(vector)}"
            )
        return vector


class OpenAIEmbeddingService(EmbeddingService):
    """Embeddings from the OpenAI API. Raises EmbeddingError on any API failure."""

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        dimensions: int = DEFAULT_DIMENSIONS,
    ):
        super().__init__(dimensions)
        from openai import OpenAI

        self.client = OpenAI(api_key=api_key)
        self.model = model

    def embed(self, text: str) -> list[float]:
        try:
            response = self.client.embeddings.create(
                model=self.model,
                input=text or " ",
                dimensions=self.dimensions,
            )
        except Exception as e:
            logger.warning("OpenAI embedding request failed: %s", e)
            raise EmbeddingError(f"OpenAI embedding request failed: {e}") from e

        return self._check(list(response.data[0].embedding))


class HashingEmbeddingService(EmbeddingService):
    """Deterministic feature-hashing embeddings; no network access needed.

    Each token seeds a random unit direction and the text vector is the
    normalized sum of its tokens' directions, so texts sharing vocabulary
    land close together.
    """

    TOKEN = re.compile(r"[a-z0-9+#.]+")

    def __init__(self, dimensions: int = DEFAULT_DIMENSIONS, max_cached_tokens: int = 50000):
        super().__init__(dimensions)
        self._token_cache: LRUCache = LRUCache(maxsize=max_cached_tokens)
        self._lock = threading.Lock()

    def _token_vector(self, token: str) -> np.ndarray:
        with self._lock:
            vector = self._token_cache.get(token)
        if vector is None:
            seed = int(hashlib.md5(token.encode("utf-8")).hexdigest()[:16], 16)
            vector = np.random.default_rng(seed).standard_normal(self.dimensions)
            with self._lock:
                self._token_cache[token] = vector
        return vector

    def embed(self, text: str) -> list[float]:
        vector = np.zeros(self.dimensions)
        for token in self.TOKEN.findall(text.lower()):
            vector += self._token_vector(token)

        norm = np.linalg.norm(vector)
        if norm > 0:
            vector /= norm
        return self._check(vector.tolist())
