"""Feed service: the cached public entry points and their wiring."""

import logging
from pathlib import Path
from typing import Optional

from job_feed.config import AppConfig
from job_feed.enrichment.enricher import Enricher
from job_feed.jobs.models import PreferenceProfile, ScoredJob, SwipeEvent
from job_feed.matching.engine import MatchingEngine
from job_feed.models import create_session_factory
from job_feed.pipeline import IngestionPipeline, SyncResult
from job_feed.storage.cache import MemoryCache, UserCache
from job_feed.storage.store import JobStore, SqlJobStore
from job_feed.vectors.embedding import EmbeddingService, HashingEmbeddingService, OpenAIEmbeddingService
from job_feed.vectors.index import InMemoryVectorIndex, VectorIndex

logger = logging.getLogger("job_feed.feed")


class FeedService:
    """Wraps the matching engine and ingestion pipeline behind the user cache."""

    def __init__(
        self,
        store: JobStore,
        engine: MatchingEngine,
        pipeline: IngestionPipeline,
        cache: UserCache,
        feed_ttl: int = 3600,
        preferences_ttl: int = 1800,
    ):
        self.store = store
        self.engine = engine
        self.pipeline = pipeline
        self.cache = cache
        self.feed_ttl = feed_ttl
        self.preferences_ttl = preferences_ttl

    def get_preferences(self, user_id: str) -> PreferenceProfile:
        return self.cache.get_or_compute(
            UserCache.preferences_key(user_id),
            self.preferences_ttl,
            lambda: self.engine.learn_preferences(user_id),
            user_id=user_id,
        )

    def get_feed(self, user_id: str) -> list[ScoredJob]:
        """Ranked feed for the user, served from cache when fresh."""
        return self.cache.get_or_compute(
            UserCache.feed_key(user_id),
            self.feed_ttl,
            lambda: self.engine.get_feed(user_id, preferences=self.get_preferences(user_id)),
            user_id=user_id,
        )

    def sync_listings(self, source_texts: list[str]) -> SyncResult:
        return self.pipeline.sync_listings(source_texts)

    def record_swipe(
        self,
        user_id: str,
        job_id: str,
        action: str,
        session_id: Optional[str] = None,
    ) -> SwipeEvent:
        """Append a swipe, then drop the user's cached feed and preferences."""
        event = self.store.record_swipe(user_id, job_id, action, session_id)
        self.record_swipe_invalidation(user_id)
        return event

    def record_swipe_invalidation(self, user_id: str) -> None:
        self.cache.invalidate_user(user_id)
        logger.debug("[user:%s] Invalidated cached feed and preferences", user_id)


def build_embedding_service(config: AppConfig) -> EmbeddingService:
    dimensions = config.embedding.dimensions
    if config.embedding.provider == "openai" and config.api_keys.openai_api_key:
        return OpenAIEmbeddingService(
            api_key=config.api_keys.openai_api_key,
            model=config.embedding.model,
            dimensions=dimensions,
        )
    logger.info("Using hashing embeddings (%d dimensions)", dimensions)
    return HashingEmbeddingService(dimensions)


def rebuild_index(store: JobStore, index: VectorIndex) -> int:
    """Load embeddings persisted with the jobs back into the vector index."""
    loaded = 0
    for job in store.jobs_with_embeddings():
        try:
            index.upsert(job.id, job.embedding, {
                "type": "job",
                "company": job.company,
                "title": job.title,
                "industry": job.industry,
                "location": job.location,
                "remote_type": job.remote_type,
            })
            loaded += 1
        except Exception as e:
            logger.warning("Skipping stored embedding for job %s: %s", job.id, e)
    logger.info("Vector index warmed with %d job embeddings", loaded)
    return loaded


def build_feed_service(config: AppConfig) -> FeedService:
    """Construct every collaborator from config and wire them together."""
    if config.database.url.startswith("sqlite:///"):
        db_file = config.database.url.removeprefix("sqlite:///")
        if db_file and db_file != ":memory:":
            Path(db_file).parent.mkdir(parents=True, exist_ok=True)

    store = SqlJobStore(create_session_factory(config.database.url))
    embeddings = build_embedding_service(config)
    index = InMemoryVectorIndex(config.embedding.dimensions)
    rebuild_index(store, index)

    enricher = Enricher(embeddings, index, source=config.ingest.source_tag)
    pipeline = IngestionPipeline(enricher, store, max_workers=config.ingest.max_workers)
    engine = MatchingEngine(
        store,
        embeddings,
        index,
        candidate_pool=config.matching.candidate_pool,
        feed_size=config.matching.feed_size,
        fallback_limit=config.matching.fallback_limit,
        history_limit=config.matching.history_limit,
        neutral_semantic=config.matching.neutral_semantic,
    )
    cache = UserCache(
        MemoryCache(max_entries=config.cache.max_entries),
        max_users=config.cache.max_entries,
        index_ttl=max(config.cache.feed_ttl, config.cache.preferences_ttl),
    )

    return FeedService(
        store,
        engine,
        pipeline,
        cache,
        feed_ttl=config.cache.feed_ttl,
        preferences_ttl=config.cache.preferences_ttl,
    )
