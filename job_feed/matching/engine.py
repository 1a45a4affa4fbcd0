"""Personalized feed: retrieve candidates, score them, rank them."""

import logging
from typing import Optional

from job_feed.errors import ProfileNotFoundError
from job_feed.jobs.models import JobRecord, PreferenceProfile, ScoredJob, UserProfile
from job_feed.matching.preferences import learn_preferences
from job_feed.matching.scoring import score_job
from job_feed.storage.store import JobStore
from job_feed.vectors.embedding import EmbeddingService
from job_feed.vectors.index import VectorIndex

logger = logging.getLogger("job_feed.matching")


class MatchingEngine:
    """Builds a ranked feed for one user.

    Vector retrieval is best-effort: any failure, or an empty result, falls
    back to the most recently updated active jobs so the feed is not empty
    just because the vector service is down.
    """

    def __init__(
        self,
        store: JobStore,
        embeddings: EmbeddingService,
        index: VectorIndex,
        candidate_pool: int = 50,
        feed_size: int = 20,
        fallback_limit: int = 50,
        history_limit: int = 100,
        neutral_semantic: float = 75.0,
    ):
        self.store = store
        self.embeddings = embeddings
        self.index = index
        self.candidate_pool = candidate_pool
        self.feed_size = feed_size
        self.fallback_limit = fallback_limit
        self.history_limit = history_limit
        self.neutral_semantic = neutral_semantic

    def load_profile(self, user_id: str) -> UserProfile:
        profile = self.store.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return profile

    def learn_preferences(self, user_id: str) -> PreferenceProfile:
        """Recompute the user's preferences from their swipe log."""
        try:
            events = self.store.swipe_history(user_id, limit=self.history_limit)
            swiped = self.store.get_jobs(sorted({e.job_id for e in events}), active_only=False)
        except Exception as e:
            logger.warning("[user:%s] Could not load swipe history, using defaults: %s", user_id, e)
            return learn_preferences([], {})

        lookup = {job.id: job for job in swiped}
        preferences = learn_preferences(events, lookup)
        logger.debug(
            "[user:%s] Learned preferences from %d events: %d liked, %d passed companies",
            user_id, len(events), len(preferences.liked_companies), len(preferences.disliked_companies),
        )
        return preferences

    def get_feed(
        self,
        user_id: str,
        preferences: Optional[PreferenceProfile] = None,
    ) -> list[ScoredJob]:
        """Return at most `feed_size` jobs, highest chemistry first.

        Raises ProfileNotFoundError if the user has no profile; every other
        failure degrades the feed instead of failing it.
        """
        profile = self.load_profile(user_id)
        if preferences is None:
            preferences = self.learn_preferences(user_id)

        candidates = self.find_semantic_matches(profile, preferences)
        if candidates is None:
            candidates = self.fallback_candidates(user_id)

        # Candidates arrive in tie-break order; sorted() is stable
        scored = [
            score_job(job, preferences, semantic)
            for job, semantic in candidates
            if self.passes_filters(job, preferences)
        ]
        scored = sorted(scored, key=lambda s: s.chemistry, reverse=True)

        logger.info("[user:%s] Feed built: %d candidates, %d returned",
                    user_id, len(candidates), min(len(scored), self.feed_size))
        return scored[: self.feed_size]

    def find_semantic_matches(
        self,
        profile: UserProfile,
        preferences: PreferenceProfile,
    ) -> Optional[list[tuple[JobRecord, float]]]:
        """Candidates with semantic sub-scores in similarity order, or None to signal fallback."""
        try:
            query_vector = self.embeddings.embed_profile(profile, preferences)
            matches = self.index.query(query_vector, self.candidate_pool, filter={"type": "job"})
            if not matches:
                logger.info("[user:%s] Vector search returned no matches, using fallback", profile.id)
                return None

            jobs = {job.id: job for job in self.store.get_jobs([m.id for m in matches])}
        except Exception as e:
            logger.error("[user:%s] Error in semantic matching, using fallback: %s", profile.id, e)
            return None

        # matches are already best-first; keep that order as the tie-break
        candidates = [
            (jobs[m.id], self.semantic_score(m.score))
            for m in matches
            if m.id in jobs
        ]
        if not candidates:
            logger.info("[user:%s] No active jobs behind %d vector matches, using fallback",
                        profile.id, len(matches))
            return None
        return candidates

    def fallback_candidates(self, user_id: str) -> list[tuple[JobRecord, float]]:
        """Most recently updated active jobs, in id order, with a neutral semantic score."""
        try:
            jobs = self.store.recent_active_jobs(self.fallback_limit)
        except Exception as e:
            logger.error("[user:%s] Fallback job lookup failed: %s", user_id, e)
            return []
        jobs.sort(key=lambda job: job.id)
        return [(job, self.neutral_semantic) for job in jobs]

    @staticmethod
    def semantic_score(similarity: float) -> float:
        """Cosine similarity mapped onto 0-100."""
        return round(max(0.0, min(1.0, similarity)) * 100, 1)

    def passes_filters(self, job: JobRecord, preferences: PreferenceProfile) -> bool:
        # Disliked companies are penalized through scoring, not excluded here
        return job.active
