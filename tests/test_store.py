"""Tests for the SQLAlchemy job store."""

import pytest
from conftest import make_job

from job_feed.errors import StoreError
from job_feed.jobs.models import UserProfile
from job_feed.models import Job


class TestUpsert:
    def test_insert_and_get(self, store):
        job = make_job()
        assert store.upsert_jobs([job]) == 1
        loaded = store.get_job(job.id)
        assert loaded.company == "Test Corp"
        assert loaded.salary.base == 90000
        assert loaded.network_data.total_count == 0

    def test_colliding_key_replaces_record(self, store):
        store.upsert_jobs([make_job(apply_url="https://first.example", industry="Finance")])
        store.upsert_jobs([make_job(apply_url="https://second.example", industry="Consulting")])

        stats = store.get_stats()
        assert stats["total_jobs"] == 1
        loaded = store.get_job(make_job().id)
        assert loaded.apply_url == "https://second.example"
        assert loaded.industry == "Consulting"

    def test_missing_location_is_a_key(self, store):
        store.upsert_jobs([make_job(location=None)])
        store.upsert_jobs([make_job(location=None, title="Software Engineer", apply_url="https://x.example")])
        assert store.get_stats()["total_jobs"] == 1

    def test_empty_batch(self, store):
        assert store.upsert_jobs([]) == 0

    def test_embedding_round_trip(self, store):
        job = make_job(embedding=[0.1, 0.2, 0.3])
        store.upsert_jobs([job])
        assert store.get_job(job.id).embedding == [0.1, 0.2, 0.3]
        assert [j.id for j in store.jobs_with_embeddings()] == [job.id]

    def test_unembedded_jobs_not_listed_with_embeddings(self, store):
        store.upsert_jobs([make_job(embedding=None)])
        assert store.jobs_with_embeddings() == []

    def test_upsert_failure_raises_store_error(self, store, session_factory):
        Job.__table__.drop(session_factory.kw["bind"])
        with pytest.raises(StoreError):
            store.upsert_jobs([make_job()])


class TestActiveFlag:
    def test_deactivated_job_excluded(self, store):
        job = make_job()
        store.upsert_jobs([job])
        assert store.deactivate_job(job.id)

        assert store.get_jobs([job.id]) == []
        assert store.recent_active_jobs(10) == []
        assert store.get_jobs([job.id], active_only=False)[0].active is False

    def test_deactivate_unknown_job(self, store):
        assert store.deactivate_job("missing") is False

    def test_recent_active_jobs_limit(self, store):
        store.upsert_jobs([make_job(title=f"Engineer {i}") for i in range(5)])
        assert len(store.recent_active_jobs(3)) == 3


class TestSwipes:
    def test_history_is_chronological(self, store):
        for job_id in ["a", "b", "c"]:
            store.record_swipe("user-1", job_id, "like")
        history = store.swipe_history("user-1")
        assert [e.job_id for e in history] == ["a", "b", "c"]

    def test_history_keeps_most_recent(self, store):
        for job_id in ["a", "b", "c", "d"]:
            store.record_swipe("user-1", job_id, "pass")
        history = store.swipe_history("user-1", limit=2)
        assert [e.job_id for e in history] == ["c", "d"]

    def test_history_is_per_user(self, store):
        store.record_swipe("user-1", "a", "like")
        store.record_swipe("user-2", "b", "like")
        assert [e.job_id for e in store.swipe_history("user-2")] == ["b"]

    def test_invalid_action_rejected(self, store):
        with pytest.raises(ValueError, match="Unsupported"):
            store.record_swipe("user-1", "a", "superlike")

    def test_session_id_kept(self, store):
        event = store.record_swipe("user-1", "a", "save", session_id="sess-1")
        assert event.session_id == "sess-1"
        assert store.swipe_history("user-1")[0].session_id == "sess-1"


class TestProfiles:
    def test_save_and_load(self, store):
        store.save_profile(UserProfile(id="u1", name="Ada", major="Math", class_year=2027))
        profile = store.get_profile("u1")
        assert profile.name == "Ada"
        assert profile.class_year == 2027

    def test_missing_profile(self, store):
        assert store.get_profile("nobody") is None


class TestStats:
    def test_empty_store(self, store):
        stats = store.get_stats()
        assert stats["total_jobs"] == 0
        assert stats["total_swipes"] == 0

    def test_breakdowns(self, store):
        store.upsert_jobs([make_job(), make_job(title="Other", source="simplifyjobs")])
        store.record_swipe("u", "x", "like")
        store.record_swipe("u", "y", "like")
        stats = store.get_stats()
        assert stats["by_source"] == {"test": 1, "simplifyjobs": 1}
        assert stats["swipes_by_action"] == {"like": 2}
