"""Shared fixtures: temporary SQLite store, small embeddings, fakes."""

import os
import tempfile

import pytest

from job_feed.enrichment.enricher import Enricher
from job_feed.jobs.models import JobRecord, NetworkData, Salary, UserProfile
from job_feed.matching.engine import MatchingEngine
from job_feed.models import create_session_factory
from job_feed.pipeline import IngestionPipeline
from job_feed.storage.store import SqlJobStore
from job_feed.vectors.embedding import HashingEmbeddingService
from job_feed.vectors.index import InMemoryVectorIndex

TEST_DIMENSIONS = 64


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingIndex(InMemoryVectorIndex):
    """Vector index whose queries always fail."""

    def query(self, vector, k, filter=None):
        raise ConnectionError("vector service unavailable")


class FailingEmbeddings(HashingEmbeddingService):
    def embed(self, text):
        raise RuntimeError("embedding provider down")


def make_job(**kwargs) -> JobRecord:
    defaults = dict(
        company="Test Corp",
        title="Software Engineer",
        location="New York, NY",
        remote_type="onsite",
        salary=Salary(base=90000, bonus=9000, total=99000, benefits=["PTO"]),
        industry="Technology",
        company_size="Medium (100-10,000)",
        apply_url="https://example.com/apply",
        source="test",
        network_data=NetworkData(total_count=0),
    )
    defaults.update(kwargs)
    return JobRecord(**defaults)


@pytest.fixture
def session_factory():
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = os.path.join(tmpdir, "test.db")
        factory = create_session_factory(f"sqlite:///{db_path}")
        yield factory
        factory.kw["bind"].dispose()


@pytest.fixture
def store(session_factory):
    return SqlJobStore(session_factory)


@pytest.fixture
def embeddings():
    return HashingEmbeddingService(TEST_DIMENSIONS)


@pytest.fixture
def index():
    return InMemoryVectorIndex(TEST_DIMENSIONS)


@pytest.fixture
def enricher(embeddings, index):
    return Enricher(embeddings, index, source="test")


@pytest.fixture
def pipeline(enricher, store):
    return IngestionPipeline(enricher, store, max_workers=4)


@pytest.fixture
def engine(store, embeddings, index):
    return MatchingEngine(store, embeddings, index)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def user(store):
    profile = UserProfile(id="user-1", email="student@example.edu", name="Test Student",
                          school="Yale", major="Computer Science", class_year=2026)
    store.save_profile(profile)
    return profile


SAMPLE_MARKDOWN = """\
# Summer 2026 Internships

Some intro text.

| Company | Role | Location | Application/Link | Date Posted |
| ------- | ---- | -------- | ---------------- | ----------- |
| Acme Labs | Software Engineer Intern | Remote | [Apply](https://acme.example/apply) | Oct 01 |
| **[Globex](https://globex.example)** | Data Science Intern | New York, NY | <a href="https://globex.example/jobs/1"><img src="apply.png" alt="Apply"></a> | Oct 02 |
| Initech | Backend Intern | Hybrid - Austin, TX | https://initech.example/careers | Oct 03 |
| Broken Row | Missing Columns |
| Google | Software Engineering Intern | Mountain View, CA | [Apply](https://google.example/apply) | Oct 04 |

## Other section

| Not | A | Listing | Table |
"""
