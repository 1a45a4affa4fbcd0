"""Turns raw listings into canonical job records with derived attributes."""

import logging
from collections.abc import Iterable
from typing import Optional

from job_feed.enrichment.estimators import (
    GrowthEstimator,
    LifestyleEstimator,
    NetworkEstimator,
    PlaceholderGrowthEstimator,
    PlaceholderLifestyleEstimator,
    PlaceholderNetworkEstimator,
    SalaryEstimator,
    TitleSalaryEstimator,
)
from job_feed.jobs.models import GrowthData, JobRecord, LifestyleData, NetworkData, RawListing, Salary
from job_feed.vectors.embedding import EmbeddingService
from job_feed.vectors.index import VectorIndex

logger = logging.getLogger("job_feed.enrichment")

DEFAULT_INDUSTRY = "Technology"
DEFAULT_COMPANY_SIZE = "Medium (100-10,000)"

# Company-name fragments -> industry, checked in order
INDUSTRY_KEYWORDS = [
    ("Technology", ("google", "meta", "apple", "microsoft")),
    ("Finance", ("goldman", "jpmorgan", "morgan stanley", "blackrock")),
    ("Consulting", ("mckinsey", "bain", "bcg", "deloitte")),
]

COMPANY_SIZE_KEYWORDS = [
    ("Large (10,000+)", ("google", "meta", "apple", "microsoft", "amazon", "netflix")),
    ("Startup (< 100)", ("startup", "incubator")),
]


def determine_remote_type(location: str) -> Optional[str]:
    """remote / hybrid / onsite from free-text location; None when blank."""
    if not location:
        return None
    location_lower = location.lower()
    if "remote" in location_lower:
        return "remote"
    if "hybrid" in location_lower:
        return "hybrid"
    return "onsite"


def _lookup(company: str, table: list[tuple[str, tuple[str, ...]]], default: str) -> str:
    company_lower = company.lower()
    for label, fragments in table:
        if any(fragment in company_lower for fragment in fragments):
            return label
    return default


def categorize_industry(company: str) -> str:
    return _lookup(company, INDUSTRY_KEYWORDS, DEFAULT_INDUSTRY)


def determine_company_size(company: str) -> str:
    return _lookup(company, COMPANY_SIZE_KEYWORDS, DEFAULT_COMPANY_SIZE)


def dedupe_listings(listings: Iterable[RawListing]) -> list[RawListing]:
    """Drop repeats of the (company, title, location) key, keeping first occurrence order."""
    seen: set[tuple[str, str, str]] = set()
    unique = []
    for listing in listings:
        if listing.key in seen:
            continue
        seen.add(listing.key)
        unique.append(listing)
    return unique


class Enricher:
    """Builds a JobRecord from a RawListing, then embeds and indexes it.

    Estimator and embedding failures are logged and degrade the record;
    they never abort it.
    """

    def __init__(
        self,
        embeddings: EmbeddingService,
        index: VectorIndex,
        source: str = "simplifyjobs",
        salary_estimator: Optional[SalaryEstimator] = None,
        lifestyle_estimator: Optional[LifestyleEstimator] = None,
        network_estimator: Optional[NetworkEstimator] = None,
        growth_estimator: Optional[GrowthEstimator] = None,
    ):
        self.embeddings = embeddings
        self.index = index
        self.source = source
        self.salary_estimator = salary_estimator or TitleSalaryEstimator()
        self.lifestyle_estimator = lifestyle_estimator or PlaceholderLifestyleEstimator()
        self.network_estimator = network_estimator or PlaceholderNetworkEstimator()
        self.growth_estimator = growth_estimator or PlaceholderGrowthEstimator()

    def _estimate(self, estimator, listing: RawListing, fallback):
        try:
            return estimator.estimate(listing)
        except Exception as e:
            logger.warning(
                "%s failed for %s - %s: %s",
                type(estimator).__name__, listing.company, listing.title, e,
            )
            return fallback

    def enrich(self, listing: RawListing) -> JobRecord:
        record = JobRecord(
            company=listing.company,
            title=listing.title,
            location=listing.location or None,
            remote_type=determine_remote_type(listing.location),
            salary=self._estimate(self.salary_estimator, listing, Salary()),
            industry=categorize_industry(listing.company),
            company_size=determine_company_size(listing.company),
            apply_url=listing.apply_url,
            source=self.source,
            lifestyle_data=self._estimate(self.lifestyle_estimator, listing, LifestyleData()),
            network_data=self._estimate(self.network_estimator, listing, NetworkData()),
            growth_data=self._estimate(self.growth_estimator, listing, GrowthData()),
            active=True,
        )
        self.attach_embedding(record)
        return record

    def attach_embedding(self, record: JobRecord) -> None:
        """Embed the record and write it to the vector index. Failures leave it unembedded."""
        try:
            embedding = self.embeddings.embed_job(record)
            self.index.upsert(record.id, embedding, {
                "type": "job",
                "company": record.company,
                "title": record.title,
                "industry": record.industry,
                "location": record.location,
                "remote_type": record.remote_type,
            })
        except Exception as e:
            logger.error("Error generating embedding for job %s (%s - %s): %s",
                         record.id, record.company, record.title, e)
            return

        record.embedding = embedding
        logger.debug("Stored embedding for job: %s - %s", record.company, record.title)
