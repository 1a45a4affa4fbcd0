"""Ingestion pipeline: listing text -> parsed -> deduplicated -> enriched -> upserted."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from job_feed.enrichment.enricher import Enricher, dedupe_listings
from job_feed.errors import StoreError
from job_feed.jobs.models import JobRecord, RawListing
from job_feed.jobs.parser import parse_listings
from job_feed.storage.store import JobStore

logger = logging.getLogger("job_feed.pipeline")


@dataclass
class SyncResult:
    synced_count: int = 0
    errors: list[str] = field(default_factory=list)
    listings_parsed: int = 0
    duplicates_dropped: int = 0
    embedded_count: int = 0
    duration_seconds: float = 0.0

    def to_dict(self) -> dict:
        return {
            "synced_count": self.synced_count,
            "errors": list(self.errors),
            "listings_parsed": self.listings_parsed,
            "duplicates_dropped": self.duplicates_dropped,
            "embedded_count": self.embedded_count,
            "duration_seconds": self.duration_seconds,
        }


class IngestionPipeline:
    """Fan out enrichment across a thread pool, fan in to a single batch upsert."""

    def __init__(self, enricher: Enricher, store: JobStore, max_workers: int = 8):
        self.enricher = enricher
        self.store = store
        self.max_workers = max_workers

    def parse_sources(self, source_texts: list[str]) -> list[RawListing]:
        listings = []
        for i, text in enumerate(source_texts):
            parsed = list(parse_listings(text))
            if not parsed:
                logger.warning("Source #%d yielded no listings", i)
            else:
                logger.info("Source #%d: parsed %d listings", i, len(parsed))
            listings.extend(parsed)
        return listings

    def _enrich_one(self, listing: RawListing) -> JobRecord | None:
        try:
            return self.enricher.enrich(listing)
        except Exception as e:
            logger.error("Enrichment failed for %s - %s: %s", listing.company, listing.title, e)
            return None

    def enrich_all(self, listings: list[RawListing]) -> tuple[list[JobRecord], list[str]]:
        """Enrich every listing concurrently; one failure never cancels the others."""
        if not listings:
            return [], []

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            results = list(pool.map(self._enrich_one, listings))

        records = []
        errors = []
        for listing, record in zip(listings, results):
            if record is None:
                errors.append(f"Enrichment failed: {listing.company} - {listing.title}")
            else:
                records.append(record)
        return records, errors

    def sync_listings(self, source_texts: list[str]) -> SyncResult:
        """Run the full ingestion over already-fetched source texts."""
        start = time.time()
        result = SyncResult()

        listings = self.parse_sources(source_texts)
        result.listings_parsed = len(listings)

        # Dedup before enrichment so each effective job is embedded once
        unique = dedupe_listings(listings)
        result.duplicates_dropped = len(listings) - len(unique)
        logger.info("Listings after dedup: %d/%d", len(unique), len(listings))

        records, errors = self.enrich_all(unique)
        result.errors.extend(errors)
        result.embedded_count = sum(1 for r in records if r.embedding is not None)

        try:
            result.synced_count = self.store.upsert_jobs(records)
        except StoreError as e:
            result.errors.append(str(e))
            result.synced_count = 0

        result.duration_seconds = round(time.time() - start, 2)
        logger.info(
            "Sync done: %d parsed, %d unique, %d embedded, %d written, %d errors",
            result.listings_parsed, len(unique), result.embedded_count,
            result.synced_count, len(result.errors),
        )
        return result
