"""Tests for enrichment, estimators and dedup."""

from conftest import FailingEmbeddings, TEST_DIMENSIONS

from job_feed.enrichment.enricher import (
    Enricher,
    categorize_industry,
    dedupe_listings,
    determine_company_size,
    determine_remote_type,
)
from job_feed.enrichment.estimators import (
    PlaceholderGrowthEstimator,
    PlaceholderNetworkEstimator,
    SalaryEstimator,
    TitleSalaryEstimator,
)
from job_feed.jobs.models import RawListing, Salary
from job_feed.vectors.index import InMemoryVectorIndex


def make_listing(**kwargs) -> RawListing:
    defaults = dict(
        company="Acme Labs",
        title="Software Engineer Intern",
        location="Remote",
        apply_url="https://acme.example/apply",
    )
    defaults.update(kwargs)
    return RawListing(**defaults)


class BrokenSalaryEstimator(SalaryEstimator):
    def estimate(self, listing):
        raise RuntimeError("salary API down")


class TestDeterministicFields:
    def test_remote_type(self):
        assert determine_remote_type("Remote in USA") == "remote"
        assert determine_remote_type("Hybrid - NYC") == "hybrid"
        assert determine_remote_type("Seattle, WA") == "onsite"
        assert determine_remote_type("") is None

    def test_industry_lookup(self):
        assert categorize_industry("Goldman Sachs") == "Finance"
        assert categorize_industry("McKinsey & Company") == "Consulting"
        assert categorize_industry("Google") == "Technology"

    def test_industry_default(self):
        assert categorize_industry("Unknown Widgets") == "Technology"

    def test_company_size(self):
        assert determine_company_size("Amazon") == "Large (10,000+)"
        assert determine_company_size("Tiny Startup") == "Startup (< 100)"
        assert determine_company_size("Acme Labs") == "Medium (100-10,000)"


class TestEstimators:
    def test_salary_by_title(self):
        estimator = TitleSalaryEstimator()
        assert estimator.estimate(make_listing(title="Senior Engineer")).base == 120000
        assert estimator.estimate(make_listing(title="Staff Engineer")).base == 150000
        assert estimator.estimate(make_listing(title="Software Intern")).base == 6000
        assert estimator.estimate(make_listing(title="Software Engineer")).base == 90000

    def test_salary_bonus_and_total(self):
        salary = TitleSalaryEstimator().estimate(make_listing(title="Software Engineer"))
        assert salary.bonus == 9000
        assert salary.total == 99000
        assert salary.benefits

    def test_network_within_range_and_deterministic(self):
        estimator = PlaceholderNetworkEstimator()
        first = estimator.estimate(make_listing(company="Acme Labs"))
        second = estimator.estimate(make_listing(company="Acme Labs"))
        assert first == second
        assert 5 <= first.total_count <= 54
        assert 1 <= first.connections <= 20

    def test_growth_within_range(self):
        for company in ["Acme", "Globex", "Initech", "Umbrella"]:
            growth = PlaceholderGrowthEstimator().estimate(make_listing(company=company))
            assert 0.2 <= growth.promotion_rate <= 0.5
            assert 2 <= growth.average_tenure <= 4


class TestEnricher:
    def test_enrich_populates_record(self, enricher, index):
        record = enricher.enrich(make_listing())
        assert record.company == "Acme Labs"
        assert record.remote_type == "remote"
        assert record.industry == "Technology"
        assert record.salary.base == 6000
        assert record.lifestyle_data.office_photos == ["/companies/acme-labs/office1.jpg"]
        assert record.network_data.total_count > 0
        assert record.growth_data is not None
        assert record.source == "test"
        assert record.active is True
        assert len(record.embedding) == TEST_DIMENSIONS
        assert index.count() == 1

    def test_blank_location_becomes_none(self, enricher):
        record = enricher.enrich(make_listing(location=""))
        assert record.location is None
        assert record.remote_type is None

    def test_embedding_failure_is_not_fatal(self):
        index = InMemoryVectorIndex(TEST_DIMENSIONS)
        enricher = Enricher(FailingEmbeddings(TEST_DIMENSIONS), index)
        record = enricher.enrich(make_listing())
        assert record.embedding is None
        assert record.company == "Acme Labs"
        assert index.count() == 0

    def test_estimator_failure_falls_back_to_empty_struct(self, embeddings, index):
        enricher = Enricher(embeddings, index, salary_estimator=BrokenSalaryEstimator())
        record = enricher.enrich(make_listing())
        assert record.salary == Salary()
        assert record.network_data is not None

    def test_id_is_stable_for_key(self, enricher):
        first = enricher.enrich(make_listing(apply_url="https://a.example"))
        second = enricher.enrich(make_listing(apply_url="https://b.example"))
        assert first.id == second.id


class TestDedupe:
    def test_keeps_first_occurrence_order(self):
        listings = [
            make_listing(company="B"),
            make_listing(company="A"),
            make_listing(company="B", apply_url="https://other.example"),
        ]
        unique = dedupe_listings(listings)
        assert [l.company for l in unique] == ["B", "A"]
        assert unique[0].apply_url == "https://acme.example/apply"

    def test_location_is_part_of_key(self):
        listings = [make_listing(location="Remote"), make_listing(location="NYC")]
        assert len(dedupe_listings(listings)) == 2
