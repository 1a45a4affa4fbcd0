"""Pluggable estimators for enrichment fields without a real data source.

Every estimator is a deterministic function of its input listing and returns
a fully populated value inside the documented range, so scoring never has to
deal with a missing struct. Swap any of them for an implementation backed
by real salary, culture, alumni or career-path data.
"""

import hashlib
from abc import ABC, abstractmethod

from job_feed.jobs.models import (
    GrowthData,
    Hire,
    LifestyleData,
    NetworkData,
    RawListing,
    Salary,
    ScheduleItem,
)
from job_feed.utils.text_processing import slugify

DEFAULT_BENEFITS = ["Health Insurance", "401k", "PTO"]


def _stable_fraction(*parts: str) -> float:
    """Map the inputs to a float in [0, 1) that never changes between runs."""
    raw = "|".join(p.strip().lower() for p in parts)
    digest = hashlib.sha256(raw.encode()).hexdigest()
    return int(digest[:8], 16) / 0x100000000


class SalaryEstimator(ABC):
    @abstractmethod
    def estimate(self, listing: RawListing) -> Salary:
        ...


class LifestyleEstimator(ABC):
    @abstractmethod
    def estimate(self, listing: RawListing) -> LifestyleData:
        ...


class NetworkEstimator(ABC):
    @abstractmethod
    def estimate(self, listing: RawListing) -> NetworkData:
        ...


class GrowthEstimator(ABC):
    @abstractmethod
    def estimate(self, listing: RawListing) -> GrowthData:
        ...


class TitleSalaryEstimator(SalaryEstimator):
    """Base pay from title keywords.

    Ranges: senior/lead 120000, staff/principal 150000, intern 6000
    (monthly pay), anything else 90000. Bonus is 10% of base, total 110%.
    """

    def base_salary(self, title: str) -> int:
        title_lower = title.lower()
        if "senior" in title_lower or "lead" in title_lower:
            return 120000
        if "staff" in title_lower or "principal" in title_lower:
            return 150000
        if "intern" in title_lower:
            return 6000
        return 90000

    def estimate(self, listing: RawListing) -> Salary:
        base = self.base_salary(listing.title)
        return Salary(
            base=base,
            bonus=round(base * 0.1),
            total=round(base * 1.1),
            benefits=list(DEFAULT_BENEFITS),
        )


class PlaceholderLifestyleEstimator(LifestyleEstimator):
    """A generic day-in-the-life with one office photo path per company."""

    def estimate(self, listing: RawListing) -> LifestyleData:
        return LifestyleData(
            office_photos=[f"/companies/{slugify(listing.company)}/office1.jpg"],
            schedule=[
                ScheduleItem(time="9:00 AM", activity="Team standup"),
                ScheduleItem(time="10:00 AM", activity="Deep work"),
                ScheduleItem(time="2:00 PM", activity="Collaboration time"),
            ],
            culture_quote="Great place for growth and learning",
            quotee="Previous Intern",
        )


class PlaceholderNetworkEstimator(NetworkEstimator):
    """Alumni counts derived from the company name.

    Ranges: total_count 5-54, connections 1-20.
    """

    def estimate(self, listing: RawListing) -> NetworkData:
        fraction = _stable_fraction("network", listing.company)
        return NetworkData(
            total_count=5 + int(fraction * 50),
            recent_hires=[
                Hire(name="John Doe", year=2023, role="Software Engineer"),
                Hire(name="Jane Smith", year=2022, role="Product Manager"),
            ],
            connections=1 + int(_stable_fraction("connections", listing.company) * 20),
        )


class PlaceholderGrowthEstimator(GrowthEstimator):
    """Career-progression figures derived from the company name.

    Ranges: promotion_rate 0.20-0.50, average_tenure 2-4 years.
    """

    def estimate(self, listing: RawListing) -> GrowthData:
        return GrowthData(
            promotion_rate=round(0.2 + _stable_fraction("promotion", listing.company) * 0.3, 3),
            average_tenure=2 + int(_stable_fraction("tenure", listing.company) * 3),
            career_paths=["Individual Contributor", "Team Lead", "Engineering Manager"],
        )
