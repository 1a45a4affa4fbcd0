"""Listing, job record, swipe and profile data models."""

import hashlib
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Optional

REMOTE_TYPES = ("remote", "hybrid", "onsite")
SWIPE_ACTIONS = ("like", "pass", "save", "apply")


@dataclass
class RawListing:
    """An unvalidated row lifted from a listing table."""

    company: str
    title: str
    location: str
    apply_url: str

    @property
    def key(self) -> tuple[str, str, str]:
        return canonical_key(self.company, self.title, self.location)


def canonical_key(company: str, title: str, location: Optional[str]) -> tuple[str, str, str]:
    """The (company, title, location) natural key used for dedup and upserts."""
    return (company, title, location or "")


def job_id_for(company: str, title: str, location: Optional[str]) -> str:
    """Stable opaque id: SHA-256 of the canonical key."""
    raw = "|".join(canonical_key(company, title, location))
    return hashlib.sha256(raw.encode()).hexdigest()


@dataclass
class Salary:
    base: int = 0
    bonus: int = 0
    total: int = 0
    benefits: list[str] = field(default_factory=list)


@dataclass
class ScheduleItem:
    time: str
    activity: str


@dataclass
class LifestyleData:
    office_photos: list[str] = field(default_factory=list)
    schedule: list[ScheduleItem] = field(default_factory=list)
    culture_quote: str = ""
    quotee: str = ""


@dataclass
class Hire:
    name: str
    year: int
    role: str


@dataclass
class NetworkData:
    total_count: int = 0
    recent_hires: list[Hire] = field(default_factory=list)
    connections: int = 0


@dataclass
class GrowthData:
    promotion_rate: float = 0.0
    average_tenure: int = 0
    career_paths: list[str] = field(default_factory=list)


@dataclass
class JobRecord:
    """Canonical, persisted job listing."""

    company: str
    title: str
    location: Optional[str] = None
    remote_type: Optional[str] = None  # remote, hybrid, onsite
    salary: Optional[Salary] = None
    description: Optional[str] = None
    requirements: Optional[list[str]] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    apply_url: Optional[str] = None
    source: str = ""
    lifestyle_data: Optional[LifestyleData] = None
    network_data: Optional[NetworkData] = None
    growth_data: Optional[GrowthData] = None
    embedding: Optional[list[float]] = None
    active: bool = True
    id: str = ""

    def __post_init__(self):
        if not self.id:
            self.id = job_id_for(self.company, self.title, self.location)

    @property
    def key(self) -> tuple[str, str, str]:
        return canonical_key(self.company, self.title, self.location)

    def to_dict(self, include_embedding: bool = False) -> dict:
        """Convert to dictionary for serialization."""
        data = asdict(self)
        if not include_embedding:
            data.pop("embedding")
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "JobRecord":
        """Rebuild a record (including nested structs) from plain JSON-style data."""
        salary = data.get("salary")
        lifestyle = data.get("lifestyle_data")
        network = data.get("network_data")
        growth = data.get("growth_data")
        return cls(
            id=data.get("id") or "",
            company=data["company"],
            title=data["title"],
            location=data.get("location"),
            remote_type=data.get("remote_type"),
            salary=Salary(**salary) if salary else None,
            description=data.get("description"),
            requirements=data.get("requirements"),
            industry=data.get("industry"),
            company_size=data.get("company_size"),
            apply_url=data.get("apply_url"),
            source=data.get("source") or "",
            lifestyle_data=LifestyleData(
                office_photos=list(lifestyle.get("office_photos", [])),
                schedule=[ScheduleItem(**item) for item in lifestyle.get("schedule", [])],
                culture_quote=lifestyle.get("culture_quote", ""),
                quotee=lifestyle.get("quotee", ""),
            ) if lifestyle else None,
            network_data=NetworkData(
                total_count=network.get("total_count", 0),
                recent_hires=[Hire(**hire) for hire in network.get("recent_hires", [])],
                connections=network.get("connections", 0),
            ) if network else None,
            growth_data=GrowthData(**growth) if growth else None,
            embedding=data.get("embedding"),
            active=data.get("active", True),
        )


@dataclass
class SwipeEvent:
    """Immutable record of one swipe; the log is append-only."""

    user_id: str
    job_id: str
    action: str  # like, pass, save, apply
    session_id: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class UserProfile:
    """The user's onboarding profile."""

    id: str
    email: str = ""
    name: str = ""
    school: str = ""
    major: str = ""
    class_year: Optional[int] = None
    graduation_month: str = ""
    onboarding_completed: bool = False


@dataclass
class PreferenceProfile:
    """Preferences inferred from a user's swipe log. Never persisted."""

    liked_companies: set[str] = field(default_factory=set)
    disliked_companies: set[str] = field(default_factory=set)
    preferred_industries: set[str] = field(default_factory=set)
    salary_min: int = 60000
    location_preference: list[str] = field(default_factory=list)
    work_style: str = "any"

    def to_dict(self) -> dict:
        return {
            "liked_companies": sorted(self.liked_companies),
            "disliked_companies": sorted(self.disliked_companies),
            "preferred_industries": sorted(self.preferred_industries),
            "salary_min": self.salary_min,
            "location_preference": list(self.location_preference),
            "work_style": self.work_style,
        }


@dataclass
class SubScores:
    semantic: float = 0.0
    salary: float = 0.0
    location: float = 0.0
    industry: float = 0.0
    network: float = 0.0
    behavioral: float = 0.0


@dataclass
class ScoredJob:
    """A job record annotated with its ranking for one user."""

    job: JobRecord
    scores: SubScores
    chemistry: int
    reasons: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = self.job.to_dict()
        data["scores"] = asdict(self.scores)
        data["chemistry"] = self.chemistry
        data["reasons"] = list(self.reasons)
        return data
