"""Chemistry scoring: six 0-100 sub-scores folded into one bounded number."""

import math

from job_feed.jobs.models import JobRecord, PreferenceProfile, ScoredJob, SubScores

# Scoring weights
WEIGHT_SEMANTIC = 0.40
WEIGHT_SALARY = 0.20
WEIGHT_LOCATION = 0.15
WEIGHT_INDUSTRY = 0.15
WEIGHT_NETWORK = 0.05
WEIGHT_BEHAVIORAL = 0.05

CHEMISTRY_MIN = 65
CHEMISTRY_MAX = 95

# Added to the weighted sum as-is, not on the 0-100 scale of the others
NETWORK_BONUS = 20

MAX_REASONS = 3
DEFAULT_REASON = "Great opportunity for growth"


def score_salary(job: JobRecord, salary_min: int) -> float:
    if not job.salary or not job.salary.base:
        return 50
    base = job.salary.base
    if base >= salary_min * 1.2:
        return 100
    if base >= salary_min:
        return 80
    if base >= salary_min * 0.8:
        return 60
    return 30


def score_location(job: JobRecord, preferred_locations: list[str]) -> float:
    if not job.location:
        return 50
    if not preferred_locations:
        return 70
    location_lower = job.location.lower()
    if any(pref.lower() in location_lower for pref in preferred_locations):
        return 90
    return 40


def score_industry(job: JobRecord, preferred_industries: set[str]) -> float:
    if not job.industry:
        return 50
    if not preferred_industries:
        return 70
    return 90 if job.industry in preferred_industries else 40


def network_count(job: JobRecord) -> int:
    return job.network_data.total_count if job.network_data else 0


def score_network(job: JobRecord) -> float:
    return NETWORK_BONUS if network_count(job) > 0 else 0


def score_behavioral(job: JobRecord, liked_companies: set[str]) -> float:
    if not liked_companies:
        return 50
    company_lower = job.company.lower()
    for liked in liked_companies:
        liked_lower = liked.lower()
        if liked_lower in company_lower or company_lower in liked_lower:
            return 85
    return 50


def combine(scores: SubScores) -> int:
    """Weighted sum clamped to [65, 95], rounded half up."""
    total = (
        WEIGHT_SEMANTIC * scores.semantic
        + WEIGHT_SALARY * scores.salary
        + WEIGHT_LOCATION * scores.location
        + WEIGHT_INDUSTRY * scores.industry
        + WEIGHT_NETWORK * scores.network
        + WEIGHT_BEHAVIORAL * scores.behavioral
    )
    clamped = min(CHEMISTRY_MAX, max(CHEMISTRY_MIN, total))
    return int(math.floor(clamped + 0.5))


def match_reasons(job: JobRecord, preferences: PreferenceProfile) -> list[str]:
    """Up to three explanations, in fixed priority order."""
    reasons = []

    count = network_count(job)
    if count > 0:
        reasons.append(f"{count} alumni work here")

    if job.industry and job.industry in preferences.preferred_industries:
        reasons.append(f"Matches your interest in {job.industry}")

    company_lower = job.company.lower()
    if any(liked.lower() in company_lower for liked in preferences.liked_companies):
        reasons.append("Similar to companies you've liked")

    if job.salary and job.salary.base and job.salary.base >= preferences.salary_min:
        reasons.append("Meets your salary expectations")

    if not reasons:
        reasons.append(DEFAULT_REASON)

    return reasons[:MAX_REASONS]


def score_job(job: JobRecord, preferences: PreferenceProfile, semantic: float) -> ScoredJob:
    """Score one job for a user whose preferences are already learned."""
    scores = SubScores(
        semantic=semantic,
        salary=score_salary(job, preferences.salary_min),
        location=score_location(job, preferences.location_preference),
        industry=score_industry(job, preferences.preferred_industries),
        network=score_network(job),
        behavioral=score_behavioral(job, preferences.liked_companies),
    )
    return ScoredJob(
        job=job,
        scores=scores,
        chemistry=combine(scores),
        reasons=match_reasons(job, preferences),
    )
