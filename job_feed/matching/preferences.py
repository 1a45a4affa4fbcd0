"""Preference learning from the swipe log."""

import logging
from collections import Counter
from collections.abc import Iterable, Mapping

from job_feed.jobs.models import JobRecord, PreferenceProfile, SwipeEvent

logger = logging.getLogger("job_feed.matching.preferences")

POSITIVE_ACTIONS = frozenset({"like", "apply"})
NEGATIVE_ACTIONS = frozenset({"pass"})
# "save" is recorded but deliberately feeds neither side

DEFAULT_SALARY_MIN = 60000
SALARY_DISCOUNT = 0.8
MAX_LOCATIONS = 3


def learn_preferences(
    events: Iterable[SwipeEvent],
    job_lookup: Mapping[str, JobRecord],
) -> PreferenceProfile:
    """Fold a swipe log (oldest first) into a PreferenceProfile.

    Pure: the same log and lookup always give the same profile. Events whose
    job is missing from `job_lookup` are ignored.
    """
    liked_companies: set[str] = set()
    disliked_companies: set[str] = set()
    preferred_industries: set[str] = set()
    salaries: list[int] = []
    location_counts: Counter[str] = Counter()
    work_style_counts: Counter[str] = Counter()

    for event in events:
        job = job_lookup.get(event.job_id)
        if job is None:
            continue

        if event.action in POSITIVE_ACTIONS:
            liked_companies.add(job.company)
            if job.industry:
                preferred_industries.add(job.industry)
            if job.salary and job.salary.base:
                salaries.append(job.salary.base)
            if job.location:
                location_counts[job.location] += 1
            if job.remote_type:
                work_style_counts[job.remote_type] += 1
        elif event.action in NEGATIVE_ACTIONS:
            disliked_companies.add(job.company)

    # Counter keeps first-seen order, and most_common is a stable sort
    work_style = work_style_counts.most_common(1)[0][0] if work_style_counts else "any"

    return PreferenceProfile(
        liked_companies=liked_companies,
        disliked_companies=disliked_companies,
        preferred_industries=preferred_industries,
        salary_min=(
            round(sum(salaries) / len(salaries) * SALARY_DISCOUNT)
            if salaries else DEFAULT_SALARY_MIN
        ),
        location_preference=[loc for loc, _ in location_counts.most_common(MAX_LOCATIONS)],
        work_style=work_style,
    )
