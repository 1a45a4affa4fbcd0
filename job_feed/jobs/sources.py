"""Fetches listing tables published as GitHub README files."""

import logging
from typing import Optional

import requests

from job_feed.utils.http_client import create_session, safe_get

logger = logging.getLogger("job_feed.jobs.sources")

RAW_README_URL = "https://raw.githubusercontent.com/{repo}/{branch}/README.md"


def readme_url(repo: str, branch: str = "dev") -> str:
    return RAW_README_URL.format(repo=repo, branch=branch)


def fetch_source_texts(
    repos: list[str],
    branch: str = "dev",
    session: Optional[requests.Session] = None,
) -> list[str]:
    """Download each repo's README. Failed fetches are logged and skipped."""
    session = session or create_session()
    texts = []

    for repo in repos:
        url = readme_url(repo, branch)
        response = safe_get(url, session=session)
        if response is None:
            logger.error("Failed to fetch listings from %s", repo)
            continue
        logger.info("Fetched %s (%d bytes)", repo, len(response.text))
        texts.append(response.text)

    return texts
