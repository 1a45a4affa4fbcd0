"""Tests for fetching listing sources."""

from unittest.mock import MagicMock

import requests

from job_feed.jobs import sources
from job_feed.jobs.sources import fetch_source_texts, readme_url


class TestFetchSourceTexts:
    def test_readme_url(self):
        assert readme_url("SimplifyJobs/New-Grad-Positions") == (
            "https://raw.githubusercontent.com/SimplifyJobs/New-Grad-Positions/dev/README.md"
        )
        assert readme_url("org/repo", branch="main").endswith("/org/repo/main/README.md")

    def test_collects_texts(self, monkeypatch):
        fetched = []

        def fake_get(url, session=None, **kwargs):
            fetched.append(url)
            response = MagicMock()
            response.text = f"| Company | from {url} |"
            return response

        monkeypatch.setattr(sources, "safe_get", fake_get)
        texts = fetch_source_texts(["a/one", "b/two"], session=requests.Session())

        assert len(texts) == 2
        assert fetched == [readme_url("a/one"), readme_url("b/two")]

    def test_failed_fetch_skipped(self, monkeypatch):
        def fake_get(url, session=None, **kwargs):
            if "broken" in url:
                return None
            response = MagicMock()
            response.text = "ok"
            return response

        monkeypatch.setattr(sources, "safe_get", fake_get)
        assert fetch_source_texts(["x/broken", "y/fine"], session=requests.Session()) == ["ok"]
