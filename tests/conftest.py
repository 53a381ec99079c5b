"""Shared fixtures: small offering registries and project/job-source fakes."""

from __future__ import annotations

from typing import List, Optional

import pytest  # type: ignore

from bidboard.models.offering import Offering, OfferingRegistry
from bidboard.models.project import ClientInfo, Project


def make_project(**overrides) -> Project:
    """Build a ``Project`` with sensible defaults for any field not given."""
    fields = dict(
        id="job-1",
        title="React Developer Needed",
        description="Build a small dashboard.",
        link="https://www.upwork.com/jobs/~01",
        category="Web",
        budget="$2000",
        budget_max=2000.0,
        estimated_hours=26,
        skills=[],
        client=ClientInfo(),
        match_score=60,
    )
    fields.update(overrides)
    return Project(**fields)


class FakeJobSource:
    """Stand-in for ``JobSourceClient`` that never touches the network."""

    base_url = "http://proxy.test"

    def __init__(self, online: bool = True, raw: Optional[List[dict]] = None, error: Exception = None):
        self.online = online
        self.raw = raw or []
        self.error = error
        self.fetch_calls = []

    def check_status(self) -> bool:
        return self.online

    def fetch_jobs(self, keywords, limit=None):
        self.fetch_calls.append(list(keywords))
        if self.error:
            raise self.error
        return list(self.raw)


def rss_record(title: str, description: str, guid: str = "", link: str = "", keyword: str = "") -> dict:
    return {
        "source": "rss",
        "keyword": keyword,
        "payload": {
            "title": title,
            "description": description,
            "link": link,
            "guid": guid,
            "pubDate": "Mon, 06 Jan 2025 10:00:00 +0000",
        },
    }


@pytest.fixture
def web_registry() -> OfferingRegistry:
    return OfferingRegistry([Offering(name="Web", keywords=["react"], rate_min=50, rate_max=100)])


@pytest.fixture
def registry() -> OfferingRegistry:
    return OfferingRegistry([
        Offering(
            name="Web",
            keywords=["react", "website"],
            rate_min=50,
            rate_max=100,
            skills=["React", "JavaScript"],
        ),
        Offering(
            name="Automation",
            keywords=["python", "automation"],
            rate_min=90,
            rate_max=110,
            skills=["Python", "AWS"],
        ),
    ])
