"""Tests for turning raw RSS and API records into ``Project`` objects."""

from __future__ import annotations

from datetime import datetime, timezone

from bidboard.platforms.normalizer import (
    estimate_hours,
    normalize_batch,
    normalize_record,
    parse_posted,
)
from bidboard.utils.cleaning import Budget
from conftest import rss_record


def test_fixed_budget_record(web_registry) -> None:
    project = normalize_record(
        {"title": "React Developer Needed", "description": "Budget: $2000"},
        web_registry,
    )
    assert project.category == "Web"
    assert project.budget_max == 2000
    assert project.is_hourly is False
    # max(10, floor(2000 / 75))
    assert project.estimated_hours == 26
    assert project.source == "rss"


def test_hourly_record(web_registry) -> None:
    project = normalize_record(
        {
            "title": ["React hooks help"],
            "description": ["<p>Hourly Range: $30.00-$60.00</p> Skills: React, Redux. Country: Canada."],
            "link": ["https://example.com/job/1"],
            "guid": [{"_": "guid-1"}],
        },
        web_registry,
    )
    assert project.id == "guid-1"
    assert project.is_hourly is True
    assert (project.budget_min, project.budget_max) == (30.0, 60.0)
    assert project.budget == "$30-$60/hr"
    assert project.skills == ["React", "Redux"]
    assert project.country == "Canada"
    assert project.estimated_hours == 20


def test_record_without_budget(web_registry) -> None:
    project = normalize_record({"title": "Logo", "description": "Need a logo"}, web_registry)
    assert project.budget == "Not specified"
    assert project.estimated_hours == 20
    # nothing matched, so the first offering is used
    assert project.category == "Web"


def test_missing_id_gets_synthetic_id(web_registry) -> None:
    project = normalize_record(
        {"title": "React", "description": "", "link": "https://example.com/a"},
        web_registry,
    )
    assert project.id.startswith("https://example.com/a-")


def test_description_is_truncated(web_registry) -> None:
    project = normalize_record({"title": "React", "description": "word " * 400}, web_registry)
    assert len(project.description) <= 800


def test_structured_api_record(registry) -> None:
    project = normalize_record(
        {
            "id": "~0123",
            "title": "Python automation scripts",
            "description": "Automate our reports",
            "url": "https://www.upwork.com/jobs/~0123",
            "createdDateTime": "2025-01-06T10:00:00Z",
            "budget": {"fixedBudget": 6000},
            "skills": [{"prettyName": "Python"}, "Docker"],
            "client": {"totalSpent": 25000, "paymentVerified": True, "location": {"country": "USA"}},
        },
        registry,
    )
    assert project.source == "api"
    assert project.category == "Automation"
    assert project.budget == "$6,000"
    assert project.budget_max == 6000
    assert project.skills == ["Python", "Docker"]
    assert project.client.payment_verified is True
    assert project.client.total_spent == 25000
    assert project.country == "USA"
    assert project.posted_date == datetime(2025, 1, 6, 10, 0, tzinfo=timezone.utc)


def test_structured_hourly_record(registry) -> None:
    project = normalize_record(
        {"id": "x", "title": "Website fixes", "budget": {"hourlyRate": {"min": 40, "max": 80}}},
        registry,
    )
    assert project.is_hourly is True
    assert project.budget_max == 80


def test_estimate_hours_tiers() -> None:
    hourly = Budget("$1-$2/hr", 1, 2, True)
    assert estimate_hours(hourly, "x" * 100, 75) == 20
    assert estimate_hours(hourly, "x" * 300, 75) == 40
    assert estimate_hours(hourly, "x" * 500, 75) == 60
    assert estimate_hours(hourly, "x" * 700, 75) == 80
    assert estimate_hours(Budget("$300", 0, 300, False), "", 75) == 10


def test_parse_posted_formats() -> None:
    expected = datetime(2025, 1, 6, 10, 0, tzinfo=timezone.utc)
    assert parse_posted("Mon, 06 Jan 2025 10:00:00 +0000") == expected
    assert parse_posted("2025-01-06T10:00:00Z") == expected
    assert parse_posted(int(expected.timestamp() * 1000)) == expected
    assert parse_posted("garbage").tzinfo is not None


def test_batch_deduplicates_first_wins(web_registry) -> None:
    raw = [
        rss_record("React one", "Budget: $100", guid="a", link="https://x/1"),
        rss_record("React one again", "Budget: $100", guid="a", link="https://x/2"),
        rss_record("React same link", "Budget: $100", guid="b", link="https://x/1"),
        rss_record("React two", "Budget: $100", guid="c", link="https://x/3"),
    ]
    projects = normalize_batch(raw, web_registry)
    assert [p.title for p in projects] == ["React one", "React two"]


def test_batch_skips_broken_records(web_registry) -> None:
    raw = [
        {"source": "api", "payload": {"id": "bad", "title": "Oops", "client": {"location": 5}, "budget": "nope"}},
        rss_record("React ok", "Budget: $100", guid="ok"),
    ]
    projects = normalize_batch(raw, web_registry)
    assert [p.id for p in projects] == ["ok"]


def test_batch_keeps_record_with_unreadable_budget(web_registry) -> None:
    raw = [rss_record("React dev", "Budget: , negotiable. Skills: React.", guid="g1")]

    projects = normalize_batch(raw, web_registry)

    assert [p.id for p in projects] == ["g1"]
    assert projects[0].budget == "Not specified"
    assert projects[0].budget_max == 0
    assert projects[0].skills == ["React"]
