"""Tests for the text helpers used while normalizing feed records."""

from __future__ import annotations

from bidboard.models.project import NOT_SPECIFIED
from bidboard.utils.cleaning import (
    clean_html,
    count_occurrences,
    extract_country,
    extract_skills,
    parse_budget,
    truncate,
)


def test_clean_html_strips_tags_and_entities() -> None:
    raw = "<p>Need a <b>React</b> dev &amp; designer</p>\n\n<br/>ASAP"
    assert clean_html(raw) == "Need a React dev & designer ASAP"


def test_clean_html_empty() -> None:
    assert clean_html("") == ""
    assert clean_html(None) == ""


def test_truncate_limits_length() -> None:
    assert len(truncate("x" * 2000)) == 800
    assert truncate("short") == "short"


def test_parse_budget_fixed() -> None:
    budget = parse_budget("Some text. Budget: $2,500 Posted On: today")
    assert budget.label == "$2,500"
    assert budget.maximum == 2500
    assert budget.minimum == 0
    assert budget.is_hourly is False


def test_parse_budget_hourly_wins_over_fixed() -> None:
    budget = parse_budget("Hourly Range: $25.00-$50.00 Budget: $900")
    assert budget.is_hourly is True
    assert (budget.minimum, budget.maximum) == (25.0, 50.0)
    assert budget.label == "$25-$50/hr"


def test_parse_budget_missing() -> None:
    budget = parse_budget("No money talk here")
    assert budget.label == NOT_SPECIFIED
    assert budget.maximum == 0
    assert budget.is_hourly is False


def test_extract_skills_and_country() -> None:
    text = "Great gig. Skills: Python, Docker , AWS. Country: Germany. More text"
    assert extract_skills(text) == ["Python", "Docker", "AWS"]
    assert extract_country(text) == "Germany"
    assert extract_skills("nothing") == []
    assert extract_country("nothing") == ""


def test_count_occurrences_is_case_insensitive() -> None:
    assert count_occurrences("React and react and REACT", "react") == 3
    assert count_occurrences("anything", "") == 0


def test_parse_budget_without_digits_is_not_specified() -> None:
    budget = parse_budget("Budget: , negotiable. Skills: React.")
    assert budget.label == NOT_SPECIFIED
    assert (budget.minimum, budget.maximum) == (0.0, 0.0)
    assert budget.is_hourly is False
