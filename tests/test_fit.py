"""Tests for the multi-factor fit assessment."""

from __future__ import annotations

from bidboard.analysis.fit import (
    BID,
    CONSIDER,
    HIGH,
    LOW,
    MEDIUM,
    SKIP,
    STRONG_BID,
    FitAnalyzer,
    analyze_fit,
    budget_tier,
    complexity_level,
    recommend,
    skill_overlap,
    timeline_bucket,
)
from bidboard.models.offering import Offering, OfferingRegistry
from bidboard.models.project import ClientInfo
from conftest import make_project


def test_skill_overlap_half_match() -> None:
    ratio, matched, missing = skill_overlap(["Python", "Docker"], {"python", "aws"})
    assert ratio == 0.5
    assert matched == ["Python"]
    assert missing == ["Docker"]


def test_skill_overlap_without_listed_skills_is_neutral() -> None:
    assert skill_overlap([], {"python"}) == (0.5, [], [])


def test_skill_overlap_substring_false_positive() -> None:
    # "AI" is a substring of "email": a known over-match of the loose test
    ratio, matched, _ = skill_overlap(["AI"], {"email marketing"})
    assert ratio == 1.0
    assert matched == ["AI"]


def test_budget_tier_fixed_and_hourly() -> None:
    assert budget_tier(6000, is_hourly=False) == HIGH
    assert budget_tier(1000, is_hourly=False) == MEDIUM
    assert budget_tier(999, is_hourly=False) == LOW
    assert budget_tier(75, is_hourly=True) == HIGH
    assert budget_tier(40, is_hourly=True) == MEDIUM
    assert budget_tier(39, is_hourly=True) == LOW


def test_complexity_level() -> None:
    assert complexity_level("x" * 100, 2) == LOW
    assert complexity_level("x" * 800, 2) == MEDIUM
    assert complexity_level("x" * 100, 7) == HIGH
    assert complexity_level("x" * 1600, 0) == HIGH


def test_timeline_bucket() -> None:
    assert timeline_bucket(20) == ("<1 week", 1.0)
    assert timeline_bucket(40) == ("1-2 weeks", 0.9)
    assert timeline_bucket(80) == ("2-4 weeks", 0.7)
    assert timeline_bucket(81) == ("1+ month", 0.5)


def test_recommend_rules_in_order() -> None:
    assert recommend(80, 0.8) == STRONG_BID
    assert recommend(80, 0.2) == SKIP
    assert recommend(65, 0.6) == BID
    assert recommend(35, 0.9) == SKIP
    assert recommend(50, 0.4) == CONSIDER


def test_analyze_fit_high_budget_project() -> None:
    offerings = OfferingRegistry([Offering(name="Web", skills=["python", "aws"])])
    project = make_project(budget_max=6000, skills=["Python", "Docker"])

    fit = analyze_fit(project, offerings)

    assert fit.budget_tier == HIGH
    assert fit.budget_score == 1.0
    assert fit.skill_match == 50
    assert fit.matched_skills == ["Python"]
    assert fit.missing_skills == ["Docker"]
    assert fit.client_score == 50


def test_analyze_fit_composite_score() -> None:
    offerings = OfferingRegistry([Offering(name="Web", skills=["React"])])
    project = make_project(
        budget_max=6000,
        estimated_hours=20,
        skills=["React"],
        match_score=80,
        client=ClientInfo(total_spent=20000, feedback_rate=4.9, payment_verified=True),
    )

    fit = analyze_fit(project, offerings)

    # 35 + 25 + 20 + 10 + 8
    assert fit.recommendation_score == 98
    assert fit.client_score == 100
    assert fit.recommendation == STRONG_BID


def test_analyzer_cache_follows_registry_version() -> None:
    offerings = OfferingRegistry([Offering(name="Web", skills=["React"])])
    analyzer = FitAnalyzer(offerings)
    project = make_project(skills=["Docker"])

    first = analyzer.assess(project)
    assert analyzer.assess(project) is first
    assert first.skill_match == 0

    offerings.update("Web", skills=["React", "Docker"])
    assert analyzer.assess(project).skill_match == 100
