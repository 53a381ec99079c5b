"""Tests for the ingestion-time keyword match score."""

from __future__ import annotations

from bidboard.analysis.match import score_match
from bidboard.models.offering import Offering


WEB = Offering(name="Web", keywords=["react", "website"], rate_min=50, rate_max=100)


def test_base_score_without_hits() -> None:
    assert score_match("Logo design", "Need a logo", WEB) == 60


def test_title_and_description_hits() -> None:
    # 1 title hit (+8) and 2 description hits (+6)
    assert score_match("React app", "react frontend for a website", WEB) == 74


def test_quality_bonuses() -> None:
    assert score_match("Logo", "Payment verified: verified payment", WEB) == 65
    assert score_match("Logo", "", WEB, payment_verified=True) == 65
    assert score_match("Logo", "", WEB, budget_max=6000) == 65
    assert score_match("Logo", "", WEB, budget_max=12000) == 70


def test_score_is_capped_at_99() -> None:
    title = "React " * 10
    assert score_match(title, "react " * 10, WEB, budget_max=50000, payment_verified=True) == 99


def test_score_is_deterministic() -> None:
    args = ("React website", "A react website with react hooks", WEB, 3000.0, True)
    assert score_match(*args) == score_match(*args)


def test_no_offering_still_scores() -> None:
    assert score_match("Anything", "", None) == 60
