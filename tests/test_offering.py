"""Tests for offerings and the offering registry."""

from __future__ import annotations

import pytest  # type: ignore

from bidboard.models.offering import FALLBACK_RATE, Offering, OfferingRegistry


def test_reference_rate() -> None:
    assert Offering(name="Web", rate_min=50, rate_max=100).reference_rate == 75
    assert Offering(name="Legacy", default_rate=90).reference_rate == 90
    assert Offering(name="Bare").reference_rate == FALLBACK_RATE


def test_validation() -> None:
    with pytest.raises(ValueError):
        Offering(name="  ")
    with pytest.raises(ValueError):
        Offering(name="Web", rate_min=120, rate_max=100)
    with pytest.raises(ValueError):
        Offering(name="Web", rate_min=-1, rate_max=10)


def test_comma_separated_fields_are_split() -> None:
    offering = Offering(name="Web", keywords="react, nextjs ,", skills="React,CSS")
    assert offering.keywords == ["react", "nextjs"]
    assert offering.skills == ["React", "CSS"]


def test_from_dict_accepts_both_schemas() -> None:
    ranged = Offering.from_dict({"name": "Web", "rateMin": 50, "rateMax": 100})
    legacy = Offering.from_dict({"name": "Old", "keywords": ["x"], "defaultRate": 80})
    assert ranged.to_dict()["rateMax"] == 100
    assert legacy.reference_rate == 80
    assert legacy.to_dict()["defaultRate"] == 80


def test_registry_mutations_bump_version() -> None:
    registry = OfferingRegistry([Offering(name="Web", skills=["React"])])
    assert registry.version == 0

    registry.add(Offering(name="Data", skills=["SQL"]))
    registry.update("Data", skills=["SQL", "dbt"])
    registry.remove("Web")

    assert registry.version == 3
    assert registry.names() == ["Data"]
    assert registry.all_skills() == {"sql", "dbt"}


def test_registry_update_errors() -> None:
    registry = OfferingRegistry([Offering(name="Web"), Offering(name="Data")])
    with pytest.raises(KeyError):
        registry.update("Nope", skills=[])
    with pytest.raises(ValueError):
        registry.update("Web", name="Data")
    with pytest.raises(ValueError):
        registry.update("Web", colour="blue")
    with pytest.raises(ValueError):
        registry.update("Web", rate_min=10, rate_max=5)
    assert registry.get("Web").rate_max == 0


def test_rate_for_unknown_category() -> None:
    registry = OfferingRegistry([Offering(name="Web", rate_min=50, rate_max=100)])
    assert registry.rate_for("Web") == 75
    assert registry.rate_for("Unknown") == FALLBACK_RATE


def test_registry_rename_keeps_position() -> None:
    registry = OfferingRegistry([Offering(name="Web"), Offering(name="Data")])

    updated = registry.update("Web", name="Websites", keywords="react, nextjs", rate_min=60, rate_max=90)

    assert registry.names() == ["Websites", "Data"]
    assert updated.keywords == ["react", "nextjs"]
    assert registry.get("Web") is None
    assert registry.rate_for("Websites") == 75
