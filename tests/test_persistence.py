"""Tests for the JSON settings store."""

from __future__ import annotations

import json
from pathlib import Path

from bidboard.utils.persistence import JsonStore


def test_missing_file_returns_defaults(tmp_path: Path) -> None:
    store = JsonStore(str(tmp_path / "settings.json"))
    assert store.load("saved_projects", {}) == {}
    assert store.load("user_name", "") == ""


def test_save_and_load_keys_independently(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    store = JsonStore(str(path))

    assert store.save("user_name", "Ana") is True
    assert store.save("team_notes", {"1": "call"}) is True

    assert store.load("user_name", "") == "Ana"
    assert store.load("team_notes", {}) == {"1": "call"}
    assert json.loads(path.read_text(encoding="utf-8")) == {"user_name": "Ana", "team_notes": {"1": "call"}}
    assert not (tmp_path / "settings.json.tmp").exists()


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonStore(str(path))

    assert store.load("offerings", []) == []

    store.save("user_name", "Ana")
    assert store.load("user_name", "") == "Ana"


def test_wrong_type_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"saved_projects": ["not", "a", "dict"]}), encoding="utf-8")
    assert JsonStore(str(path)).load("saved_projects", {}) == {}
