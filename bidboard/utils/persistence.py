import json
import logging
import os
from typing import Any, Dict

LOGGER = logging.getLogger(__name__)

# Keys of the settings file; each loads independently with its own default
OFFERINGS = "offerings"
SAVED_PROJECTS = "saved_projects"
APPLIED_PROJECTS = "applied_projects"
TEAM_NOTES = "team_notes"
PROPOSAL_TEMPLATE = "proposal_template"
USER_NAME = "user_name"
PROPOSALS = "proposals"


class JsonStore:
    """Tiny key-value store backed by one JSON file."""

    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            LOGGER.error("❌ Could not parse %s: %s", self.path, e)
            return {}
        except OSError as e:
            LOGGER.error("❌ Failed to load %s: %s", self.path, e)
            return {}

        if not isinstance(data, dict):
            LOGGER.error("❌ Invalid settings format in %s; expected an object.", self.path)
            return {}
        return data

    def load(self, key: str, default: Any = None) -> Any:
        """Stored value, or ``default`` when missing, corrupt or of another type."""
        value = self._read_all().get(key, default)
        if default is not None and value is not None and not isinstance(value, type(default)):
            LOGGER.warning("⚠️ Ignoring '%s' in %s: expected %s", key, self.path, type(default).__name__)
            return default
        return default if value is None else value

    def save(self, key: str, value: Any) -> bool:
        data = self._read_all()
        data[key] = value

        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, default=str)
            os.replace(tmp_path, self.path)
            return True
        except (OSError, TypeError) as e:
            LOGGER.error("❌ Failed to save '%s' to %s: %s", key, self.path, e)
            return False


class MemoryStore(JsonStore):
    """Same contract, nothing touches disk."""

    def __init__(self, initial: Dict[str, Any] = None):
        super().__init__(path=":memory:")
        self._data = dict(initial or {})

    def _read_all(self) -> Dict[str, Any]:
        return json.loads(json.dumps(self._data, default=str))

    def save(self, key: str, value: Any) -> bool:
        self._data[key] = json.loads(json.dumps(value, default=str))
        return True
