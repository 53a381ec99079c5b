# bidboard/models/offering.py
from dataclasses import dataclass, field, asdict
from typing import List, Optional, Dict, Any, Iterable

FALLBACK_RATE = 100.0


def _split_list(value) -> List[str]:
    """Accepts a list or a comma-separated string (settings form input)."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [str(v).strip() for v in value if str(v).strip()]


@dataclass
class Offering:
    name: str
    keywords: List[str] = field(default_factory=list)
    rate_min: float = 0.0
    rate_max: float = 0.0
    skills: List[str] = field(default_factory=list)
    default_rate: Optional[float] = None  # legacy single-rate schema

    def __post_init__(self):
        self.name = (self.name or "").strip()
        self.keywords = _split_list(self.keywords)
        self.skills = _split_list(self.skills)
        self.rate_min = float(self.rate_min or 0)
        self.rate_max = float(self.rate_max or 0)
        self.validate()

    def validate(self):
        if not self.name:
            raise ValueError("Offering name must not be empty")
        if self.rate_min < 0 or self.rate_max < 0:
            raise ValueError(f"Rates for '{self.name}' must be >= 0")
        if self.rate_min > self.rate_max:
            raise ValueError(f"rate_min > rate_max for '{self.name}'")

    @property
    def has_range(self) -> bool:
        return self.rate_max > 0

    @property
    def reference_rate(self) -> float:
        """Midpoint of the rate range, or the legacy single rate."""
        if self.has_range:
            return (self.rate_min + self.rate_max) / 2
        if self.default_rate:
            return float(self.default_rate)
        return FALLBACK_RATE

    @property
    def skill_set(self) -> set:
        return {s.lower() for s in self.skills}

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "keywords": list(self.keywords),
            "rateMin": self.rate_min,
            "rateMax": self.rate_max,
            "skills": list(self.skills),
        }
        if self.default_rate is not None:
            data["defaultRate"] = self.default_rate
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Offering":
        return cls(
            name=data.get("name", ""),
            keywords=data.get("keywords", []),
            rate_min=data.get("rateMin", data.get("rate_min", 0)),
            rate_max=data.get("rateMax", data.get("rate_max", 0)),
            skills=data.get("skills", []),
            default_rate=data.get("defaultRate", data.get("default_rate")),
        )


class OfferingRegistry:
    """Ordered, name-unique collection of offerings.

    ``version`` increases on every mutation so that derived results (fit
    assessments, insights) can be invalidated.
    """

    EDITABLE_FIELDS = ("name", "keywords", "rate_min", "rate_max", "skills", "default_rate")

    def __init__(self, offerings: Iterable[Offering] = ()):
        self._offerings: List[Offering] = []
        self.version = 0
        for offering in offerings:
            self.add(offering)
        self.version = 0

    def __iter__(self):
        return iter(list(self._offerings))

    def __len__(self):
        return len(self._offerings)

    def __bool__(self):
        return bool(self._offerings)

    @property
    def first(self) -> Optional[Offering]:
        return self._offerings[0] if self._offerings else None

    def names(self) -> List[str]:
        return [o.name for o in self._offerings]

    def get(self, name: str) -> Optional[Offering]:
        for offering in self._offerings:
            if offering.name == name:
                return offering
        return None

    def add(self, offering: Offering) -> Offering:
        if self.get(offering.name):
            raise ValueError(f"Offering '{offering.name}' already exists")
        self._offerings.append(offering)
        self.version += 1
        return offering

    def update(self, current_name: str, /, **fields) -> Offering:
        current = self.get(current_name)
        if current is None:
            raise KeyError(current_name)

        unknown = set(fields) - set(self.EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown offering fields: {sorted(unknown)}")

        merged = asdict(current)
        merged.update(fields)
        if merged["name"] != current_name and self.get(merged["name"]):
            raise ValueError(f"Offering '{merged['name']}' already exists")

        # Build a fresh instance so validation runs before anything changes
        updated = Offering(**merged)
        index = self._offerings.index(current)
        self._offerings[index] = updated
        self.version += 1
        return updated

    def remove(self, name: str) -> bool:
        current = self.get(name)
        if current is None:
            return False
        self._offerings.remove(current)
        self.version += 1
        return True

    def replace_all(self, offerings: Iterable[Offering]):
        fresh = OfferingRegistry(offerings)
        self._offerings = fresh._offerings
        self.version += 1

    def all_skills(self) -> set:
        """Union of every offering's skills, lowercased."""
        skills = set()
        for offering in self._offerings:
            skills |= offering.skill_set
        return skills

    def rate_for(self, category: str) -> float:
        offering = self.get(category)
        return offering.reference_rate if offering else FALLBACK_RATE

    def to_list(self) -> List[Dict[str, Any]]:
        return [o.to_dict() for o in self._offerings]

    @classmethod
    def from_list(cls, items: Iterable[Dict[str, Any]]) -> "OfferingRegistry":
        return cls(Offering.from_dict(item) for item in items)
