"""
Multi-factor fit assessment of a project against the whole offering registry.

recommendation_score =
    skill_ratio * 35 + budget_score * 25 + client_score * 20
    + timeline_score * 10 + match_score / 100 * 10
"""
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..models.offering import OfferingRegistry
from ..models.project import Project
from ..utils.filtering import skill_matches

STRONG_BID = "STRONG BID"
BID = "BID"
CONSIDER = "CONSIDER"
SKIP = "SKIP"
RECOMMENDATIONS = (STRONG_BID, BID, CONSIDER, SKIP)

LOW, MEDIUM, HIGH = "low", "medium", "high"
LEVELS = (LOW, MEDIUM, HIGH)
BUDGET_SCORES = {HIGH: 1.0, MEDIUM: 0.7, LOW: 0.3}

# (max hours, label, score); anything longer is the last bucket
TIMELINE_BUCKETS = (
    (20, "<1 week", 1.0),
    (40, "1-2 weeks", 0.9),
    (80, "2-4 weeks", 0.7),
)
LONG_TIMELINE = ("1+ month", 0.5)
TIMELINES = tuple(label for _, label, _ in TIMELINE_BUCKETS) + (LONG_TIMELINE[0],)

NEUTRAL_SKILL_RATIO = 0.5

WEIGHTS = {
    "skill": 35,
    "budget": 25,
    "client": 20,
    "timeline": 10,
    "match": 10,
}


@dataclass
class FitAssessment:
    skill_ratio: float
    skill_match: int                    # 0-100
    matched_skills: List[str] = field(default_factory=list)
    missing_skills: List[str] = field(default_factory=list)
    budget_tier: str = LOW
    budget_score: float = BUDGET_SCORES[LOW]
    complexity: str = MEDIUM
    timeline: str = TIMELINES[0]
    timeline_score: float = 1.0
    client_score: int = 50              # 0-100
    recommendation_score: int = 0       # 0-100
    recommendation: str = CONSIDER


def skill_overlap(skills: List[str], known_skills) -> Tuple[float, List[str], List[str]]:
    """Splits project skills into matched/missing; ratio is 0.5 when none are listed."""
    known = [k for k in known_skills if k]
    matched, missing = [], []
    for skill in skills:
        (matched if skill_matches(skill, known) else missing).append(skill)
    ratio = len(matched) / len(skills) if skills else NEUTRAL_SKILL_RATIO
    return ratio, matched, missing


def budget_tier(budget_max: float, is_hourly: bool) -> str:
    high, medium = (75, 40) if is_hourly else (5000, 1000)
    if budget_max >= high:
        return HIGH
    if budget_max >= medium:
        return MEDIUM
    return LOW


def complexity_level(description: str, skill_count: int) -> str:
    length = len(description or "")
    if length > 1500 or skill_count > 6:
        return HIGH
    if length < 500 and skill_count <= 3:
        return LOW
    return MEDIUM


def timeline_bucket(estimated_hours: float) -> Tuple[str, float]:
    for max_hours, label, score in TIMELINE_BUCKETS:
        if estimated_hours <= max_hours:
            return label, score
    return LONG_TIMELINE


def client_quality(project: Project) -> float:
    score = 0.5
    if project.client.payment_verified:
        score += 0.2
    if project.client.total_spent > 10000:
        score += 0.2
    if project.client.feedback_rate >= 4.5:
        score += 0.1
    return score


def recommend(recommendation_score: float, skill_ratio: float) -> str:
    """Rules are checked in order; the first hit wins."""
    if recommendation_score >= 75 and skill_ratio >= 0.7:
        return STRONG_BID
    if recommendation_score >= 60 and skill_ratio >= 0.5:
        return BID
    if recommendation_score < 40 or skill_ratio < 0.3:
        return SKIP
    return CONSIDER


def analyze_fit(project: Project, offerings: OfferingRegistry) -> FitAssessment:
    ratio, matched, missing = skill_overlap(project.skills, offerings.all_skills())
    tier = budget_tier(project.budget_max, project.is_hourly)
    timeline, timeline_score = timeline_bucket(project.estimated_hours)
    client = client_quality(project)

    composite = round(
        ratio * WEIGHTS["skill"]
        + BUDGET_SCORES[tier] * WEIGHTS["budget"]
        + client * WEIGHTS["client"]
        + timeline_score * WEIGHTS["timeline"]
        + (project.match_score / 100) * WEIGHTS["match"]
    )

    return FitAssessment(
        skill_ratio=ratio,
        skill_match=round(ratio * 100),
        matched_skills=matched,
        missing_skills=missing,
        budget_tier=tier,
        budget_score=BUDGET_SCORES[tier],
        complexity=complexity_level(project.description, len(project.skills)),
        timeline=timeline,
        timeline_score=timeline_score,
        client_score=round(client * 100),
        recommendation_score=composite,
        recommendation=recommend(composite, ratio),
    )


class FitAnalyzer:
    """Caches assessments per (project id, registry version)."""

    def __init__(self, offerings: OfferingRegistry):
        self.offerings = offerings
        self._cache: Dict[Tuple[str, int], FitAssessment] = {}
        self._version = offerings.version

    def assess(self, project: Project) -> FitAssessment:
        if self.offerings.version != self._version:
            self._cache.clear()
            self._version = self.offerings.version

        key = (project.id, self._version)
        if key not in self._cache:
            self._cache[key] = analyze_fit(project, self.offerings)
        return self._cache[key]

    def clear(self):
        self._cache.clear()
