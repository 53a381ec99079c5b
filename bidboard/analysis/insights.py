import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..models.offering import OfferingRegistry
from ..models.project import Project, real_projects
from ..utils.filtering import skill_matches
from .fit import (
    FitAssessment,
    HIGH,
    LEVELS,
    LOW,
    RECOMMENDATIONS,
    SKIP,
    TIMELINES,
    analyze_fit,
)

LOGGER = logging.getLogger(__name__)

TOP_RECOMMENDED_LIMIT = 10
QUICK_WIN_LIMIT = 5
BEST_SKILL_MATCH_LIMIT = 10
QUICK_WIN_MIN_SKILL_RATIO = 0.5
MISSED_REVENUE_SHARE = 0.3


@dataclass
class ScoredProject:
    project: Project
    fit: FitAssessment


@dataclass
class SkillDemand:
    name: str
    demand: int = 0
    projects: List[str] = field(default_factory=list)
    matched: bool = False


@dataclass
class SkillsGapReport:
    matched: List[SkillDemand] = field(default_factory=list)
    missing: List[SkillDemand] = field(default_factory=list)
    total_demand: int = 0
    matched_demand: int = 0
    missing_demand: int = 0
    coverage: float = 0.0             # percent
    avg_project_value: float = 0.0
    missed_revenue: float = 0.0


@dataclass
class BoardStats:
    total: int = 0
    avg_match: int = 0
    potential: float = 0.0


@dataclass
class Insights:
    total: int = 0
    by_budget_tier: Dict[str, List[ScoredProject]] = field(default_factory=dict)
    by_complexity: Dict[str, List[ScoredProject]] = field(default_factory=dict)
    by_timeline: Dict[str, List[ScoredProject]] = field(default_factory=dict)
    recommendation_counts: Dict[str, int] = field(default_factory=dict)
    top_recommended: List[ScoredProject] = field(default_factory=list)
    quick_wins: List[ScoredProject] = field(default_factory=list)
    high_budget: List[ScoredProject] = field(default_factory=list)
    best_skill_matches: List[ScoredProject] = field(default_factory=list)
    skills_gap: SkillsGapReport = field(default_factory=SkillsGapReport)


def compute_stats(items, offerings: OfferingRegistry) -> BoardStats:
    """Header numbers: count, average match score, potential value."""
    projects = real_projects(items)
    if not projects:
        return BoardStats()

    return BoardStats(
        total=len(projects),
        avg_match=round(sum(p.match_score for p in projects) / len(projects)),
        potential=sum(p.estimated_hours * offerings.rate_for(p.category) for p in projects),
    )


def _by_recommendation(scored: List[ScoredProject]) -> List[ScoredProject]:
    return sorted(scored, key=lambda s: s.fit.recommendation_score, reverse=True)


def _bucket(scored: List[ScoredProject], labels, key: Callable[[FitAssessment], str]):
    buckets = {label: [] for label in labels}
    for item in scored:
        buckets[key(item.fit)].append(item)
    return buckets


def skills_gap(projects: List[Project], offerings: OfferingRegistry) -> SkillsGapReport:
    known = offerings.all_skills()
    tally: Dict[str, SkillDemand] = {}

    for project in projects:
        for skill in project.skills:
            key = skill.strip().lower()
            if not key:
                continue
            entry = tally.setdefault(key, SkillDemand(name=skill.strip()))
            entry.demand += 1
            if project.title not in entry.projects:
                entry.projects.append(project.title)

    for entry in tally.values():
        entry.matched = skill_matches(entry.name, known)

    ordered = sorted(tally.values(), key=lambda e: e.demand, reverse=True)
    matched = [e for e in ordered if e.matched]
    missing = [e for e in ordered if not e.matched]

    total_demand = sum(e.demand for e in ordered)
    matched_demand = sum(e.demand for e in matched)
    missing_demand = total_demand - matched_demand

    avg_value = 0.0
    if projects:
        avg_value = sum(
            p.estimated_hours * offerings.rate_for(p.category) for p in projects
        ) / len(projects)

    return SkillsGapReport(
        matched=matched,
        missing=missing,
        total_demand=total_demand,
        matched_demand=matched_demand,
        missing_demand=missing_demand,
        coverage=round(matched_demand / total_demand * 100, 1) if total_demand else 0.0,
        avg_project_value=avg_value,
        missed_revenue=sum(e.demand * avg_value * MISSED_REVENUE_SHARE for e in missing),
    )


def build_insights(
    items,
    offerings: OfferingRegistry,
    assess: Optional[Callable[[Project], FitAssessment]] = None,
) -> Insights:
    """
    Runs the fit analysis over every real project and derives the ranked
    views. Instruction records never reach any of the numbers.
    """
    assess = assess or (lambda project: analyze_fit(project, offerings))
    projects = real_projects(items)
    scored = [ScoredProject(p, assess(p)) for p in projects]
    ranked = _by_recommendation(scored)

    counts = {label: 0 for label in RECOMMENDATIONS}
    for item in scored:
        counts[item.fit.recommendation] += 1

    insights = Insights(
        total=len(scored),
        by_budget_tier=_bucket(scored, LEVELS, lambda f: f.budget_tier),
        by_complexity=_bucket(scored, LEVELS, lambda f: f.complexity),
        by_timeline=_bucket(scored, TIMELINES, lambda f: f.timeline),
        recommendation_counts=counts,
        top_recommended=[s for s in ranked if s.fit.recommendation != SKIP][:TOP_RECOMMENDED_LIMIT],
        quick_wins=[
            s for s in ranked
            if s.fit.complexity == LOW and s.fit.skill_ratio >= QUICK_WIN_MIN_SKILL_RATIO
        ][:QUICK_WIN_LIMIT],
        high_budget=[s for s in ranked if s.fit.budget_tier == HIGH],
        best_skill_matches=sorted(scored, key=lambda s: s.fit.skill_ratio, reverse=True)[:BEST_SKILL_MATCH_LIMIT],
        skills_gap=skills_gap(projects, offerings),
    )

    LOGGER.debug("Insights built for %d projects: %s", insights.total, counts)
    return insights
