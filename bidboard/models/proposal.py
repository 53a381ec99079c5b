# bidboard/models/proposal.py
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from datetime import datetime, timezone


def _as_list(value) -> List[str]:
    if isinstance(value, list):
        return [str(v) for v in value if v is not None and str(v).strip()]
    if isinstance(value, str) and value.strip():
        return [value.strip()]
    return []


def _as_float(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass
class ProposalAnalysis:
    """Structured fields returned next to the proposal text.

    The generator may omit anything, so every field has a default and
    ``from_dict`` coerces whatever arrives instead of trusting it.
    """
    recommendation: str = ""
    confidence: Optional[float] = None
    estimated_hours: Optional[float] = None
    estimated_cost: Optional[float] = None
    timeline: str = ""
    key_points: List[str] = field(default_factory=list)
    matched_skills: List[str] = field(default_factory=list)
    missing_skills: List[str] = field(default_factory=list)
    deliverables: List[str] = field(default_factory=list)
    risks: List[str] = field(default_factory=list)
    questions: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "ProposalAnalysis":
        if not isinstance(data, dict):
            return cls()
        # Nested "analysis" object or flat keys, whichever came back
        nested = data.get("analysis")
        merged = {**data, **nested} if isinstance(nested, dict) else data

        return cls(
            recommendation=str(merged.get("recommendation") or ""),
            confidence=_as_float(merged.get("confidence")),
            estimated_hours=_as_float(merged.get("estimatedHours")),
            estimated_cost=_as_float(merged.get("estimatedCost")),
            timeline=str(merged.get("estimatedTimeline") or merged.get("timeline") or ""),
            key_points=_as_list(merged.get("keyPoints")),
            matched_skills=_as_list(merged.get("matchedSkills")),
            missing_skills=_as_list(merged.get("missingSkills")),
            deliverables=_as_list(merged.get("deliverables")),
            risks=_as_list(merged.get("risks")),
            questions=_as_list(merged.get("questions") or merged.get("clarifyingQuestions")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommendation": self.recommendation,
            "confidence": self.confidence,
            "estimatedHours": self.estimated_hours,
            "estimatedCost": self.estimated_cost,
            "estimatedTimeline": self.timeline,
            "keyPoints": self.key_points,
            "matchedSkills": self.matched_skills,
            "missingSkills": self.missing_skills,
            "deliverables": self.deliverables,
            "risks": self.risks,
            "questions": self.questions,
        }


@dataclass
class Proposal:
    project_id: str
    proposal: str
    analysis: ProposalAnalysis = field(default_factory=ProposalAnalysis)
    rate: float = 0.0
    estimated_hours: int = 0
    estimated_cost: float = 0.0
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    is_error: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projectId": self.project_id,
            "proposal": self.proposal,
            "analysis": self.analysis.to_dict(),
            "rate": self.rate,
            "estimatedHours": self.estimated_hours,
            "estimatedCost": self.estimated_cost,
            "generatedAt": self.generated_at.isoformat(),
            "isError": self.is_error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Proposal":
        try:
            generated_at = datetime.fromisoformat(data.get("generatedAt", ""))
        except (TypeError, ValueError):
            generated_at = datetime.now(timezone.utc)
        return cls(
            project_id=str(data.get("projectId", "")),
            proposal=str(data.get("proposal", "")),
            analysis=ProposalAnalysis.from_dict(data.get("analysis")),
            rate=_as_float(data.get("rate")) or 0.0,
            estimated_hours=int(_as_float(data.get("estimatedHours")) or 0),
            estimated_cost=_as_float(data.get("estimatedCost")) or 0.0,
            generated_at=generated_at,
            is_error=bool(data.get("isError", False)),
        )
