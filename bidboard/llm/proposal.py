import json
import logging
import math
import os
import re
from typing import Any, Dict, Optional

from google import genai
from google.genai import types
from langchain_core.prompts import PromptTemplate

from .. import config
from ..models.offering import Offering, OfferingRegistry
from ..models.project import Project
from ..models.proposal import Proposal, ProposalAnalysis
from ..utils.cleaning import format_amount

LOGGER = logging.getLogger(__name__)

FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)

DEFAULT_TEMPLATE = """Hi there,

I read through your post and this is right in our wheelhouse. [Describe the approach in 2-3 sentences.]

Rate: $[RATE]/hr
Estimated effort: [HOURS] hours
Estimated total: $[TOTAL]

Happy to jump on a quick call to go over the details.

Best regards,
[NAME]"""

PROPOSAL_PROMPT = PromptTemplate.from_template("""
Generate a compelling freelance proposal. Be professional and specific.

PROJECT:
Title: {title}
Description: {description}
Skills: {skills}
Budget: {budget}

YOUR OFFER:
Category: {category}
Rate: ${rate}/hr
Hours: {hours}
Total: ${total}
Team skills in this category: {offering_skills}
Other team skills: {other_skills}

STARTING TEMPLATE (keep its structure and tone):
{template}

REQUIREMENTS:
1. Hook showing you understand their problem
2. 2-3 relevant experiences
3. Clear approach
4. Timeline
5. Pricing
6. Call-to-action
7. Under 250 words
8. Professional tone
9. No generic phrases

Return ONLY valid JSON:
{{"proposal": "text with \\n for line breaks", "keyPoints": ["point1", "point2"], "estimatedTimeline": "X weeks",
 "analysis": {{"recommendation": "BID", "confidence": 0.8, "estimatedHours": 0, "estimatedCost": 0,
 "matchedSkills": [], "missingSkills": [], "risks": [], "deliverables": [], "questions": []}}}}
""")


class ProposalError(Exception):
    """No usable reply came back from the proposal generator."""


def fill_template(template: str, *, rate: float, hours: int, total: float, name: str = "", category: str = "") -> str:
    replacements = {
        "[RATE]": format_amount(rate),
        "[HOURS]": str(hours),
        "[TOTAL]": f"{total:,.0f}",
        "[NAME]": name or "The Team",
        "[CATEGORY]": category,
    }
    for placeholder, value in replacements.items():
        template = template.replace(placeholder, value)
    return template


def build_request(
    project: Project,
    offering: Optional[Offering],
    offerings: OfferingRegistry,
    template: Optional[str] = None,
    rate: Optional[float] = None,
    user_name: str = "",
) -> Dict[str, Any]:
    """Everything the generator needs, plus the rendered prompt."""
    rate = float(rate or (offering.reference_rate if offering else 100.0))
    hours = project.estimated_hours
    total = hours * rate

    offering_skills = offering.skills if offering else []
    own = {s.lower() for s in offering_skills}
    other_skills = sorted(s for s in offerings.all_skills() if s not in own)

    filled = fill_template(
        template or DEFAULT_TEMPLATE,
        rate=rate, hours=hours, total=total,
        name=user_name, category=project.category,
    )

    prompt = PROPOSAL_PROMPT.format(
        title=project.title,
        description=project.description,
        skills=", ".join(project.skills) or "Not specified",
        budget=project.budget,
        category=project.category,
        rate=format_amount(rate),
        hours=hours,
        total=f"{total:,.0f}",
        offering_skills=", ".join(offering_skills) or "Not specified",
        other_skills=", ".join(other_skills) or "None",
        template=filled,
    )

    return {
        "projectId": project.id,
        "project": {
            "title": project.title,
            "description": project.description,
            "skills": list(project.skills),
            "budget": project.budget,
        },
        "offering": offering.to_dict() if offering else None,
        "offerings": offerings.to_list(),
        "template": filled,
        "rate": rate,
        "estimatedHours": hours,
        "estimatedCost": total,
        "prompt": prompt,
    }


def strip_fences(text: str) -> str:
    match = FENCE_RE.search(text or "")
    return match.group(1).strip() if match else (text or "").strip()


def _fallback_timeline(hours: int) -> str:
    return f"{max(1, math.ceil(hours / 40))} weeks"


def parse_response(raw_text: str, request: Dict[str, Any]) -> Proposal:
    """
    Structured JSON when possible; otherwise the whole reply becomes the
    proposal body with default analysis fields.
    """
    hours = request["estimatedHours"]
    base = dict(
        project_id=request["projectId"],
        rate=request["rate"],
        estimated_hours=hours,
        estimated_cost=request["estimatedCost"],
    )

    try:
        data = json.loads(strip_fences(raw_text))
    except (TypeError, ValueError):
        data = None

    if isinstance(data, dict) and isinstance(data.get("proposal"), str) and data["proposal"].strip():
        return Proposal(proposal=data["proposal"], analysis=ProposalAnalysis.from_dict(data), **base)

    LOGGER.warning("Proposal reply was not structured JSON; keeping raw text.")
    return Proposal(
        proposal=raw_text or "",
        analysis=ProposalAnalysis(
            key_points=["Custom proposal generated"],
            timeline=_fallback_timeline(hours),
        ),
        **base,
    )


def error_proposal(request: Dict[str, Any], exc: Exception) -> Proposal:
    return Proposal(
        project_id=request["projectId"],
        proposal=f"Error: {exc}\n\nPlease try again.",
        rate=request["rate"],
        estimated_hours=request["estimatedHours"],
        estimated_cost=request["estimatedCost"],
        is_error=True,
    )


def create_client(api_key: Optional[str] = None):
    api_key = api_key or os.getenv(config.GOOGLE_API_KEY_ENV)
    if not api_key:
        raise ProposalError(f"{config.GOOGLE_API_KEY_ENV} is not configured")
    return genai.Client(
        api_key=api_key,
        http_options=types.HttpOptions(timeout=int(config.PROPOSAL_TIMEOUT_SECONDS * 1000)),
    )


def request_proposal(request: Dict[str, Any], client=None) -> str:
    client = client or create_client()
    response = client.models.generate_content(
        model=config.PROPOSAL_MODEL,
        contents=request["prompt"],
    )
    text = response.text or ""
    if not text.strip():
        raise ProposalError("The model returned an empty reply")
    return text


def generate_proposal(
    project: Project,
    offerings: OfferingRegistry,
    template: Optional[str] = None,
    rate: Optional[float] = None,
    user_name: str = "",
    client=None,
) -> Proposal:
    """Never raises: any failure comes back as an error-bearing Proposal."""
    offering = offerings.get(project.category)
    request = build_request(project, offering, offerings, template, rate, user_name)

    LOGGER.info("✍️  Drafting proposal for '%s' at $%s/hr...", project.title, request["rate"])
    try:
        raw_text = request_proposal(request, client)
    except Exception as exc:
        LOGGER.error("❌ Failed to draft for %s: %s", project.title, exc)
        return error_proposal(request, exc)

    return parse_response(raw_text, request)
