"""
Turns raw job records into canonical ``Project`` objects.

Two shapes arrive from the job source:

* RSS items (``title``/``description``/``link``/``pubDate``/``guid``), where
  budget, skills and country are buried in the description text. Proxies that
  convert XML to JSON wrap every value in a one-element list, and ``guid`` may
  be ``{"_": "..."}``.
* Structured API jobs with ``budget.hourlyRate``/``budget.fixedBudget``, a
  ``skills`` list and a ``client`` object.

Every raw result is wrapped as ``{"source": ..., "keyword": ..., "payload": {...}}``.
"""
import logging
import time
import uuid
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional

from ..analysis.match import score_match
from ..models.offering import Offering, OfferingRegistry
from ..models.project import ClientInfo, Project, NOT_SPECIFIED, utc_now
from ..utils.cleaning import (
    Budget,
    clean_html,
    extract_country,
    extract_skills,
    format_amount,
    parse_budget,
    truncate,
)
from ..utils.filtering import attribute_offering

LOGGER = logging.getLogger(__name__)

MIN_FIXED_HOURS = 10
DEFAULT_HOURS = 20
# (description length below, hours) for hourly jobs with no stated duration
HOURLY_ESTIMATE_TIERS = ((200, 20), (400, 40), (600, 60))
HOURLY_ESTIMATE_MAX = 80


def _text(value: Any) -> str:
    if isinstance(value, list):
        value = value[0] if value else ""
    if isinstance(value, dict):
        value = value.get("_", "")
    return "" if value is None else str(value)


def _number(value: Any) -> float:
    if isinstance(value, dict):
        value = value.get("amount", value.get("value"))
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def parse_posted(value: Any) -> datetime:
    """ISO-8601, RFC-822 or epoch (s/ms); anything else becomes 'now'."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = value / 1000 if value > 1e12 else value
        return datetime.fromtimestamp(seconds, tz=timezone.utc)

    text = _text(value).strip()
    if not text:
        return utc_now()

    parsed = None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            LOGGER.debug("Unparseable posted date %r", text)

    if parsed is None:
        return utc_now()
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def synthetic_id(link: str) -> str:
    """link + epoch millis + random suffix; unique even for repeated links."""
    return f"{link}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def estimate_hours(budget: Budget, description: str, reference_rate: float) -> int:
    if budget.is_hourly:
        length = len(description or "")
        for limit, hours in HOURLY_ESTIMATE_TIERS:
            if length < limit:
                return hours
        return HOURLY_ESTIMATE_MAX

    if budget.maximum > 0:
        return max(MIN_FIXED_HOURS, int(budget.maximum // reference_rate))

    return DEFAULT_HOURS


def is_structured(payload: Dict[str, Any]) -> bool:
    return (
        isinstance(payload.get("budget"), dict)
        or isinstance(payload.get("client"), dict)
        or (isinstance(payload.get("skills"), list) and not isinstance(payload.get("title"), list))
    )


def _structured_budget(payload: Dict[str, Any]) -> Budget:
    budget = payload.get("budget") or {}
    hourly = budget.get("hourlyRate") or {}
    low = _number(hourly.get("min") if hourly else payload.get("hourlyBudgetMin"))
    high = _number(hourly.get("max") if hourly else payload.get("hourlyBudgetMax"))

    if low or high:
        high = max(high, low)
        return Budget(f"${format_amount(low)}-${format_amount(high)}/hr", low, high, True)

    amount = _number(budget.get("fixedBudget") if budget else payload.get("amount"))
    if amount > 0:
        label = f"${amount:,.0f}" if amount.is_integer() else f"${amount:,.2f}"
        return Budget(label, 0.0, amount, False)

    return Budget(NOT_SPECIFIED, 0.0, 0.0, False)


def _structured_skills(raw_skills: Any) -> List[str]:
    skills = []
    for skill in raw_skills or []:
        if isinstance(skill, dict):
            skill = skill.get("prettyName") or skill.get("name")
        if skill and str(skill).strip():
            skills.append(str(skill).strip())
    return skills


def _client_info(raw_client: Any) -> ClientInfo:
    if not isinstance(raw_client, dict):
        return ClientInfo()

    verified = raw_client.get("paymentVerified")
    if verified is None:
        verified = str(raw_client.get("verificationStatus", "")).upper() == "VERIFIED"

    location = raw_client.get("location") or {}
    country = raw_client.get("country") or (location.get("country") if isinstance(location, dict) else location)

    return ClientInfo(
        total_spent=_number(raw_client.get("totalSpent")),
        hire_rate=_number(raw_client.get("hireRate")),
        feedback_rate=_number(raw_client.get("feedbackRate", raw_client.get("rating"))),
        payment_verified=bool(verified),
        country=str(country or ""),
    )


def _build_project(
    *,
    source_id: str,
    title: str,
    description: str,
    link: str,
    posted: Any,
    budget: Budget,
    skills: List[str],
    country: str,
    client: ClientInfo,
    offering: Offering,
    keyword: str,
    source: str,
) -> Project:
    description = truncate(description)
    reference_rate = offering.reference_rate if offering else 100.0

    return Project(
        id=source_id or synthetic_id(link),
        title=title,
        description=description,
        link=link,
        category=offering.name if offering else "",
        posted_date=parse_posted(posted),
        budget=budget.label,
        budget_min=budget.minimum,
        budget_max=budget.maximum,
        is_hourly=budget.is_hourly,
        estimated_hours=estimate_hours(budget, description, reference_rate),
        skills=skills,
        country=country,
        client=client,
        match_score=score_match(
            title, description, offering, budget.maximum, client.payment_verified
        ),
        search_keyword=keyword,
        source=source,
    )


def normalize_record(payload: Dict[str, Any], offerings: OfferingRegistry, keyword: str = "") -> Project:
    if is_structured(payload):
        title = _text(payload.get("title")) or "Untitled"
        description = clean_html(_text(payload.get("description")))
        client = _client_info(payload.get("client"))
        location = payload.get("location") or payload.get("country") or ""
        if isinstance(location, dict):
            location = location.get("country", "")

        return _build_project(
            source_id=_text(payload.get("id") or payload.get("uid") or payload.get("ciphertext")),
            title=title,
            description=description,
            link=_text(payload.get("url") or payload.get("link")),
            posted=payload.get("createdDateTime") or payload.get("createdAt") or payload.get("publishedDate"),
            budget=_structured_budget(payload),
            skills=_structured_skills(payload.get("skills")),
            country=client.country or str(location),
            client=client,
            offering=attribute_offering(title, description, offerings),
            keyword=keyword,
            source="api",
        )

    title = _text(payload.get("title"))
    description = clean_html(_text(payload.get("description")))
    country = extract_country(description)

    return _build_project(
        source_id=_text(payload.get("guid") or payload.get("id")),
        title=title,
        description=description,
        link=_text(payload.get("link")),
        posted=_text(payload.get("pubDate") or payload.get("published")),
        budget=parse_budget(description),
        skills=extract_skills(description),
        country=country,
        client=ClientInfo(
            payment_verified="verified payment" in description.lower(),
            country=country,
        ),
        offering=attribute_offering(title, description, offerings),
        keyword=keyword,
        source="rss",
    )


def normalize_batch(raw_results: List[Dict[str, Any]], offerings: OfferingRegistry) -> List[Project]:
    """
    Normalizes and de-duplicates one fetch cycle. First occurrence of an id
    (or of a non-empty link) wins; records that fail to parse are skipped.
    """
    LOGGER.info("🔄 Normalizing %d raw records...", len(raw_results))

    projects: Dict[str, Project] = {}
    seen_links = set()

    for item in raw_results:
        payload = item.get("payload") or {}
        try:
            project = normalize_record(payload, offerings, item.get("keyword", ""))
        except (AttributeError, TypeError, ValueError) as exc:
            LOGGER.warning("⚠️ Failed to normalize a %s record: %s", item.get("source", "unknown"), exc)
            continue

        if project.id in projects or (project.link and project.link in seen_links):
            continue
        projects[project.id] = project
        if project.link:
            seen_links.add(project.link)

    LOGGER.info("✅ Normalized %d unique projects.", len(projects))
    return list(projects.values())
