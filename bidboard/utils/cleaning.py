import html
import re
from typing import List, NamedTuple

from ..models.project import NOT_SPECIFIED

MAX_DESCRIPTION_LENGTH = 800

FIXED_BUDGET_RE = re.compile(r'Budget:\s*\$?(\d[\d,]*(?:\.\d{2})?)', re.IGNORECASE)
HOURLY_RANGE_RE = re.compile(r'Hourly Range:\s*\$?([\d.]+)\s*-\s*\$?([\d.]+)', re.IGNORECASE)
SKILLS_RE = re.compile(r'Skills:\s*([^.]+)', re.IGNORECASE)
COUNTRY_RE = re.compile(r'Country:\s*([^.]+)', re.IGNORECASE)


class Budget(NamedTuple):
    label: str
    minimum: float
    maximum: float
    is_hourly: bool


def clean_html(raw_html: str) -> str:
    """Removes HTML tags and cleans up whitespace."""
    if not raw_html:
        return ""
    # Remove HTML tags
    clean = re.sub(r'<[^>]*>', ' ', raw_html)
    clean = html.unescape(clean)
    # Collapse multiple spaces
    return " ".join(clean.split())


def truncate(text: str, limit: int = MAX_DESCRIPTION_LENGTH) -> str:
    return text[:limit] if text else ""


def format_amount(value: float) -> str:
    """25.0 -> '25', 37.5 -> '37.5'."""
    return ("%f" % value).rstrip("0").rstrip(".")


def parse_budget(text: str) -> Budget:
    """
    Reads 'Hourly Range: $25.00-$50.00' or 'Budget: $2,000' out of a feed
    description. Hourly wins when both are present.
    """
    if not text:
        return Budget(NOT_SPECIFIED, 0.0, 0.0, False)

    hourly = HOURLY_RANGE_RE.search(text)
    if hourly:
        try:
            low, high = float(hourly.group(1)), float(hourly.group(2))
        except ValueError:
            low = high = None
        if low is not None:
            return Budget(f"${format_amount(low)}-${format_amount(high)}/hr", low, high, True)

    fixed = FIXED_BUDGET_RE.search(text)
    if fixed:
        amount = float(fixed.group(1).replace(",", ""))
        return Budget(f"${fixed.group(1)}", 0.0, amount, False)

    return Budget(NOT_SPECIFIED, 0.0, 0.0, False)


def extract_skills(text: str) -> List[str]:
    """Comma list after 'Skills:', read up to the first period."""
    match = SKILLS_RE.search(text or "")
    if not match:
        return []
    return [s.strip() for s in match.group(1).split(",") if s.strip()]


def extract_country(text: str) -> str:
    match = COUNTRY_RE.search(text or "")
    return match.group(1).strip() if match else ""


def count_occurrences(haystack: str, needle: str) -> int:
    """Non-overlapping, case-insensitive occurrence count."""
    if not needle:
        return 0
    return haystack.lower().count(needle.lower())
