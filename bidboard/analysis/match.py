from ..models.offering import Offering
from ..utils.cleaning import count_occurrences

BASE_SCORE = 60
TITLE_HIT = 8
DESCRIPTION_HIT = 3
QUALITY_BONUS = 5
MAX_SCORE = 99  # 100 is never handed out


def score_match(
    title: str,
    description: str,
    offering: Offering,
    budget_max: float = 0.0,
    payment_verified: bool = False,
) -> int:
    """
    Cheap keyword-frequency score used for sorting at ingestion time.

    60 + 8 per keyword hit in the title + 3 per hit in the description,
    +5 for verified payment, +5 above $5k and another +5 above $10k,
    capped at 99.
    """
    score = BASE_SCORE

    if offering is not None:
        for keyword in offering.keywords:
            score += TITLE_HIT * count_occurrences(title or "", keyword)
            score += DESCRIPTION_HIT * count_occurrences(description or "", keyword)

    if payment_verified or "verified payment" in (description or "").lower():
        score += QUALITY_BONUS
    if budget_max > 5000:
        score += QUALITY_BONUS
    if budget_max > 10000:
        score += QUALITY_BONUS

    return max(0, min(score, MAX_SCORE))
