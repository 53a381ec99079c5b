from typing import Iterable, List, Optional

from ..models.offering import Offering, OfferingRegistry


def attribute_offering(title: str, description: str, offerings: OfferingRegistry) -> Optional[Offering]:
    """
    Picks the first offering with a keyword found in the title or description
    (case-insensitive substring). Falls back to the first offering.
    """
    text_to_check = f"{title} {description}".lower()

    for offering in offerings:
        if any(keyword.lower() in text_to_check for keyword in offering.keywords if keyword):
            return offering

    return offerings.first


def skill_matches(skill: str, known_skills: Iterable[str]) -> bool:
    """
    Loose two-way substring test: 'react' matches 'react native' and vice versa.
    Short skills over-match ('ai' is inside 'email'); that is accepted.
    """
    skill_lower = skill.strip().lower()
    if not skill_lower:
        return False
    return any(
        known and (skill_lower in known or known in skill_lower)
        for known in (k.strip().lower() for k in known_skills)
    )


def search_keywords(offerings: OfferingRegistry, per_offering: int = 3, limit: int = 10) -> List[str]:
    """First few keywords of every offering, de-duplicated in order."""
    seen = []
    for offering in offerings:
        for keyword in offering.keywords[:per_offering]:
            if keyword not in seen:
                seen.append(keyword)
    return seen[:limit]


def matches_search(title: str, description: str, term: str) -> bool:
    if not term:
        return True
    term_lower = term.lower()
    return term_lower in title.lower() or term_lower in description.lower()
