# bidboard/models/project.py
from dataclasses import dataclass, field
from typing import List, Optional, Union
from datetime import datetime, timezone

NOT_SPECIFIED = "Not specified"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ClientInfo:
    total_spent: float = 0.0
    hire_rate: float = 0.0      # percent, 0-100
    feedback_rate: float = 0.0  # star rating, 0-5
    payment_verified: bool = False
    country: str = ""


@dataclass
class Project:
    id: str                 # Source GUID/ID, or link + timestamp + random suffix
    title: str
    description: str        # Cleaned text (no HTML), truncated
    link: str
    category: str           # Name of the Offering this was attributed to
    posted_date: datetime = field(default_factory=utc_now)

    budget: str = NOT_SPECIFIED
    budget_min: float = 0.0
    budget_max: float = 0.0
    is_hourly: bool = False
    estimated_hours: int = 20

    skills: List[str] = field(default_factory=list)
    country: str = ""
    client: ClientInfo = field(default_factory=ClientInfo)

    match_score: int = 0
    search_keyword: str = ""
    source: str = "rss"     # "rss" or "api"

    @property
    def is_instruction(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "link": self.link,
            "category": self.category,
            "postedDate": self.posted_date.isoformat(),
            "budget": self.budget,
            "budgetMin": self.budget_min,
            "budgetMax": self.budget_max,
            "isHourly": self.is_hourly,
            "estimatedHours": self.estimated_hours,
            "skills": list(self.skills),
            "country": self.country,
            "client": {
                "totalSpent": self.client.total_spent,
                "hireRate": self.client.hire_rate,
                "feedbackRate": self.client.feedback_rate,
                "paymentVerified": self.client.payment_verified,
            },
            "matchScore": self.match_score,
            "searchKeyword": self.search_keyword,
        }


@dataclass
class Placeholder:
    """Synthetic status record shown in place of real projects."""
    id: str
    kind: str               # "offline", "no_results", "error"
    title: str
    description: str
    link: str = "https://www.upwork.com/nx/find-work/"
    posted_date: datetime = field(default_factory=utc_now)
    category: str = "System"
    budget: str = "N/A"

    @property
    def is_instruction(self) -> bool:
        return True


ListingItem = Union[Project, Placeholder]


def real_projects(items) -> List[Project]:
    """Drops instruction records; every aggregate works on this."""
    return [item for item in items if isinstance(item, Project)]


def find_project(items, project_id: str) -> Optional[Project]:
    for item in real_projects(items):
        if item.id == project_id:
            return item
    return None
