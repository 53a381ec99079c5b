"""
BidBoard: the single owner of dashboard state.

Offerings, the current project snapshot, proposals and the user's markers
all live here and are persisted through a ``JsonStore`` on every mutation.
The project snapshot is an immutable tuple replaced wholesale by each
refresh; when several refreshes overlap, only the most recently started one
is published.
"""
import itertools
import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from . import config
from .analysis.fit import FitAnalyzer, FitAssessment
from .analysis.insights import BoardStats, Insights, build_insights, compute_stats
from .graph.workflow import run_fetch_cycle
from .llm import proposal as proposal_llm
from .models.offering import Offering, OfferingRegistry
from .models.project import ListingItem, Project, find_project, real_projects
from .models.proposal import Proposal
from .platforms.job_source import JobSourceClient
from .utils import persistence
from .utils.filtering import matches_search
from .utils.google_sheets import export_projects
from .utils.persistence import JsonStore

LOGGER = logging.getLogger(__name__)

CHECKING, ONLINE, OFFLINE = "checking", "online", "offline"
SORT_KEYS = ("date", "match", "budget", "recommendation")


def default_registry() -> OfferingRegistry:
    return OfferingRegistry.from_list(config.DEFAULT_OFFERINGS)


class BidBoard:
    def __init__(
        self,
        store: JsonStore,
        client: Optional[JobSourceClient] = None,
        proposal_generator: Optional[Callable[..., Proposal]] = None,
        rss_urls: Optional[List[str]] = None,
    ):
        self.store = store
        self.client = client or JobSourceClient()
        self.rss_urls = rss_urls if rss_urls is not None else config.RSS_FEED_URLS
        self._generate = proposal_generator or proposal_llm.generate_proposal

        self.offerings = self._load_offerings()
        self.fit = FitAnalyzer(self.offerings)

        self.saved: Dict[str, dict] = store.load(persistence.SAVED_PROJECTS, {})
        self.applied: Dict[str, str] = store.load(persistence.APPLIED_PROJECTS, {})
        self.notes: Dict[str, str] = store.load(persistence.TEAM_NOTES, {})
        self.template: str = store.load(persistence.PROPOSAL_TEMPLATE, proposal_llm.DEFAULT_TEMPLATE)
        self.user_name: str = store.load(persistence.USER_NAME, "")
        self.proposals: Dict[str, Proposal] = self._load_proposals()

        self.projects: Tuple[ListingItem, ...] = ()
        self.status = CHECKING
        self.last_refresh: Optional[datetime] = None

        self._lock = threading.Lock()
        self._fetch_counter = itertools.count(1)
        self._latest_fetch = 0
        self._proposal_counter = itertools.count(1)
        self._latest_proposal: Dict[str, int] = {}

    # --- Loading ---

    def _load_offerings(self) -> OfferingRegistry:
        stored = self.store.load(persistence.OFFERINGS, [])
        if not stored:
            return default_registry()
        try:
            return OfferingRegistry.from_list(stored)
        except (ValueError, TypeError, AttributeError) as e:
            LOGGER.error("❌ Stored offerings are invalid, using defaults: %s", e)
            return default_registry()

    def _load_proposals(self) -> Dict[str, Proposal]:
        proposals = {}
        for project_id, data in self.store.load(persistence.PROPOSALS, {}).items():
            if isinstance(data, dict):
                proposals[project_id] = Proposal.from_dict(data)
        return proposals

    # --- Fetching ---

    def check_status(self) -> bool:
        online = self.client.check_status()
        self.status = ONLINE if online else OFFLINE
        return online

    def refresh(self) -> bool:
        """
        Runs one fetch cycle. Returns False when a newer refresh started
        meanwhile and this result was discarded.
        """
        with self._lock:
            token = next(self._fetch_counter)
            self._latest_fetch = token

        items = run_fetch_cycle(
            self.client,
            self.offerings,
            max_keywords=config.MAX_SEARCH_KEYWORDS,
            rss_urls=self.rss_urls,
            limit=config.FETCH_LIMIT,
        )

        with self._lock:
            if token != self._latest_fetch:
                LOGGER.info("Discarding stale fetch #%d", token)
                return False
            self.projects = tuple(items)
            self.fit.clear()
            offline = any(getattr(i, "kind", "") == "offline" for i in items)
            self.status = OFFLINE if offline else ONLINE
            if real_projects(items):
                self.last_refresh = datetime.now(timezone.utc)
        LOGGER.info("✅ Board now holds %d projects.", len(real_projects(items)))
        return True

    # --- Analysis ---

    def stats(self) -> BoardStats:
        return compute_stats(self.projects, self.offerings)

    def assess(self, project: Project) -> FitAssessment:
        return self.fit.assess(project)

    def insights(self) -> Insights:
        return build_insights(self.projects, self.offerings, assess=self.fit.assess)

    def visible_projects(self, category: str = "all", search: str = "", sort_by: str = "date") -> List[ListingItem]:
        """Category/saved filter plus text search; placeholders always come first."""
        if sort_by not in SORT_KEYS:
            raise ValueError(f"Unknown sort key: {sort_by}")

        placeholders = [p for p in self.projects if p.is_instruction]
        items = []
        for project in real_projects(self.projects):
            if category == "saved":
                if project.id not in self.saved:
                    continue
            elif category != "all" and project.category != category:
                continue
            if not matches_search(project.title, project.description, search):
                continue
            items.append(project)

        sort_keys = {
            "date": lambda p: p.posted_date,
            "match": lambda p: p.match_score,
            "budget": lambda p: p.budget_max,
            "recommendation": lambda p: self.assess(p).recommendation_score,
        }
        items.sort(key=sort_keys[sort_by], reverse=True)
        return placeholders + items

    # --- Markers, notes, settings ---

    def toggle_saved(self, project: Project) -> bool:
        if project.id in self.saved:
            del self.saved[project.id]
        else:
            self.saved[project.id] = {
                **project.to_dict(),
                "savedAt": datetime.now(timezone.utc).isoformat(),
            }
        self.store.save(persistence.SAVED_PROJECTS, self.saved)
        return project.id in self.saved

    def mark_applied(self, project_id: str, applied: bool = True):
        if applied:
            self.applied[project_id] = datetime.now(timezone.utc).isoformat()
        else:
            self.applied.pop(project_id, None)
        self.store.save(persistence.APPLIED_PROJECTS, self.applied)

    def set_note(self, project_id: str, text: str):
        if text.strip():
            self.notes[project_id] = text
        else:
            self.notes.pop(project_id, None)
        self.store.save(persistence.TEAM_NOTES, self.notes)

    def set_template(self, text: str):
        self.template = text or proposal_llm.DEFAULT_TEMPLATE
        self.store.save(persistence.PROPOSAL_TEMPLATE, self.template)

    def set_user_name(self, name: str):
        self.user_name = name.strip()
        self.store.save(persistence.USER_NAME, self.user_name)

    # --- Offerings ---

    def _save_offerings(self):
        self.store.save(persistence.OFFERINGS, self.offerings.to_list())

    def add_offering(self, offering: Optional[Offering] = None) -> Offering:
        if offering is None:
            name, n = "New Service", 1
            while self.offerings.get(name):
                n += 1
                name = f"New Service {n}"
            offering = Offering(name=name, keywords=["keyword1", "keyword2"], rate_min=80, rate_max=120)
        self.offerings.add(offering)
        self._save_offerings()
        return offering

    def update_offering(self, current_name: str, /, **fields) -> Offering:
        updated = self.offerings.update(current_name, **fields)
        self._save_offerings()
        return updated

    def delete_offering(self, name: str) -> bool:
        removed = self.offerings.remove(name)
        if removed:
            self._save_offerings()
        return removed

    def reset_offerings(self):
        self.offerings.replace_all(default_registry())
        self._save_offerings()

    # --- Proposals ---

    def generate_proposal(self, project: Project, rate: Optional[float] = None) -> Optional[Proposal]:
        """
        Drafts (or redrafts) a proposal. If another request for the same
        project was started after this one, this result is dropped and None
        is returned.
        """
        with self._lock:
            token = next(self._proposal_counter)
            self._latest_proposal[project.id] = token

        result = self._generate(
            project,
            self.offerings,
            template=self.template,
            rate=rate,
            user_name=self.user_name,
        )

        with self._lock:
            if self._latest_proposal.get(project.id) != token:
                LOGGER.info("Dropping superseded proposal for %s", project.id)
                return None
            self.proposals[project.id] = result
        self._save_proposals()
        return result

    def discard_proposal(self, project_id: str):
        if self.proposals.pop(project_id, None):
            self._save_proposals()

    def _save_proposals(self):
        self.store.save(
            persistence.PROPOSALS,
            {pid: p.to_dict() for pid, p in self.proposals.items()},
        )

    # --- Export ---

    def saved_projects(self) -> List[Project]:
        return [p for p in real_projects(self.projects) if p.id in self.saved]

    def project(self, project_id: str) -> Optional[Project]:
        return find_project(self.projects, project_id)

    def export_saved(self, sheet_url: str = config.GOOGLE_SHEET_URL) -> bool:
        if not sheet_url:
            LOGGER.warning("GOOGLE_SHEET_URL is not set, export skipped.")
            return False
        return export_projects(self.saved_projects(), sheet_url, self.notes)
