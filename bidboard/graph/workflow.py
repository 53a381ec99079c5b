import logging
from typing import List, Optional

from langgraph.graph import StateGraph, END

from .state import FetchState
from ..models.offering import OfferingRegistry
from ..models.project import ListingItem, Placeholder
from ..platforms.job_source import JobSourceClient, JobSourceError
from ..platforms.normalizer import normalize_batch
from ..platforms.rss import fetch_rss_feeds
from ..utils.filtering import search_keywords

LOGGER = logging.getLogger(__name__)


# --- Placeholder records ---

def offline_placeholder(base_url: str) -> Placeholder:
    return Placeholder(
        id="proxy-offline",
        kind="offline",
        title="🔌 Job Source Offline",
        description=(
            "The job source is not responding.\n\n"
            "If you're the admin:\n"
            "1. Make sure the proxy backend is running\n"
            "2. Check that JOB_SOURCE_URL points at it\n\n"
            f"Current API URL: {base_url}\n\n"
            "The dashboard retries automatically on the next refresh."
        ),
    )


def no_results_placeholder(keywords: List[str]) -> Placeholder:
    return Placeholder(
        id="no-results",
        kind="no_results",
        title="📭 No Projects Found",
        description=(
            "No projects matched your keywords. Try:\n\n"
            "• Using broader search terms\n"
            "• Adding more common keywords\n"
            "• Waiting a few minutes and refreshing\n\n"
            f"Current keywords: {', '.join(keywords)}"
        ),
    )


def error_placeholder(message: str) -> Placeholder:
    return Placeholder(
        id="fetch-error",
        kind="error",
        title="❌ Error Fetching Projects",
        description=f"Error: {message}\n\nPlease try refreshing again.",
    )


# --- Graph ---

def create_graph(
    client: JobSourceClient,
    offerings: OfferingRegistry,
    rss_urls: Optional[List[str]] = None,
    limit: Optional[int] = None,
):
    def check_status(state: FetchState):
        online = client.check_status()
        LOGGER.info("Job source is %s.", "online" if online else "offline")
        return {"online": online}

    def route_after_status(state: FetchState) -> str:
        return "fetcher" if state.get("online") else "offline"

    def mark_offline(state: FetchState):
        return {"projects": [offline_placeholder(client.base_url)]}

    def fetch_jobs(state: FetchState):
        keywords = state.get("keywords", [])
        LOGGER.info("🌍 Fetching jobs for %s", keywords)
        update = {"raw_results": []}
        try:
            update["raw_results"] = client.fetch_jobs(keywords, limit)
        except JobSourceError as e:
            LOGGER.error("❌ Job fetch failed: %s", e)
            update["error"] = str(e)

        if rss_urls:
            update["raw_results"] = update["raw_results"] + fetch_rss_feeds(rss_urls)
        return update

    def normalize(state: FetchState):
        return {"projects": normalize_batch(state.get("raw_results", []), offerings)}

    def finalize(state: FetchState):
        if state.get("projects"):
            return {}
        if state.get("error"):
            return {"projects": [error_placeholder(state["error"])]}
        return {"projects": [no_results_placeholder(state.get("keywords", []))]}

    workflow = StateGraph(FetchState)

    workflow.add_node("status", check_status)
    workflow.add_node("offline", mark_offline)
    workflow.add_node("fetcher", fetch_jobs)
    workflow.add_node("normalizer", normalize)
    workflow.add_node("finalizer", finalize)

    workflow.set_entry_point("status")
    workflow.add_conditional_edges(
        "status", route_after_status, {"fetcher": "fetcher", "offline": "offline"}
    )
    workflow.add_edge("offline", END)
    workflow.add_edge("fetcher", "normalizer")
    workflow.add_edge("normalizer", "finalizer")
    workflow.add_edge("finalizer", END)

    return workflow.compile()


def run_fetch_cycle(
    client: JobSourceClient,
    offerings: OfferingRegistry,
    max_keywords: int = 10,
    rss_urls: Optional[List[str]] = None,
    limit: Optional[int] = None,
) -> List[ListingItem]:
    """One full cycle: liveness, fetch, normalize. Always returns at least one item."""
    app = create_graph(client, offerings, rss_urls, limit)
    initial_state = {
        "keywords": search_keywords(offerings, limit=max_keywords),
        "raw_results": [],
        "projects": [],
    }
    result = app.invoke(initial_state)
    return list(result.get("projects") or [])
