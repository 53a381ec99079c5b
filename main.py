import logging
import os

from bidboard import config
from bidboard.board import BidBoard
from bidboard.utils.persistence import JsonStore

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
LOGGER = logging.getLogger("bidboard")


# --- 1. Check Configuration ---
def check_config():
    LOGGER.info("⚙️ Job source: %s", config.JOB_SOURCE_URL)
    if not os.getenv(config.GOOGLE_API_KEY_ENV):
        LOGGER.warning("⚠️ %s not set. Proposal drafts will come back as errors.", config.GOOGLE_API_KEY_ENV)
    if not config.GOOGLE_SHEET_URL:
        LOGGER.warning("⚠️ GOOGLE_SHEET_URL not set. Shortlist export is disabled.")


# --- 2. Single fetch cycle + summary ---
def main():
    check_config()
    board = BidBoard(JsonStore(config.SETTINGS_FILE))

    LOGGER.info("🚀 Fetching projects...")
    board.refresh()

    for item in board.projects:
        if item.is_instruction:
            print(f"\n{item.title}\n{item.description}")

    stats = board.stats()
    print(f"\nProjects: {stats.total} | Avg match: {stats.avg_match}% | Potential: ${stats.potential:,.0f}")

    insights = board.insights()
    print("Recommendations:", ", ".join(f"{k}: {v}" for k, v in insights.recommendation_counts.items()))
    for scored in insights.top_recommended[:5]:
        fit = scored.fit
        print(f"  [{fit.recommendation_score:>3}] {fit.recommendation:<10} {scored.project.title} ({scored.project.budget})")

    gap = insights.skills_gap
    if gap.total_demand:
        missing = ", ".join(s.name for s in gap.missing[:5]) or "none"
        print(f"Skill coverage: {gap.coverage}% | Missing: {missing} | Est. missed revenue: ${gap.missed_revenue:,.0f}")


if __name__ == "__main__":
    main()
