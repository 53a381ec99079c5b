import logging
from typing import List, Dict, Any

import feedparser

LOGGER = logging.getLogger(__name__)


def entry_to_record(entry) -> Dict[str, Any]:
    """Maps a feedparser entry onto the raw RSS record shape the normalizer reads."""
    return {
        "guid": entry.get("id", ""),
        "title": entry.get("title", ""),
        "link": entry.get("link", ""),
        "description": entry.get("summary", entry.get("description", "")),
        "pubDate": entry.get("published", entry.get("updated", "")),
    }


def parse_feed(source: str, keyword: str = "") -> List[Dict[str, Any]]:
    """``source`` is a feed URL or the feed document itself."""
    feed = feedparser.parse(source)

    if feed.get("bozo") and not feed.entries:
        LOGGER.warning("RSS feed could not be parsed: %s", feed.get("bozo_exception"))
        return []

    return [
        {"source": "rss", "keyword": keyword, "payload": entry_to_record(entry)}
        for entry in feed.entries
    ]


def fetch_rss_feeds(urls: List[str]) -> List[Dict[str, Any]]:
    raw: List[Dict[str, Any]] = []
    for url in urls:
        LOGGER.info("📡 Reading RSS feed %s", url)
        records = parse_feed(url)
        LOGGER.info("✅ Retrieved %d raw jobs from %s.", len(records), url)
        raw.extend(records)
    return raw
