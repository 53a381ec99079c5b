# bidboard/graph/state.py
from typing import List, Dict, Any, TypedDict, Annotated
import operator
from ..models.project import ListingItem


class FetchState(TypedDict, total=False):
    # INPUT: keywords drawn from the offerings
    keywords: List[str]

    # STEP 1: Liveness of the job source
    online: bool

    # STEP 2: Raw data collection (append-only so several fetchers can write)
    # Each fetcher adds {"source": "api" | "rss", "keyword": ..., "payload": {...}}
    raw_results: Annotated[List[Dict[str, Any]], operator.add]
    error: str

    # STEP 3: Normalized output, or a single placeholder record
    projects: List[ListingItem]
