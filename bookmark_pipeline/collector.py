"""
Phase 1: collect post URLs from the bookmarks list.

Scrolls the bookmarks timeline, reading each rendered article's timestamp
link to get a stable status id, until the quota is met, the scroll budget
runs out, or the list stops producing new ids.
"""

from collections import OrderedDict
from typing import Any, Callable, List, Optional

from .config import (
    DEFAULT_MAX_SCROLLS,
    DEFAULT_SCROLL_INCREMENT,
    DEFAULT_STAGNATION_LIMIT,
    LIST_WAIT_TIMEOUT,
    SCROLL_DELAY_MS,
    TIME_SELECTOR,
    TWEET_SELECTOR,
)
from .errors import CollectionError
from .logger import Logger
from .models import ItemReference
from .pacing import random_delay
from .page import Page
from .parsing import canonical_status_url, extract_status_id


class BookmarkCollector:
    """Collects up to max_items distinct ItemReferences in discovery order"""

    def __init__(self, page: Page, *, max_scrolls: int = DEFAULT_MAX_SCROLLS,
                 stagnation_limit: int = DEFAULT_STAGNATION_LIMIT,
                 scroll_increment: int = DEFAULT_SCROLL_INCREMENT,
                 list_timeout: float = LIST_WAIT_TIMEOUT,
                 pace: Callable[[int, int], Any] = random_delay):
        self.page = page
        self.max_scrolls = max_scrolls
        self.stagnation_limit = stagnation_limit
        self.scroll_increment = scroll_increment
        self.list_timeout = list_timeout
        self.pace = pace

    def reference_for(self, article: Any) -> Optional[ItemReference]:
        """Derive id and URL from an article's <time> parent link"""
        time_el = self.page.query(TIME_SELECTOR, root=article)
        if time_el is None:
            return None
        anchor = self.page.parent(time_el)
        if anchor is None:
            return None
        href = self.page.attribute(anchor, 'href')
        item_id = extract_status_id(href)
        if not item_id:
            return None
        return ItemReference(id=item_id, url=canonical_status_url(href))

    def collect(self, max_items: int) -> List[ItemReference]:
        if max_items <= 0:
            raise ValueError(f"max_items must be positive, got {max_items}")

        Logger.info("Phase 1: Collecting post URLs from bookmarks...")

        if not self.page.wait_for(TWEET_SELECTOR, self.list_timeout):
            raise CollectionError("no items visible: likely unauthenticated or empty list")

        collected: "OrderedDict[str, ItemReference]" = OrderedDict()
        iterations_without_new = 0

        for scroll_attempt in range(1, self.max_scrolls + 1):
            new_this_pass = 0

            for article in self.page.query_all(TWEET_SELECTOR):
                if len(collected) >= max_items:
                    break
                ref = self.reference_for(article)
                if ref is None or ref.id in collected:
                    continue
                collected[ref.id] = ref
                new_this_pass += 1
                print(f"   ✓ Collected: {ref.url}")

            if len(collected) >= max_items:
                break

            if new_this_pass == 0:
                iterations_without_new += 1
                if iterations_without_new > self.stagnation_limit:
                    Logger.info("No new posts found, stopping collection")
                    break
            else:
                iterations_without_new = 0

            if scroll_attempt == self.max_scrolls:
                Logger.info(f"Scroll limit reached ({self.max_scrolls}), stopping collection")
                break

            Logger.debug(f"Scroll {scroll_attempt}/{self.max_scrolls}: {len(collected)} collected")
            self.page.scroll_by(self.scroll_increment)
            self.pace(*SCROLL_DELAY_MS)

        Logger.success(f"Phase 1 complete: Collected {len(collected)} post URLs")
        return list(collected.values())
