"""
Phase 2: extract full post content from the detail view.

A failed extraction is returned as None and never raised, so one broken
post cannot end the run.
"""

from typing import Any, Callable, List, Optional

from .config import (
    DETAIL_NAVIGATION_TIMEOUT,
    DETAIL_SETTLE_DELAY_MS,
    DETAIL_WAIT_TIMEOUT,
    PHOTO_SELECTOR,
    QUOTED_SELECTOR,
    TIME_SELECTOR,
    TWEET_SELECTOR,
    TWEET_TEXT_SELECTOR,
    USER_NAME_SELECTOR,
    VIDEO_SELECTOR,
)
from .logger import Logger
from .models import ExtractedRecord
from .pacing import random_delay
from .page import Page
from .parsing import (
    append_quoted,
    normalize_publish_date,
    render_text,
    split_author_block,
    strip_author_text,
)


class ContentExtractor:
    """Turns a post's detail page into an ExtractedRecord"""

    def __init__(self, page: Page, *,
                 navigation_timeout: float = DETAIL_NAVIGATION_TIMEOUT,
                 wait_timeout: float = DETAIL_WAIT_TIMEOUT,
                 pace: Callable[[int, int], Any] = random_delay):
        self.page = page
        self.navigation_timeout = navigation_timeout
        self.wait_timeout = wait_timeout
        self.pace = pace

    def extract(self, url: str, item_id: str) -> Optional[ExtractedRecord]:
        try:
            return self._extract(url, item_id)
        except Exception as e:
            Logger.error(f"Error extracting content from {url}: {e}")
            return None

    def _extract(self, url: str, item_id: str) -> Optional[ExtractedRecord]:
        if not self.page.navigate(url, self.navigation_timeout):
            Logger.warning(f"Could not load detail page: {url}")
            return None
        self.pace(*DETAIL_SETTLE_DELAY_MS)

        if not self.page.wait_for(TWEET_SELECTOR, self.wait_timeout):
            Logger.warning(f"Post did not render on detail page: {url}")
            return None

        # The first article is the bookmarked post; replies below share the markup
        main_post = self.page.query(TWEET_SELECTOR)
        if main_post is None:
            Logger.warning("Could not find main post on detail page")
            return None

        author_text = self._author_text(main_post)
        author_name, author_handle = split_author_block(author_text)

        time_el = self.page.query(TIME_SELECTOR, root=main_post)
        published = self.page.attribute(time_el, 'datetime') if time_el is not None else None

        text = self._body_text(main_post, author_text)
        quoted = self.page.query(QUOTED_SELECTOR, root=main_post)
        if quoted is not None:
            text = append_quoted(text, self.page.text(quoted))

        return ExtractedRecord(
            id=item_id,
            url=url,
            text=text,
            author_name=author_name,
            author_handle=author_handle,
            published_date=normalize_publish_date(published),
            media_urls=tuple(self._media_urls(main_post)),
        )

    def _author_text(self, main_post: Any) -> str:
        user_el = self.page.query(USER_NAME_SELECTOR, root=main_post)
        return self.page.text(user_el) if user_el is not None else ''

    def _body_text(self, main_post: Any, author_text: str) -> str:
        text_el = self.page.query(TWEET_TEXT_SELECTOR, root=main_post)
        text = render_text(self.page.inner_html(text_el)) if text_el is not None else ''
        if not text:
            text = strip_author_text(self.page.text(main_post), author_text)
        return text

    def _media_urls(self, main_post: Any) -> List[str]:
        """Photo sources, then video posters (the poster stands in for the video)"""
        urls = []
        for img in self.page.query_all(PHOTO_SELECTOR, root=main_post):
            src = self.page.attribute(img, 'src')
            if src:
                urls.append(src)
        for video in self.page.query_all(VIDEO_SELECTOR, root=main_post):
            poster = self.page.attribute(video, 'poster')
            if poster:
                urls.append(poster)
        return urls
