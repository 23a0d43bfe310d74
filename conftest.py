"""
Shared fixtures: an HTML-fixture page that stands in for Chrome.

SoupPage serves canned HTML per URL and answers CSS queries with
BeautifulSoup, so the collector, extractor and pipeline run against
literal markup with no browser and no real sleeping.
"""

import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest
from bs4 import BeautifulSoup

sys.path.insert(0, str(Path(__file__).parent))

from bookmark_pipeline.config import BOOKMARKS_URL, HOME_URL
from bookmark_pipeline.page import Page


class SoupPage(Page):
    """
    Page backed by static HTML.

    routes maps a URL to one HTML document, or to a list of documents for
    pages that grow while scrolling (each scroll_by shows the next one,
    the last one stays once reached).
    """

    def __init__(self, routes: Dict[str, Union[str, List[str]]]):
        self.routes = routes
        self.visited: List[str] = []
        self.scrolls = 0
        self._snapshots: List[str] = []
        self._index = 0
        self.soup: Optional[BeautifulSoup] = None

    def navigate(self, url, timeout):
        self.visited.append(url)
        html = self.routes.get(url)
        if html is None:
            self.soup = None
            return False
        self._snapshots = html if isinstance(html, list) else [html]
        self._index = 0
        self.soup = BeautifulSoup(self._snapshots[0], 'html.parser')
        return True

    def wait_for(self, selector, timeout):
        return self.soup is not None and self.soup.select_one(selector) is not None

    def query(self, selector, root=None):
        scope = root if root is not None else self.soup
        return scope.select_one(selector) if scope is not None else None

    def query_all(self, selector, root=None):
        scope = root if root is not None else self.soup
        return list(scope.select(selector)) if scope is not None else []

    def attribute(self, node, name):
        value = node.get(name)
        if isinstance(value, list):
            return ' '.join(value)
        return value

    def text(self, node):
        return node.get_text('\n', strip=True)

    def inner_html(self, node):
        return node.decode_contents()

    def parent(self, node):
        return node.parent

    def scroll_by(self, pixels):
        self.scrolls += 1
        if self._index < len(self._snapshots) - 1:
            self._index += 1
            self.soup = BeautifulSoup(self._snapshots[self._index], 'html.parser')


class RecordingPace:
    """Drop-in for random_delay that records ranges instead of sleeping"""

    def __init__(self):
        self.calls = []

    def __call__(self, min_ms, max_ms):
        self.calls.append((min_ms, max_ms))
        return min_ms


# =============================================================================
# HTML BUILDERS
# =============================================================================

def tweet_article(tweet_id: str, handle: str = "alice", name: str = "Alice",
                  text: Optional[str] = "Hello world",
                  datetime_attr: Optional[str] = "2024-03-05T10:15:00.000Z",
                  photos: List[str] = (), posters: List[str] = (),
                  quoted: Optional[str] = None, with_time: bool = True) -> str:
    time_html = ''
    if with_time:
        dt = f' datetime="{datetime_attr}"' if datetime_attr else ''
        time_html = f'<a href="/{handle}/status/{tweet_id}"><time{dt}>Mar 5</time></a>'
    text_html = f'<div data-testid="tweetText">{text}</div>' if text is not None else ''
    photos_html = ''.join(
        f'<div data-testid="tweetPhoto"><img alt="Image" src="{src}"></div>' for src in photos
    )
    videos_html = ''.join(f'<video poster="{poster}"></video>' for poster in posters)
    quoted_html = f'<div role="link"><span>{quoted}</span></div>' if quoted else ''
    return (
        '<article data-testid="tweet">'
        f'<div data-testid="User-Name"><span>{name}</span><span>@{handle}</span>{time_html}</div>'
        f'{text_html}{photos_html}{videos_html}{quoted_html}'
        '</article>'
    )


def timeline(*articles: str) -> str:
    return f"<html><body><main>{''.join(articles)}</main></body></html>"


def detail_url(tweet_id: str, handle: str = "alice") -> str:
    return f"https://x.com/{handle}/status/{tweet_id}"


def make_site(bookmark_ids: List[str], handle: str = "alice",
              logged_in: bool = True, extra_routes: Dict = None) -> Dict:
    """Routes for a logged-in site whose bookmarks list shows bookmark_ids"""
    routes = {
        HOME_URL: timeline(tweet_article("1", handle="home")) if logged_in else "<html><body></body></html>",
        BOOKMARKS_URL: timeline(*(tweet_article(i, handle=handle) for i in bookmark_ids)),
    }
    for tweet_id in bookmark_ids:
        routes[detail_url(tweet_id, handle)] = timeline(
            tweet_article(tweet_id, handle=handle, text=f"Post number {tweet_id} #python")
        )
    routes.update(extra_routes or {})
    return routes


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def pace():
    return RecordingPace()


@pytest.fixture
def ledger(tmp_path):
    from bookmark_pipeline.ledger import Ledger

    with Ledger(tmp_path / "pipeline.db") as db:
        yield db
