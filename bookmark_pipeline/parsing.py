"""
Pure parsing helpers for bookmark pages.

Every function here works on plain strings (hrefs, rendered text, HTML
fragments) so it can be tested against literal fixtures without a browser.
"""

import re
from datetime import date, datetime
from typing import Optional, Tuple
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from .config import BASE_URL


STATUS_ID_PATTERN = re.compile(r'/status/(\d+)')
DATE_PREFIX_PATTERN = re.compile(r'^(\d{4}-\d{2}-\d{2})')

UNKNOWN_AUTHOR = "Unknown"
UNKNOWN_HANDLE = "@unknown"
QUOTED_HEADER = "> Quoted Tweet:"


def extract_status_id(href: Optional[str]) -> Optional[str]:
    """Return the numeric status id from a post link, or None"""
    if not href:
        return None
    match = STATUS_ID_PATTERN.search(href)
    return match.group(1) if match else None


def canonical_status_url(href: str) -> str:
    """Turn a relative or absolute post link into a https://x.com URL"""
    path = urlparse(href).path if href.startswith("http") else href.split('?')[0]
    if not path.startswith("/"):
        path = "/" + path
    return f"{BASE_URL}{path}"


def split_author_block(raw_text: str) -> Tuple[str, str]:
    """
    Split the rendered User-Name block into (display name, handle).

    The display name is the first line; the handle is the first later line
    that starts with '@'. Display names may themselves contain '@word', so
    the first line is never searched for the handle.
    """
    lines = [line.strip() for line in (raw_text or '').split('\n')]
    author_name = lines[0] if lines and lines[0] else UNKNOWN_AUTHOR
    rest = lines[1:]

    author_handle = next((line for line in rest if _is_handle(line)), None)
    if author_handle is None:
        # Handle rendered inline with other text, e.g. "@alice · 2h"
        tokens = [token for line in rest for token in line.split()]
        author_handle = next((token for token in tokens if _is_handle(token)), UNKNOWN_HANDLE)
    return author_name, author_handle


def _is_handle(value: str) -> bool:
    return value.startswith('@') and len(value) > 1 and ' ' not in value


def normalize_publish_date(value: Optional[str]) -> Optional[date]:
    """Truncate a <time datetime="..."> value to a calendar date"""
    if not value:
        return None
    value = value.strip()
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00')).date()
    except ValueError:
        pass
    match = DATE_PREFIX_PATTERN.match(value)
    if match:
        try:
            return date.fromisoformat(match.group(1))
        except ValueError:
            return None
    return None


def render_text(html: Optional[str]) -> str:
    """
    Flatten a post text block into plain text.

    Text nodes are concatenated in document order and <br> becomes a
    newline. Emoji images and other non-text elements are dropped.
    """
    if not html:
        return ''
    soup = BeautifulSoup(html, 'html.parser')
    parts = []
    for node in soup.descendants:
        if isinstance(node, Comment):
            continue
        if isinstance(node, NavigableString):
            parts.append(str(node))
        elif isinstance(node, Tag) and node.name == 'br':
            parts.append('\n')
    return ''.join(parts).strip()


def strip_author_text(full_text: str, author_text: str) -> str:
    """Remove the author block text from the article's rendered text"""
    full_text = full_text or ''
    if author_text:
        if full_text.startswith(author_text):
            full_text = full_text[len(author_text):]
        else:
            full_text = full_text.replace(author_text, '', 1)
    return full_text.strip()


def append_quoted(body: str, quoted_text: Optional[str]) -> str:
    """Append a quoted post as a blockquote unless the body already contains it"""
    quoted_text = (quoted_text or '').strip()
    if not quoted_text or quoted_text in body:
        return body
    quoted_lines = '\n> '.join(quoted_text.split('\n'))
    return f"{body}\n\n{QUOTED_HEADER}\n> {quoted_lines}"
