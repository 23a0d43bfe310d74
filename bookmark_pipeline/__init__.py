"""
X Bookmarks Pipeline
====================

Saves bookmarked X (Twitter) posts as Markdown notes, once each.

ARCHITECTURE:
    1. SESSION
       - BrowserSession starts undetected Chrome and restores saved cookies
       - BookmarkPipeline checks the home timeline renders before doing anything

    2. COLLECTION PHASE
       - BookmarkCollector scrolls the bookmarks list and reads each post's
         timestamp link to get a stable status id
       - Stops on quota, scroll budget, or when the list stops growing

    3. EXTRACTION PHASE
       - Ledger.exists() skips posts saved by an earlier run
       - ContentExtractor opens each detail page and builds an ExtractedRecord
         (author, date, text, media, quoted post)

    4. PERSISTENCE
       - save_bookmark() writes a Markdown note with YAML front matter
       - Ledger.record() marks the post as done

PACING:
    Every navigation is followed by a random_delay() so traffic does not
    follow a fixed cadence: 1.5-2.5s per scroll, 2-4s per detail page,
    3-5s between posts.
"""

from .collector import BookmarkCollector
from .config import PipelineConfig
from .errors import CollectionError, LedgerError, PipelineError, SessionError
from .extractor import ContentExtractor
from .formatter import format_markdown, save_bookmark
from .ledger import Ledger
from .models import ExtractedRecord, ItemReference, LedgerEntry, RunReport
from .pacing import random_delay
from .page import Page, SeleniumPage
from .pipeline import BookmarkPipeline, PipelineState

__all__ = [
    'BookmarkCollector',
    'BookmarkPipeline',
    'CollectionError',
    'ContentExtractor',
    'ExtractedRecord',
    'ItemReference',
    'Ledger',
    'LedgerEntry',
    'LedgerError',
    'Page',
    'PipelineConfig',
    'PipelineError',
    'PipelineState',
    'RunReport',
    'SeleniumPage',
    'SessionError',
    'format_markdown',
    'random_delay',
    'save_bookmark',
]
