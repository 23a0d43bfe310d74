"""
Bookmark Data Model
===================

LIFECYCLE:
    1. ItemReference is produced by the collector while scrolling the
       bookmarks list (one per distinct status id, ephemeral)
    2. ExtractedRecord is produced by the extractor from the detail view
       (immutable, id always equals the reference id)
    3. LedgerEntry is written once the Markdown file is on disk
       (durable, at most one per id)
"""

import re
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple


HASHTAG_PATTERN = re.compile(r'#(\w+)')


@dataclass(frozen=True)
class ItemReference:
    id: str
    url: str


@dataclass(frozen=True)
class ExtractedRecord:
    """Structured content of a single bookmarked post"""
    id: str
    url: str
    text: str
    author_name: str
    author_handle: str
    published_date: Optional[date] = None
    media_urls: Tuple[str, ...] = ()

    @property
    def has_media(self) -> bool:
        return len(self.media_urls) > 0

    @property
    def media_count(self) -> int:
        return len(self.media_urls)

    @property
    def hashtags(self) -> List[str]:
        return HASHTAG_PATTERN.findall(self.text)


@dataclass
class LedgerEntry:
    """One row of the processed-items ledger"""
    id: str
    url: str
    author_handle: str
    author_name: str
    file_path: str
    has_media: bool = False
    media_count: int = 0
    scraped_at: Optional[str] = None  # filled by the database default

    @classmethod
    def from_record(cls, record: ExtractedRecord, file_path) -> "LedgerEntry":
        return cls(
            id=record.id,
            url=record.url,
            author_handle=record.author_handle,
            author_name=record.author_name,
            file_path=str(file_path),
            has_media=record.has_media,
            media_count=record.media_count,
        )


@dataclass
class RunReport:
    """Outcome of one pipeline run"""
    state: str
    collected: int = 0
    saved: int = 0
    skipped: int = 0
    failed: int = 0
    ledger_total_before: int = 0
    ledger_total: int = 0
    saved_paths: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state in ("done_success", "done_no_items")

    def summary(self) -> str:
        return f"{self.saved} new, {self.skipped} skipped"
