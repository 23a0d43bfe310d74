"""
Bookmarks Pipeline Orchestrator
===============================

STATE MACHINE:
    VERIFYING_AUTH -> COLLECTING -> EXTRACTING(i) -> PERSISTING(i) -> next | done

    Terminal states:
        DONE_SUCCESS             every reference was processed, skipped or failed
        DONE_AUTH_FAILED         home timeline did not render (run `x-bookmarks auth`)
        DONE_NO_ITEMS            collection finished with nothing to process
        DONE_COLLECTION_FAILED   the bookmarks list showed no posts at all

IDEMPOTENCY:
    A reference whose id is already in the ledger is skipped without
    touching the page. The Markdown file is written before the ledger row,
    so a crash in between leaves an orphan file that the next run simply
    rewrites.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from .collector import BookmarkCollector
from .config import (
    AUTH_MARKER_TIMEOUT,
    AUTH_NAVIGATION_TIMEOUT,
    BETWEEN_ITEMS_DELAY_MS,
    BOOKMARKS_URL,
    HOME_URL,
    LIST_WAIT_TIMEOUT,
    TWEET_SELECTOR,
)
from .errors import CollectionError, LedgerError
from .extractor import ContentExtractor
from .formatter import save_bookmark
from .ledger import Ledger
from .logger import Logger
from .models import ExtractedRecord, LedgerEntry, RunReport
from .pacing import random_delay
from .page import Page


class PipelineState(str, Enum):
    VERIFYING_AUTH = "verifying_auth"
    COLLECTING = "collecting"
    EXTRACTING = "extracting"
    PERSISTING = "persisting"
    DONE_SUCCESS = "done_success"
    DONE_AUTH_FAILED = "done_auth_failed"
    DONE_NO_ITEMS = "done_no_items"
    DONE_COLLECTION_FAILED = "done_collection_failed"


class BookmarkPipeline:
    """Runs one collect-extract-persist pass over the bookmarks list"""

    def __init__(self, page: Page, ledger: Ledger, output_dir: Path, *,
                 collector: Optional[BookmarkCollector] = None,
                 extractor: Optional[ContentExtractor] = None,
                 writer: Optional[Callable[[ExtractedRecord], Path]] = None,
                 pace: Callable[[int, int], Any] = random_delay):
        self.page = page
        self.ledger = ledger
        self.output_dir = Path(output_dir)
        self.pace = pace
        self.collector = collector or BookmarkCollector(page, pace=pace)
        self.extractor = extractor or ContentExtractor(page, pace=pace)
        self.writer = writer or (lambda record: save_bookmark(record, self.output_dir))
        self.state = PipelineState.VERIFYING_AUTH

    def _enter(self, state: PipelineState):
        Logger.debug(f"Pipeline state: {self.state.value} -> {state.value}")
        self.state = state

    def verify_authentication(self) -> bool:
        """Home timeline renders posts only for a logged-in session"""
        if not self.page.navigate(HOME_URL, AUTH_NAVIGATION_TIMEOUT):
            return False
        return self.page.wait_for(TWEET_SELECTOR, AUTH_MARKER_TIMEOUT)

    def _persist(self, record: ExtractedRecord, report: RunReport) -> bool:
        """Write the note, then mark it done; a failure counts the post as failed"""
        try:
            saved_path = self.writer(record)
        except OSError as e:
            report.failed += 1
            Logger.error(f"Could not write note for {record.id}: {e}")
            return False
        try:
            self.ledger.record(LedgerEntry.from_record(record, saved_path))
        except LedgerError as e:
            # The note stays on disk and is rewritten by the next run
            report.failed += 1
            Logger.error(f"Saved {saved_path} but could not record it: {e}")
            return False
        report.saved += 1
        report.saved_paths.append(str(saved_path))
        return True

    def run(self, max_items: int) -> RunReport:
        self._enter(PipelineState.VERIFYING_AUTH)
        Logger.info("Verifying authentication...")
        if not self.verify_authentication():
            self._enter(PipelineState.DONE_AUTH_FAILED)
            Logger.error('Authentication failed. Please run "x-bookmarks auth" first.')
            return RunReport(state=self.state.value)
        Logger.success("Authentication verified")

        report = RunReport(state=self.state.value)
        report.ledger_total_before = self.ledger.count()
        report.ledger_total = report.ledger_total_before
        Logger.info(f"Database: {report.ledger_total_before} posts already scraped")

        self._enter(PipelineState.COLLECTING)
        self.page.navigate(BOOKMARKS_URL, LIST_WAIT_TIMEOUT)
        try:
            references = self.collector.collect(max_items)
        except CollectionError as e:
            self._enter(PipelineState.DONE_COLLECTION_FAILED)
            Logger.error(f"Collection failed: {e}")
            report.state = self.state.value
            return report

        report.collected = len(references)
        if not references:
            self._enter(PipelineState.DONE_NO_ITEMS)
            Logger.info("No posts found to process.")
            report.state = self.state.value
            return report

        Logger.info("Phase 2: Extracting full post content...")
        total = len(references)
        for i, ref in enumerate(references):
            self._enter(PipelineState.EXTRACTING)

            if self.ledger.exists(ref.id):
                print(f"\n[{i + 1}/{total}] Skipping (already scraped): {ref.id}")
                report.skipped += 1
                continue

            print(f"\n[{i + 1}/{total}] Processing: {ref.url}")
            record = self.extractor.extract(ref.url, ref.id)

            if record is not None:
                self._enter(PipelineState.PERSISTING)
                if self._persist(record, report):
                    Logger.success("Saved & recorded in ledger")
            else:
                report.failed += 1
                Logger.warning("Skipped due to extraction error")

            if i < total - 1:
                delay_ms = self.pace(*BETWEEN_ITEMS_DELAY_MS)
                Logger.debug(f"Waited {delay_ms}ms before next post")

        self._enter(PipelineState.DONE_SUCCESS)
        report.state = self.state.value
        report.ledger_total = self.ledger.count()
        Logger.success(f"Done! Successfully scraped {report.saved} new posts "
                       f"({report.skipped} already existed, {report.failed} failed).")
        Logger.info(f"Total in database: {report.ledger_total} posts")
        return report
