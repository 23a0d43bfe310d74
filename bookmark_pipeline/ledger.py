"""
Processed-Items Ledger
======================

SQLite record of every bookmark that was extracted and written to disk.
Presence of a row is the only thing that decides whether a later run
re-extracts a post.

SCHEMA (versioned with PRAGMA user_version):
    scraped_tweets(id PK, url, author_handle, author_name, scraped_at,
                   file_path, has_media, media_count)
    idx_scraped_at (scraped_at DESC), idx_author (author_handle)

HOW TO ADD A NEW MIGRATION
--------------------------
Never edit an existing version. Bump LEDGER_DB_VERSION and add the new
statements under that version in LEDGER_MIGRATIONS.

USAGE:
    with Ledger(db_path) as ledger:
        if not ledger.exists(tweet_id):
            ledger.record(LedgerEntry(...))
        print(ledger.count())
"""

import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import LedgerError
from .logger import Logger
from .models import LedgerEntry


LEDGER_DB_VERSION = 1

LEDGER_MIGRATIONS: Dict[int, List[str]] = {
    # Version 1: Initial schema
    1: [
        """
        CREATE TABLE IF NOT EXISTS scraped_tweets (
            id TEXT PRIMARY KEY,
            url TEXT NOT NULL,
            author_handle TEXT,
            author_name TEXT,
            scraped_at DATETIME DEFAULT CURRENT_TIMESTAMP,
            file_path TEXT,
            has_media INTEGER DEFAULT 0,
            media_count INTEGER DEFAULT 0
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_scraped_at ON scraped_tweets(scraped_at DESC)",
        "CREATE INDEX IF NOT EXISTS idx_author ON scraped_tweets(author_handle)",
    ],
}


def get_db_version(conn: sqlite3.Connection) -> int:
    """Get current schema version from database"""
    return conn.execute("PRAGMA user_version").fetchone()[0]


def migrate_ledger_db(conn: sqlite3.Connection) -> int:
    """
    Bring the ledger schema up to LEDGER_DB_VERSION.

    Returns:
        Number of migrations applied
    """
    current_version = get_db_version(conn)
    applied = 0

    for version in range(current_version + 1, LEDGER_DB_VERSION + 1):
        try:
            for sql in LEDGER_MIGRATIONS[version]:
                conn.execute(sql)
        except sqlite3.OperationalError as e:
            raise LedgerError(f"Ledger migration v{version} failed: {e}") from e
        conn.execute(f"PRAGMA user_version = {version}")
        conn.commit()
        applied += 1
        Logger.debug(f"Ledger schema migrated to v{version}")

    return applied


class Ledger:
    """Durable insert-if-absent store keyed by post id"""

    def __init__(self, db_path):
        self.db_path = Path(db_path)
        self.conn = None

    def open(self) -> "Ledger":
        if self.conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            try:
                self.conn = sqlite3.connect(str(self.db_path))
                self.conn.row_factory = sqlite3.Row
                migrate_ledger_db(self.conn)
            except sqlite3.Error as e:
                self.close()
                raise LedgerError(f"Could not open ledger {self.db_path}: {e}") from e
        return self

    def close(self):
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self) -> "Ledger":
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _cursor(self) -> sqlite3.Cursor:
        if self.conn is None:
            raise LedgerError(f"Ledger {self.db_path} is not open")
        return self.conn.cursor()

    # -------------------------------------------------------------------------
    # Idempotency gate
    # -------------------------------------------------------------------------

    def exists(self, item_id: str) -> bool:
        """Check if a post has already been scraped"""
        cursor = self._cursor()
        cursor.execute("SELECT 1 FROM scraped_tweets WHERE id = ?", (item_id,))
        return cursor.fetchone() is not None

    def record(self, entry: LedgerEntry) -> bool:
        """
        Insert entry unless its id is already present.

        Returns:
            True if a new row was written, False if the id already existed
        """
        cursor = self._cursor()
        try:
            cursor.execute('''
                INSERT OR IGNORE INTO scraped_tweets
                (id, url, author_handle, author_name, file_path, has_media, media_count)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            ''', (
                entry.id,
                entry.url,
                entry.author_handle,
                entry.author_name,
                entry.file_path,
                1 if entry.has_media else 0,
                entry.media_count,
            ))
            self.conn.commit()
        except sqlite3.Error as e:
            raise LedgerError(f"Could not record {entry.id}: {e}") from e
        return cursor.rowcount > 0

    def count(self) -> int:
        cursor = self._cursor()
        cursor.execute("SELECT COUNT(*) FROM scraped_tweets")
        return cursor.fetchone()[0]

    # -------------------------------------------------------------------------
    # Reporting queries
    # -------------------------------------------------------------------------

    def get(self, item_id: str) -> Optional[LedgerEntry]:
        cursor = self._cursor()
        cursor.execute("SELECT * FROM scraped_tweets WHERE id = ?", (item_id,))
        row = cursor.fetchone()
        return self._to_entry(row) if row else None

    def recent(self, limit: int = 10) -> List[LedgerEntry]:
        """Most recently scraped entries first"""
        cursor = self._cursor()
        cursor.execute(
            "SELECT * FROM scraped_tweets ORDER BY scraped_at DESC, rowid DESC LIMIT ?",
            (limit,)
        )
        return [self._to_entry(row) for row in cursor.fetchall()]

    def by_author(self, author_handle: str) -> List[LedgerEntry]:
        cursor = self._cursor()
        cursor.execute(
            "SELECT * FROM scraped_tweets WHERE author_handle = ? ORDER BY scraped_at DESC",
            (author_handle,)
        )
        return [self._to_entry(row) for row in cursor.fetchall()]

    def stats(self) -> Dict[str, Any]:
        cursor = self._cursor()
        cursor.execute("SELECT COUNT(*) FROM scraped_tweets WHERE has_media = 1")
        with_media = cursor.fetchone()[0]
        cursor.execute('''
            SELECT author_handle, author_name, COUNT(*) as count
            FROM scraped_tweets
            GROUP BY author_handle
            ORDER BY count DESC, author_handle ASC
            LIMIT 10
        ''')
        top_authors = [dict(row) for row in cursor.fetchall()]
        return {
            'total': self.count(),
            'with_media': with_media,
            'top_authors': top_authors,
        }

    @staticmethod
    def _to_entry(row: sqlite3.Row) -> LedgerEntry:
        return LedgerEntry(
            id=row['id'],
            url=row['url'],
            author_handle=row['author_handle'],
            author_name=row['author_name'],
            file_path=row['file_path'],
            has_media=bool(row['has_media']),
            media_count=row['media_count'],
            scraped_at=row['scraped_at'],
        )
