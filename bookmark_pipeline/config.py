"""
Pipeline Configuration
======================

Site constants and tunables for the bookmarks pipeline.

ENVIRONMENT VARIABLES (read from .env via python-dotenv):
    X_BOOKMARKS_OUTPUT_DIR:        Markdown output directory (default: output)
    X_BOOKMARKS_DATA_DIR:          Ledger DB, cookies and Chrome profile (default: output_data)
    X_BOOKMARKS_HEADLESS:          "1"/"true" to run Chrome headless (default: off)
    X_BOOKMARKS_CHROME_VERSION:    Pin the Chrome major version for undetected-chromedriver
    X_BOOKMARKS_MAX_SCROLLS:       Collector scroll iterations (default: 30)
    X_BOOKMARKS_STAGNATION_LIMIT:  Empty iterations tolerated before stopping (default: 5)
    X_BOOKMARKS_SCROLL_INCREMENT:  Pixels scrolled per iteration (default: 1000)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# =============================================================================
# SITE LAYOUT
# =============================================================================

BASE_URL = "https://x.com"
HOME_URL = f"{BASE_URL}/home"
BOOKMARKS_URL = f"{BASE_URL}/i/bookmarks"
LOGIN_URL = f"{BASE_URL}/i/flow/login"

TWEET_SELECTOR = 'article[data-testid="tweet"]'
USER_NAME_SELECTOR = 'div[data-testid="User-Name"]'
TWEET_TEXT_SELECTOR = 'div[data-testid="tweetText"]'
PHOTO_SELECTOR = 'div[data-testid="tweetPhoto"] img'
VIDEO_SELECTOR = 'video'
QUOTED_SELECTOR = 'div[role="link"]'
TIME_SELECTOR = 'time'

# =============================================================================
# TIMEOUTS (seconds)
# =============================================================================

AUTH_NAVIGATION_TIMEOUT = 10
AUTH_MARKER_TIMEOUT = 5
LIST_WAIT_TIMEOUT = 15
DETAIL_NAVIGATION_TIMEOUT = 30
DETAIL_WAIT_TIMEOUT = 10

# =============================================================================
# PACING (milliseconds)
# =============================================================================

SCROLL_DELAY_MS = (1500, 2500)
DETAIL_SETTLE_DELAY_MS = (2000, 4000)
BETWEEN_ITEMS_DELAY_MS = (3000, 5000)

DEFAULT_MAX_ITEMS = 10
DEFAULT_MAX_SCROLLS = 30
DEFAULT_STAGNATION_LIMIT = 5
DEFAULT_SCROLL_INCREMENT = 1000


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    if not value:
        return default
    return int(value)


@dataclass
class PipelineConfig:
    """Paths and tunables for one pipeline run"""
    output_dir: Path = Path("output")
    data_dir: Path = Path("output_data")
    headless: bool = False
    chrome_version: Optional[int] = None

    # Collector
    max_scrolls: int = DEFAULT_MAX_SCROLLS
    stagnation_limit: int = DEFAULT_STAGNATION_LIMIT
    scroll_increment: int = DEFAULT_SCROLL_INCREMENT

    @property
    def db_path(self) -> Path:
        return self.data_dir / "pipeline.db"

    @property
    def cookies_path(self) -> Path:
        return self.data_dir / "x_cookies.json"

    @property
    def profile_dir(self) -> Path:
        return self.data_dir / "chrome_profile"

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "PipelineConfig":
        """Build a config from the environment, loading .env first"""
        load_dotenv(env_file)
        return cls(
            output_dir=Path(os.getenv("X_BOOKMARKS_OUTPUT_DIR", "output")),
            data_dir=Path(os.getenv("X_BOOKMARKS_DATA_DIR", "output_data")),
            headless=_env_flag("X_BOOKMARKS_HEADLESS"),
            chrome_version=_env_int("X_BOOKMARKS_CHROME_VERSION", None),
            max_scrolls=_env_int("X_BOOKMARKS_MAX_SCROLLS", DEFAULT_MAX_SCROLLS),
            stagnation_limit=_env_int("X_BOOKMARKS_STAGNATION_LIMIT", DEFAULT_STAGNATION_LIMIT),
            scroll_increment=_env_int("X_BOOKMARKS_SCROLL_INCREMENT", DEFAULT_SCROLL_INCREMENT),
        )
