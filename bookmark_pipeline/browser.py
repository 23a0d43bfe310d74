"""
Browser Session Provider
========================

Starts Chrome through undetected-chromedriver with a persistent profile
directory, restores saved X cookies, and hands the pipeline a SeleniumPage.

SESSION ARTIFACTS (under PipelineConfig.data_dir):
    chrome_profile/    persistent Chrome user data dir
    x_cookies.json     cookies saved after `x-bookmarks auth`

USAGE:
    with BrowserSession(config) as page:
        BookmarkPipeline(page, ledger, config.output_dir).run(10)
"""

import json
from typing import Optional

import undetected_chromedriver as uc
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.support.ui import WebDriverWait

from .config import BASE_URL, LOGIN_URL, PipelineConfig
from .errors import SessionError
from .logger import Logger
from .pacing import random_delay
from .page import SeleniumPage

LOGIN_WAIT_TIMEOUT = 600
USER_AGENT = ('Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 '
              '(KHTML, like Gecko) Chrome/129.0.0.0 Safari/537.36')


class BrowserSession:
    """Owns the Chrome driver and the saved X session for one run"""

    def __init__(self, config: PipelineConfig, headless: Optional[bool] = None):
        self.config = config
        self.headless = config.headless if headless is None else headless
        self.driver = None

    def setup_driver(self):
        """Setup Chrome driver with undetected-chromedriver"""
        options = uc.ChromeOptions()
        options.add_argument('--no-sandbox')
        options.add_argument('--disable-dev-shm-usage')
        options.add_argument('--window-size=1280,900')
        options.add_argument(f'--user-agent={USER_AGENT}')

        profile_dir = self.config.profile_dir
        profile_dir.mkdir(parents=True, exist_ok=True)
        options.add_argument(f'--user-data-dir={profile_dir}')

        try:
            self.driver = uc.Chrome(options=options, headless=self.headless,
                                    version_main=self.config.chrome_version)
        except WebDriverException as e:
            raise SessionError(f"Could not start Chrome: {e.msg}") from e

        return self.driver

    def save_cookies(self):
        """Save browser cookies to file"""
        if not self.driver:
            return
        cookies = self.driver.get_cookies()
        self.config.cookies_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config.cookies_path, 'w') as f:
            json.dump(cookies, f)
        Logger.success(f"Saved {len(cookies)} cookies to {self.config.cookies_path}")

    def load_cookies(self) -> bool:
        """Load cookies from file"""
        if not self.config.cookies_path.exists():
            Logger.info("No existing session found. Starting new session...")
            return False

        with open(self.config.cookies_path, 'r') as f:
            cookies = json.load(f)

        # Cookies can only be set for the domain currently loaded
        self.driver.get(BASE_URL)
        random_delay(1000, 2000)

        loaded = 0
        for cookie in cookies:
            cookie.pop('expiry', None)
            try:
                self.driver.add_cookie(cookie)
                loaded += 1
            except WebDriverException as e:
                Logger.debug(f"Skipped cookie {cookie.get('name')}: {e.msg}")

        Logger.info(f"Loading existing session ({loaded} cookies)...")
        return loaded > 0

    def start(self) -> SeleniumPage:
        self.setup_driver()
        self.load_cookies()
        return SeleniumPage(self.driver)

    def close(self):
        if not self.driver:
            return
        try:
            # Refresh the stored session only if one was created by `auth`
            if self.config.cookies_path.exists():
                self.save_cookies()
        except WebDriverException as e:
            Logger.warning(f"Could not refresh saved cookies: {e.msg}")
        finally:
            self.driver.quit()
            self.driver = None

    def __enter__(self) -> SeleniumPage:
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.close()


def login_interactive(config: PipelineConfig, timeout: int = LOGIN_WAIT_TIMEOUT) -> bool:
    """
    Open a visible browser on the login flow and wait for the user to log in.

    The session is saved once the browser reaches the home timeline.
    """
    Logger.banner("Interactive login")
    print("Please log in to X (Twitter) in the browser window.")
    print(f"Waiting up to {timeout // 60} minutes for the address bar to show x.com/home...")

    session = BrowserSession(config, headless=False)
    session.setup_driver()
    try:
        session.driver.get(LOGIN_URL)
        WebDriverWait(session.driver, timeout, poll_frequency=1).until(
            lambda d: "/home" in d.current_url
        )
        Logger.success("Login detected! Saving session...")
        session.save_cookies()
        return True
    except TimeoutException:
        Logger.error("Login was not completed in time")
        return False
    except WebDriverException as e:
        Logger.error(f"Login process interrupted or failed: {e.msg}")
        return False
    finally:
        session.driver.quit()
        session.driver = None
