"""
Page Capability Interface
=========================

The collector and extractor only talk to the browser through `Page`.
Lookups that find nothing return None, False or [] instead of raising, so
"element not rendered yet" is never handled as an exception by callers.

IMPLEMENTATIONS:
    - SeleniumPage: wraps a live (undetected-)Chrome WebDriver
    - Tests use an HTML-fixture page built on BeautifulSoup (conftest.py)
"""

from typing import Any, List, Optional

from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from .logger import Logger


class Page:
    """Operations the pipeline needs from a browser tab"""

    def navigate(self, url: str, timeout: float) -> bool:
        """Load url; False on timeout or navigation failure"""
        raise NotImplementedError

    def wait_for(self, selector: str, timeout: float) -> bool:
        """Wait until selector matches at least one element"""
        raise NotImplementedError

    def query(self, selector: str, root: Any = None) -> Optional[Any]:
        raise NotImplementedError

    def query_all(self, selector: str, root: Any = None) -> List[Any]:
        raise NotImplementedError

    def attribute(self, node: Any, name: str) -> Optional[str]:
        raise NotImplementedError

    def text(self, node: Any) -> str:
        """Rendered text of node (innerText)"""
        raise NotImplementedError

    def inner_html(self, node: Any) -> str:
        raise NotImplementedError

    def parent(self, node: Any) -> Optional[Any]:
        raise NotImplementedError

    def scroll_by(self, pixels: int) -> None:
        raise NotImplementedError


class SeleniumPage(Page):
    """Page backed by a Selenium WebDriver"""

    STALE_ERRORS = (StaleElementReferenceException, NoSuchElementException)

    def __init__(self, driver):
        self.driver = driver

    def navigate(self, url: str, timeout: float) -> bool:
        self.driver.set_page_load_timeout(timeout)
        try:
            self.driver.get(url)
            return True
        except TimeoutException:
            Logger.warning(f"Timed out loading {url}")
            return False
        except WebDriverException as e:
            Logger.warning(f"Navigation to {url} failed: {e.msg}")
            return False

    def wait_for(self, selector: str, timeout: float) -> bool:
        try:
            WebDriverWait(self.driver, timeout).until(
                EC.presence_of_element_located((By.CSS_SELECTOR, selector))
            )
            return True
        except TimeoutException:
            return False

    def query(self, selector: str, root: Any = None) -> Optional[Any]:
        matches = self.query_all(selector, root)
        return matches[0] if matches else None

    def query_all(self, selector: str, root: Any = None) -> List[Any]:
        scope = root if root is not None else self.driver
        try:
            return scope.find_elements(By.CSS_SELECTOR, selector)
        except self.STALE_ERRORS:
            return []

    def attribute(self, node: Any, name: str) -> Optional[str]:
        try:
            return node.get_attribute(name)
        except self.STALE_ERRORS:
            return None

    def text(self, node: Any) -> str:
        try:
            return node.text or ''
        except self.STALE_ERRORS:
            return ''

    def inner_html(self, node: Any) -> str:
        return self.attribute(node, 'innerHTML') or ''

    def parent(self, node: Any) -> Optional[Any]:
        try:
            return self.driver.execute_script("return arguments[0].parentElement;", node)
        except self.STALE_ERRORS:
            return None

    def scroll_by(self, pixels: int) -> None:
        self.driver.execute_script("window.scrollBy(0, arguments[0]);", pixels)
