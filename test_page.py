"""
Tests for the Selenium-backed page against a mocked WebDriver.
"""

from unittest.mock import MagicMock, PropertyMock

from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.common.by import By

from bookmark_pipeline.page import SeleniumPage


def test_navigate_sets_timeout_and_loads():
    driver = MagicMock()
    page = SeleniumPage(driver)

    assert page.navigate("https://x.com/home", timeout=10) is True
    driver.set_page_load_timeout.assert_called_once_with(10)
    driver.get.assert_called_once_with("https://x.com/home")


def test_navigate_timeout_is_reported_not_raised():
    driver = MagicMock()
    driver.get.side_effect = TimeoutException("page load timed out")

    assert SeleniumPage(driver).navigate("https://x.com/i/bookmarks", timeout=1) is False


def test_navigate_driver_error_is_reported_not_raised():
    driver = MagicMock()
    driver.get.side_effect = WebDriverException("net::ERR_NAME_NOT_RESOLVED")

    assert SeleniumPage(driver).navigate("https://x.com/home", timeout=1) is False


def test_wait_for_present_element():
    driver = MagicMock()

    assert SeleniumPage(driver).wait_for('article[data-testid="tweet"]', timeout=1) is True
    driver.find_element.assert_called_with(By.CSS_SELECTOR, 'article[data-testid="tweet"]')


def test_wait_for_missing_element_times_out():
    driver = MagicMock()
    driver.find_element.side_effect = NoSuchElementException("none")

    assert SeleniumPage(driver).wait_for('article[data-testid="tweet"]', timeout=0) is False


def test_query_scopes_to_root_and_returns_none_when_empty():
    driver = MagicMock()
    root = MagicMock()
    root.find_elements.return_value = []
    page = SeleniumPage(driver)

    assert page.query("time", root=root) is None
    root.find_elements.assert_called_once_with(By.CSS_SELECTOR, "time")
    driver.find_elements.assert_not_called()


def test_query_all_on_stale_root_is_empty():
    root = MagicMock()
    root.find_elements.side_effect = StaleElementReferenceException("detached")

    assert SeleniumPage(MagicMock()).query_all("img", root=root) == []


def test_attribute_and_text_on_stale_node():
    node = MagicMock()
    node.get_attribute.side_effect = StaleElementReferenceException("detached")
    type(node).text = PropertyMock(side_effect=StaleElementReferenceException("detached"))
    page = SeleniumPage(MagicMock())

    assert page.attribute(node, "href") is None
    assert page.inner_html(node) == ""
    assert page.text(node) == ""


def test_parent_and_scroll_use_scripts():
    driver = MagicMock()
    node = MagicMock()
    page = SeleniumPage(driver)

    page.parent(node)
    page.scroll_by(1000)

    driver.execute_script.assert_any_call("return arguments[0].parentElement;", node)
    driver.execute_script.assert_any_call("window.scrollBy(0, arguments[0]);", 1000)
