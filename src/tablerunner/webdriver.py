"""Selenium WebDriver backed session collaborators.

`SeleniumDriver` adapts a WebDriver to the interpreter's driver
protocol. `WebDriverCommandClient` implements the legacy command set on
top of a WebDriver, translating Selenese locators (`id=`, `name=`,
`css=`, `xpath=`, `link=`, `identifier=` or an implicit form) into
WebDriver lookups.
"""

from typing import TYPE_CHECKING, Any
from urllib.parse import urljoin

from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import Select, WebDriverWait

from tablerunner.builtins.patterns import contains

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver
    from selenium.webdriver.remote.webelement import WebElement

STRATEGIES = {
    'id': By.ID,
    'name': By.NAME,
    'css': By.CSS_SELECTOR,
    'xpath': By.XPATH,
    'link': By.LINK_TEXT,
}

READY_STATE_SCRIPT = 'return document.readyState'


def parse_locator(locator: str) -> list[tuple[str, str]]:
    """Translate a Selenese locator into WebDriver lookups.

    Args:
        locator: Locator text, with an optional `strategy=` prefix.

    Returns:
        Candidate `(by, value)` pairs, tried in order.

    Raises:
        ValueError: If the locator is empty.
    """
    if not locator:
        raise ValueError('Empty locator')

    strategy, _, value = locator.partition('=')
    if value and strategy in STRATEGIES:
        return [(STRATEGIES[strategy], value)]

    if value and strategy == 'identifier':
        return [(By.ID, value), (By.NAME, value)]

    if locator.startswith('//'):
        return [(By.XPATH, locator)]

    return [(By.ID, locator), (By.NAME, locator)]


class SeleniumDriver:
    """Driver protocol implementation over a Selenium WebDriver."""

    def __init__(self, webdriver: 'WebDriver') -> None:
        self.webdriver = webdriver

    def current_location(self) -> str:
        return self.webdriver.current_url

    def navigate(self, location: str) -> None:
        self.webdriver.get(location)

    def page_source(self) -> str:
        return self.webdriver.page_source

    def execute_script(self, script: str) -> Any:  # noqa: ANN401
        return self.webdriver.execute_script(script)


class WebDriverCommandClient:
    """Legacy command set implemented with Selenium WebDriver."""

    def __init__(self, webdriver: 'WebDriver', base_location: str = '') -> None:
        """Initialize the client.

        Args:
            webdriver: Selenium WebDriver instance.
            base_location: Location relative `open` targets are joined to.
        """
        self.webdriver = webdriver
        self.base_location = base_location

    def find(self, locator: str) -> 'WebElement':
        """Locate a single element.

        Raises:
            LookupError: If no candidate lookup matches an element.
        """
        for by, value in parse_locator(locator):
            if elements := self.webdriver.find_elements(by, value):
                return elements[0]

        raise LookupError(f'Element {locator} not found')

    def open(self, location: str) -> None:
        self.webdriver.get(urljoin(self.base_location, location))

    def click(self, locator: str) -> None:
        self.find(locator).click()

    def type(self, locator: str, value: str) -> None:
        element = self.find(locator)
        element.clear()
        element.send_keys(value)

    def select(self, locator: str, option: str) -> None:
        """Select an option by `label=`, `value=`, `index=` or plain label."""
        select = Select(self.find(locator))

        strategy, _, value = option.partition('=')
        if value and strategy == 'value':
            select.select_by_value(value)
        elif value and strategy == 'index':
            select.select_by_index(int(value))
        elif value and strategy == 'label':
            select.select_by_visible_text(value)
        else:
            select.select_by_visible_text(option)

    def wait_for_page_to_load(self, timeout: int) -> None:
        WebDriverWait(self.webdriver, timeout / 1000).until(
            lambda webdriver: webdriver.execute_script(READY_STATE_SCRIPT) == 'complete',
        )

    def get_title(self) -> str:
        return self.webdriver.title

    def get_location(self) -> str:
        return self.webdriver.current_url

    def get_text(self, locator: str) -> str:
        return self.find(locator).text

    def get_value(self, locator: str) -> str:
        return self.find(locator).get_attribute('value') or ''

    def is_element_present(self, locator: str) -> bool:
        return any(
            self.webdriver.find_elements(by, value)
            for by, value in parse_locator(locator)
        )

    def is_text_present(self, pattern: str) -> bool:
        """Check the page body text for a Selenese pattern."""
        return contains(pattern, self.webdriver.find_element(By.TAG_NAME, 'body').text)
