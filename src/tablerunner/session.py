"""Browser session interfaces.

The interpreter talks to the browser through two narrow collaborators:
a driver used to position the browser and scrape the test table, and a
legacy command client used by the steps to perform individual actions.
Both are structural protocols; `tablerunner.webdriver` provides
implementations backed by Selenium WebDriver.
"""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pydantic import Field

from tablerunner.models import RunnerSettings, SchemaModel

if TYPE_CHECKING:
    from typing import Self


@runtime_checkable
class Driver(Protocol):
    """Browser driver capabilities consumed by the interpreter."""

    def current_location(self) -> str:
        """Return the location (URL) currently loaded."""
        ...  # pragma: no cover

    def navigate(self, location: str) -> None:
        """Load a location and block until it is loaded."""
        ...  # pragma: no cover

    def page_source(self) -> str:
        """Return the raw source of the current page."""
        ...  # pragma: no cover

    def execute_script(self, script: str) -> Any:  # noqa: ANN401
        """Evaluate a script in the page and return its result."""
        ...  # pragma: no cover


@runtime_checkable
class CommandClient(Protocol):
    """Legacy command set used by the built-in steps."""

    def open(self, location: str) -> None:
        """Open a location, relative to the base location if not absolute."""
        ...  # pragma: no cover

    def click(self, locator: str) -> None:
        """Click the located element."""
        ...  # pragma: no cover

    def type(self, locator: str, value: str) -> None:
        """Replace the value of the located input."""
        ...  # pragma: no cover

    def select(self, locator: str, option: str) -> None:
        """Select an option of the located select element."""
        ...  # pragma: no cover

    def wait_for_page_to_load(self, timeout: int) -> None:
        """Block until the page is loaded or the timeout (ms) expires."""
        ...  # pragma: no cover

    def get_title(self) -> str:
        """Return the title of the current page."""
        ...  # pragma: no cover

    def get_location(self) -> str:
        """Return the location of the current page."""
        ...  # pragma: no cover

    def get_text(self, locator: str) -> str:
        """Return the visible text of the located element."""
        ...  # pragma: no cover

    def get_value(self, locator: str) -> str:
        """Return the value of the located input."""
        ...  # pragma: no cover

    def is_element_present(self, locator: str) -> bool:
        """Return whether the locator matches an element."""
        ...  # pragma: no cover

    def is_text_present(self, pattern: str) -> bool:
        """Return whether a Selenese pattern occurs in the page body text."""
        ...  # pragma: no cover


class Session(SchemaModel):
    """Single-owner browser session handle used for one run."""

    driver: Driver = Field(
        title='Driver',
        description='Browser driver used for navigation and row extraction.',
    )

    client: CommandClient = Field(
        title='Command client',
        description='Legacy command client used by steps.',
    )

    page_load_timeout: int = Field(
        default=30000,
        title='Page load timeout',
        description='Timeout in milliseconds used by commands waiting for a page load.',
    )

    @classmethod
    def from_settings(cls, driver: Driver, client: CommandClient,
                      settings: RunnerSettings | None = None) -> 'Self':
        """Build a session configured from runner settings.

        Args:
            driver: Browser driver.
            client: Legacy command client.
            settings: Runner settings; resolved from the environment if omitted.
        """
        if settings is None:
            settings = RunnerSettings()

        return cls(
            driver=driver,
            client=client,
            page_load_timeout=settings.page_load_timeout,
        )
