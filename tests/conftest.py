"""Tests configurations and fixtures."""

from importlib.metadata import EntryPoint, EntryPoints
from typing import TYPE_CHECKING

import pytest

from tablerunner.session import Session
from tablerunner.webdriver import SeleniumDriver, WebDriverCommandClient

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

if TYPE_CHECKING:
    from tablerunner.extensions import Provider

TEST_LOCATION = 'http://localhost/tests/test_home.html'


@pytest.fixture
def patch_entrypoints(mocker: 'MockerFixture') -> 'Callable[..., MockType]':
    """Provide a factory for mocking `importlib.metadata.entry_points`.

    Returns a callable that patches `entry_points()` to simulate
    discovery of providers in the `tablerunner_steps` entry point group.
    """
    def patch(*providers: 'Provider', raises: Exception | None = None) -> 'MockType':
        """Patch `entry_points` with a controlled provider configuration.

        Args:
            providers: Objects to be returned by `EntryPoint.load()`.
                If empty, no entry points are registered.
            raises: Exception to raise when `EntryPoint.load()` is called.

        Returns:
            A mock patch object replacing `importlib.metadata.entry_points`.
        """
        entrypoints = []
        for provider in providers:
            ep = mocker.Mock(spec=EntryPoint)
            ep.group = 'tablerunner_steps'
            ep.name = 'tests'
            ep.value = 'tests.examples.providers:example'
            ep.load.return_value = provider
            if raises is not None:
                ep.load.side_effect = raises
            entrypoints.append(ep)

        return mocker.patch(
            'importlib.metadata.entry_points',
            return_value=EntryPoints(entrypoints),
        )

    return patch


@pytest.fixture
def session(mocker: 'MockerFixture') -> Session:
    """Provide a session backed by mocked driver and command client.

    The driver starts positioned on the test location and reports an
    empty table; tests configure `execute_script` with their rows.
    """
    driver = mocker.Mock(spec=SeleniumDriver)
    driver.current_location.return_value = TEST_LOCATION
    driver.page_source.return_value = '<html><table></table></html>'
    driver.execute_script.return_value = []

    client = mocker.Mock(spec=WebDriverCommandClient)

    return Session(driver=driver, client=client, page_load_timeout=1000)
