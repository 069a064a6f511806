"""Tests for the Selenium WebDriver backed collaborators."""

from typing import TYPE_CHECKING

import pytest
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

from tablerunner.session import CommandClient, Driver, Session
from tablerunner.webdriver import SeleniumDriver, WebDriverCommandClient, parse_locator

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType


@pytest.fixture
def webdriver(mocker: 'MockerFixture') -> 'MockType':
    """Provide a mocked Selenium WebDriver."""
    return mocker.Mock(spec=WebDriver)


@pytest.mark.parametrize('locator, expected', (
    pytest.param('id=go', [(By.ID, 'go')], id='id'),
    pytest.param('name=q', [(By.NAME, 'q')], id='name'),
    pytest.param('css=form > input', [(By.CSS_SELECTOR, 'form > input')], id='css'),
    pytest.param('xpath=//a[@href="/"]', [(By.XPATH, '//a[@href="/"]')], id='xpath'),
    pytest.param('link=Sign in', [(By.LINK_TEXT, 'Sign in')], id='link'),
    pytest.param('identifier=go', [(By.ID, 'go'), (By.NAME, 'go')], id='identifier'),
    pytest.param('//div[@id="x"]', [(By.XPATH, '//div[@id="x"]')], id='implicit xpath'),
    pytest.param('go', [(By.ID, 'go'), (By.NAME, 'go')], id='implicit identifier'),
))
def test_parse_locator(locator: str, expected: list[tuple[str, str]]) -> None:
    """Selenese locators translate into WebDriver lookups."""
    assert parse_locator(locator) == expected


def test_parse_empty_locator() -> None:
    """Empty locators are rejected."""
    with pytest.raises(ValueError, match=r'^Empty locator$'):
        parse_locator('')


def test_selenium_driver(webdriver: 'MockType') -> None:
    """The driver adapter delegates to the WebDriver."""
    webdriver.current_url = 'http://localhost/'
    webdriver.page_source = '<html></html>'
    webdriver.execute_script.return_value = []

    driver = SeleniumDriver(webdriver)
    driver.navigate('http://localhost/test.html')

    assert driver.current_location() == 'http://localhost/'
    assert driver.page_source() == '<html></html>'
    assert driver.execute_script('return [];') == []

    webdriver.get.assert_called_once_with('http://localhost/test.html')


def test_session_accepts_webdriver_collaborators(webdriver: 'MockType') -> None:
    """The WebDriver implementations satisfy the session protocols."""
    driver = SeleniumDriver(webdriver)
    client = WebDriverCommandClient(webdriver)

    assert isinstance(driver, Driver)
    assert isinstance(client, CommandClient)

    session = Session(driver=driver, client=client)

    assert session.page_load_timeout == 30000


def test_session_from_settings(webdriver: 'MockType', monkeypatch: pytest.MonkeyPatch) -> None:
    """The page load timeout is resolved from environment settings."""
    monkeypatch.setenv('TABLERUN_PAGE_LOAD_TIMEOUT', '5000')

    session = Session.from_settings(SeleniumDriver(webdriver), WebDriverCommandClient(webdriver))

    assert session.page_load_timeout == 5000


def test_open_relative(webdriver: 'MockType') -> None:
    """Relative locations are joined to the base location."""
    client = WebDriverCommandClient(webdriver, base_location='http://localhost/app/')
    client.open('login')
    client.open('http://example.com/')

    assert webdriver.get.call_args_list[0].args == ('http://localhost/app/login',)
    assert webdriver.get.call_args_list[1].args == ('http://example.com/',)


def test_find_falls_back_to_name(webdriver: 'MockType', mocker: 'MockerFixture') -> None:
    """Implicit locators try the id first, then the name."""
    element = mocker.Mock(spec=WebElement)
    webdriver.find_elements.side_effect = [[], [element]]

    client = WebDriverCommandClient(webdriver)
    client.type('user', 'alice')

    assert webdriver.find_elements.call_args_list == [
        mocker.call(By.ID, 'user'),
        mocker.call(By.NAME, 'user'),
    ]
    element.clear.assert_called_once_with()
    element.send_keys.assert_called_once_with('alice')


def test_find_missing_element(webdriver: 'MockType') -> None:
    """Missing elements raise a lookup error."""
    webdriver.find_elements.return_value = []

    client = WebDriverCommandClient(webdriver)

    with pytest.raises(LookupError, match=r'^Element id=go not found$'):
        client.click('id=go')

    assert not client.is_element_present('id=go')


def test_select_option(webdriver: 'MockType', mocker: 'MockerFixture') -> None:
    """Option locators pick the matching selection strategy."""
    select = mocker.patch('tablerunner.webdriver.Select')
    webdriver.find_elements.return_value = [mocker.Mock(spec=WebElement)]

    client = WebDriverCommandClient(webdriver)
    client.select('id=lang', 'value=en')
    client.select('id=lang', 'index=2')
    client.select('id=lang', 'label=English')
    client.select('id=lang', 'Deutsch')

    select.return_value.select_by_value.assert_called_once_with('en')
    select.return_value.select_by_index.assert_called_once_with(2)
    assert select.return_value.select_by_visible_text.call_args_list == [
        mocker.call('English'),
        mocker.call('Deutsch'),
    ]


def test_text_present(webdriver: 'MockType', mocker: 'MockerFixture') -> None:
    """Text presence is checked against the page body."""
    body = mocker.Mock(spec=WebElement)
    body.text = 'Welcome, alice'
    webdriver.find_element.return_value = body

    client = WebDriverCommandClient(webdriver)

    assert client.is_text_present('alice')
    assert client.is_text_present('glob:Welcome*alice')
    assert client.is_text_present('regexp:^Wel')
    assert not client.is_text_present('bob')
    assert not client.is_text_present('exact:Welcome*')
    webdriver.find_element.assert_called_with(By.TAG_NAME, 'body')
