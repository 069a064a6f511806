"""Built-in table commands.

This module defines the default command set: browser actions delegated
to the legacy command client, state manipulation, control flow, and
paired assertion/verification checks.

Assertions stop the test on failure; verifications record the failure
and let the test proceed.
"""

import logging
from time import sleep
from typing import TYPE_CHECKING

from tablerunner.extensions import Command, Provider
from tablerunner.schema import Decorator

from .patterns import matches

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from tablerunner.session import Session
    from tablerunner.state import TestState

log = logging.getLogger(__name__)

#: Reads the checked value from the page, given the row locator.
type Accessor = Callable[[Session, str], str]


def _open(session: 'Session', state: 'TestState', locator: str, value: str) -> None:  # noqa: ARG001
    session.client.open(locator)


def _click(session: 'Session', state: 'TestState', locator: str, value: str) -> None:  # noqa: ARG001
    session.client.click(locator)


def _click_and_wait(session: 'Session', state: 'TestState', locator: str, value: str) -> None:  # noqa: ARG001
    session.client.click(locator)
    session.client.wait_for_page_to_load(session.page_load_timeout)


def _type(session: 'Session', state: 'TestState', locator: str, value: str) -> None:  # noqa: ARG001
    session.client.type(locator, value)


def _select(session: 'Session', state: 'TestState', locator: str, value: str) -> None:  # noqa: ARG001
    session.client.select(locator, value)


def _store(session: 'Session', state: 'TestState', locator: str, value: str) -> None:  # noqa: ARG001
    """Store the locator text under the variable named by the value."""
    state.store(value, locator)


def _store_title(session: 'Session', state: 'TestState', locator: str, value: str) -> None:  # noqa: ARG001
    """Store the page title under the variable named by the locator."""
    state.store(locator, session.client.get_title())


def _store_text(session: 'Session', state: 'TestState', locator: str, value: str) -> None:
    """Store the element text under the variable named by the value."""
    state.store(value, session.client.get_text(locator))


def _echo(session: 'Session', state: 'TestState', locator: str, value: str) -> None:  # noqa: ARG001
    log.info('echo: %s', locator)


def _pause(session: 'Session', state: 'TestState', locator: str, value: str) -> None:  # noqa: ARG001
    """Sleep for the given number of milliseconds, capped by the page load timeout."""
    delay = int(locator or value or 0)
    sleep(min(max(delay, 0), session.page_load_timeout) / 1000)


def _label(session: 'Session', state: 'TestState', locator: str, value: str) -> None:  # noqa: ARG001
    return None


def _goto_label(session: 'Session', state: 'TestState', locator: str, value: str) -> None:  # noqa: ARG001
    """Jump to the label named by the expanded locator.

    The expanded text is looked up among the literal label names.
    """
    state.jump_to(locator)


def _goto_if(session: 'Session', state: 'TestState', locator: str, value: str) -> None:
    """Jump to the label in the value if the script expression is truthy."""
    if session.driver.execute_script(f'return ({locator});'):
        state.jump_to(value)


def _skip_next(session: 'Session', state: 'TestState', locator: str, value: str) -> Decorator:  # noqa: ARG001
    return Decorator.skipping(int(locator or 1))


def _stop_test(session: 'Session', state: 'TestState', locator: str, value: str) -> Decorator:  # noqa: ARG001
    return Decorator.stop()


def _pattern_checker(accessor: 'Accessor', *, pattern_only: bool = False) -> 'Callable[..., bool]':
    """Build a check runner comparing an accessed value with a pattern.

    Args:
        accessor: Reads the actual value.
        pattern_only: Whether the command takes only a pattern, written
            in the locator column or, alternatively, the value column.

    Returns:
        Check runner raising `AssertionError` on mismatch.
    """
    def checker(session: 'Session', state: 'TestState', locator: str, value: str) -> bool:  # noqa: ARG001
        if pattern_only:
            pattern = locator or value
            actual = accessor(session, '')
        else:
            pattern = value
            actual = accessor(session, locator)

        if not matches(pattern, actual):
            raise AssertionError(f'Actual value {actual!r} did not match {pattern!r}')

        return True

    return checker


def _presence_checker(probe: 'Callable[[Session, str], bool]', what: str) -> 'Callable[..., bool]':
    """Build a check runner asserting that a probe succeeds."""
    def checker(session: 'Session', state: 'TestState', locator: str, value: str) -> bool:  # noqa: ARG001
        target = locator or value
        if not probe(session, target):
            raise AssertionError(f'{what} {target!r} not found')

        return True

    return checker


def _checks(name: str, runner: 'Callable[..., bool]') -> list[Command]:
    """Build the `assert<Name>` and `verify<Name>` command pair."""
    return [
        Command(name=f'assert{name}', runner=runner, kind='assertion'),
        Command(name=f'verify{name}', runner=runner, kind='verification'),
    ]


builtins = Provider(name='builtins', commands=[
    Command(name='open', runner=_open, title='Open a location'),
    Command(name='click', runner=_click),
    Command(name='clickAndWait', runner=_click_and_wait),
    Command(name='type', runner=_type),
    Command(name='select', runner=_select),
    Command(name='store', runner=_store),
    Command(name='storeTitle', runner=_store_title),
    Command(name='storeText', runner=_store_text),
    Command(name='echo', runner=_echo),
    Command(name='pause', runner=_pause),
    Command(name='label', runner=_label, label=True),
    Command(name='gotoLabel', runner=_goto_label),
    Command(name='gotoIf', runner=_goto_if),
    Command(name='skipNext', runner=_skip_next),
    Command(name='stopTest', runner=_stop_test),
    *_checks('Title', _pattern_checker(
        lambda session, locator: session.client.get_title(),  # noqa: ARG005
        pattern_only=True,
    )),
    *_checks('Location', _pattern_checker(
        lambda session, locator: session.client.get_location(),  # noqa: ARG005
        pattern_only=True,
    )),
    *_checks('Text', _pattern_checker(
        lambda session, locator: session.client.get_text(locator),
    )),
    *_checks('Value', _pattern_checker(
        lambda session, locator: session.client.get_value(locator),
    )),
    *_checks('ElementPresent', _presence_checker(
        lambda session, locator: session.client.is_element_present(locator),
        'Element',
    )),
    *_checks('TextPresent', _presence_checker(
        lambda session, pattern: session.client.is_text_present(pattern),
        'Text',
    )),
])
