"""Tests for the step factory registry."""

import pytest

from tablerunner.core import StepRegistry
from tablerunner.errors import DuplicateCommandError, RegistryFrozenError, UnknownCommandError
from tablerunner.extensions import Command, Provider
from tablerunner.models import RunnerSettings
from tablerunner.schema import BaseStep, CommandRow
from tests.examples.providers import example


def test_builtins_registered() -> None:
    """The built-in command set is available by default."""
    registry = StepRegistry(plugins=False)

    for name in ('open', 'click', 'clickAndWait', 'type', 'assertTitle', 'verifyTitle'):
        assert name in registry
        assert issubclass(registry.commands[name], BaseStep)
        assert registry.sources[name] == 'builtins'


def test_without_builtins() -> None:
    """Built-in commands can be left out."""
    registry = StepRegistry(example, builtins=False, plugins=False)

    assert set(registry.commands) == {
        'setVar', 'checkVar', 'softCheckVar', 'checkAll', 'explode', 'giveUp',
    }


def test_resolve_builds_step() -> None:
    """Resolution binds the constructed step to its row."""
    registry = StepRegistry(plugins=False)
    row = CommandRow(command='type', locator='id=user', value='alice')

    resolved = registry.resolve(row)

    assert resolved.row is row
    assert resolved.step.locator == 'id=user'
    assert resolved.step.value == 'alice'
    assert type(resolved.step).command == 'type'
    assert f'{resolved}' == '|type | id=user | alice |'


def test_resolve_unknown_command() -> None:
    """Unknown commands are a hard error naming the command."""
    registry = StepRegistry(plugins=False)

    with pytest.raises(UnknownCommandError, match=r'^Unknown command: clickk') as error:
        registry.resolve(CommandRow(command='clickk', locator='id=go'), row_num=3)

    assert error.value.command == 'clickk'
    assert 'row 4' in f'{error.value}'
    assert 'locator: id=go' in f'{error.value}'


def test_resolve_all_is_eager() -> None:
    """The first unknown row fails resolution of the whole table."""
    registry = StepRegistry(plugins=False)
    rows = [
        CommandRow(command='open', locator='/'),
        CommandRow(command='bogus'),
        CommandRow(command='alsoBogus'),
    ]

    with pytest.raises(UnknownCommandError) as error:
        registry.resolve_all(rows, location='http://localhost/test.html')

    assert error.value.command == 'bogus'
    assert 'in "http://localhost/test.html", row 2' in f'{error.value}'


def test_resolve_all_keeps_order() -> None:
    """Resolved steps follow row order."""
    registry = StepRegistry(plugins=False)
    rows = [
        CommandRow(command='open', locator='/'),
        CommandRow(command='click', locator='id=go'),
        CommandRow(command='assertTitle', locator='Home'),
    ]

    steps = registry.resolve_all(rows)

    assert [step.row for step in steps] == rows


def test_duplicate_across_providers() -> None:
    """Registering a command twice is a configuration error."""
    shadow = Provider(name='shadow', commands=[
        Command(name='click', runner=lambda session, state, locator, value: None),  # noqa: ARG005
    ])

    with pytest.raises(DuplicateCommandError, match=r"is already registered by 'builtins'$") as error:
        StepRegistry(shadow, plugins=False)

    assert error.value.command == 'click'
    assert error.value.provider == 'shadow'


def test_duplicate_within_provider() -> None:
    """Duplicates inside a single provider are rejected too."""
    twice = Provider(name='twice', commands=[
        Command(name='hello', runner=lambda session, state, locator, value: None),  # noqa: ARG005
        Command(name='hello', runner=lambda session, state, locator, value: None),  # noqa: ARG005
    ])

    with pytest.raises(DuplicateCommandError, match=r"by 'twice'$"):
        StepRegistry(twice, plugins=False)


def test_duplicate_in_relaxed_mode() -> None:
    """Relaxed mode does not turn duplicates into warnings."""
    with pytest.raises(DuplicateCommandError):
        StepRegistry(example, example, strict=False, plugins=False)


def test_frozen_registry() -> None:
    """A frozen registry rejects new providers."""
    registry = StepRegistry(plugins=False)

    assert registry.frozen

    with pytest.raises(RegistryFrozenError, match=r'is frozen$'):
        registry.register(example)

    assert 'setVar' not in registry


def test_unfrozen_registry() -> None:
    """An unfrozen registry accepts providers until frozen."""
    registry = StepRegistry(plugins=False, freeze=False)
    registry.register(example).freeze()

    assert 'setVar' in registry
    assert registry.frozen


def test_commands_view_is_read_only() -> None:
    """The commands view can not be mutated."""
    registry = StepRegistry(plugins=False)

    with pytest.raises(TypeError):
        registry.commands['click'] = BaseStep  # type: ignore[index]


def test_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Registry options are resolved from environment settings."""
    monkeypatch.setenv('TABLERUN_STRICT', 'false')
    monkeypatch.setenv('TABLERUN_LOAD_PLUGINS', 'false')

    registry = StepRegistry.from_settings(example)

    assert not registry.strict_mode
    assert registry.frozen
    assert 'setVar' in registry


def test_from_explicit_settings() -> None:
    """Explicit settings take precedence over the environment."""
    registry = StepRegistry.from_settings(settings=RunnerSettings(strict=True, load_plugins=False))

    assert registry.strict_mode
    assert 'setVar' not in registry
