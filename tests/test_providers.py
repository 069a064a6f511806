"""Tests for step provider discovery through entry points."""

from typing import TYPE_CHECKING

import pydantic
import pytest

from tablerunner.core import StepRegistry
from tablerunner.errors import DuplicateCommandError, PluginError, PluginWarning
from tablerunner.extensions import Command, Provider
from tests.examples.providers import example

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockType


def test_base_loading(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify commands of a discovered provider are registered."""
    patch_entrypoints(example)

    registry = StepRegistry()

    assert 'setVar' in registry
    assert registry.sources['setVar'] == 'example'
    assert 'open' in registry


def test_loading_with_empty_provider(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify an empty provider contributes nothing."""
    patch_entrypoints(Provider(name='empty'))

    registry = StepRegistry()

    assert set(registry.sources.values()) == {'builtins'}


def test_loading_duplicate_from_entrypoint(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify a discovered provider can not shadow a built-in command."""
    patch_entrypoints(Provider(name='shadow', commands=[
        Command(name='open', runner=lambda session, state, locator, value: None),  # noqa: ARG005
    ]))

    with pytest.raises(DuplicateCommandError, match=r"^Command 'open' from 'shadow'") as error:
        StepRegistry(strict=False)

    assert error.value.entrypoint is not None


def test_loading_skip_with_failed_entrypoint(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify skipping of providers that fail during loading."""
    patch_entrypoints(None, raises=SyntaxError)
    with pytest.warns(PluginWarning, match=r'^Failed to load entrypoint'):
        StepRegistry(strict=False)


def test_loading_fail_with_failed_entrypoint(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify failing of providers that fail during loading with strict mode."""
    patch_entrypoints(None, raises=SyntaxError)
    with pytest.raises(PluginError, match=r'^Failed to load entrypoint'):
        StepRegistry(strict=True)


def test_loading_skip_with_not_valid_entrypoint(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify skipping of providers that fail validation during loading."""
    try:
        pydantic.TypeAdapter(int).validate_python('error')
    except pydantic.ValidationError as exception:
        error = exception

    patch_entrypoints(None, raises=error)
    with pytest.warns(PluginWarning, match=r'^Failed to validate entrypoint'):
        StepRegistry(strict=False)


def test_loading_fail_with_not_valid_entrypoint(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify failing of providers that fail validation with strict mode."""
    try:
        pydantic.TypeAdapter(int).validate_python('error')
    except pydantic.ValidationError as exception:
        error = exception

    patch_entrypoints(None, raises=error)
    with pytest.raises(PluginError, match=r'^Failed to validate entrypoint'):
        StepRegistry(strict=True)


def test_loading_skip_with_invalid_provider(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify handling of objects that are not providers."""
    patch_entrypoints({})
    with pytest.warns(PluginWarning, match=r'object is not a provider$'):
        StepRegistry(strict=False)


def test_loading_fail_with_invalid_provider(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify failing on objects that are not providers with strict mode."""
    patch_entrypoints({})
    with pytest.raises(PluginError, match=r'object is not a provider$'):
        StepRegistry(strict=True)


def test_plugins_disabled(patch_entrypoints: 'Callable[..., MockType]') -> None:
    """Verify entry points are not consulted when plugins are disabled."""
    patched = patch_entrypoints(example)

    registry = StepRegistry(plugins=False)

    assert 'setVar' not in registry
    patched.assert_not_called()
