"""Step provider discovery and registration infrastructure.

This module defines a mixin responsible for discovering, loading, and
registering step providers exposed via Python entry points.

Provider loading failures do not interrupt loading unless strict mode
is enabled. Duplicate command names are fatal in every mode: a command
name is bound to a single step factory for the whole process.
"""

import logging
from typing import TYPE_CHECKING
from warnings import warn

from pydantic import ValidationError

from tablerunner.errors import DuplicateCommandError, PluginError, PluginWarning
from tablerunner.extensions import Provider

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint

if TYPE_CHECKING:
    from tablerunner.extensions import Command
    from tablerunner.schema import BaseStep

log = logging.getLogger(__name__)

#: Entry point group scanned for step providers.
ENTRYPOINT_GROUP = 'tablerunner_steps'


class ProvidersLoaderMixin:
    """Mixin defining step provider loading behavior.

    Attributes:
        strict_mode: If True, any provider loading issue raises an error.
            If False, issues are emitted as warnings and loading continues.
    """

    strict_mode: bool = False

    steps: dict[str, type['BaseStep']]
    sources: dict[str, str]

    def check_writable(self) -> None:
        """Hook called before any registration; no-op by default."""

    def add_command(self, command: 'Command', provider: str,
                    entrypoint: 'EntryPoint | None' = None) -> None:
        """Register a command definition.

        Args:
            command: Declarative command definition.
            provider: Name of the contributing provider.
            entrypoint: Entry point from which the provider was loaded,
                if applicable. Used for diagnostics.

        Raises:
            DuplicateCommandError: If the command name is already registered.
        """
        self.check_writable()

        if command.name in self.steps:
            raise DuplicateCommandError(
                command.name,
                provider=provider,
                existing=self.sources[command.name],
                entrypoint=entrypoint,
            )

        self.steps[command.name] = command.build()
        self.sources[command.name] = provider

    def add_provider(self, provider: Provider,
                     entrypoint: 'EntryPoint | None' = None) -> None:
        """Register all commands of a provider.

        Args:
            provider: Declarative provider definition.
            entrypoint: Entry point from which the provider was loaded, if applicable.

        Raises:
            DuplicateCommandError: If any command name is already registered.
        """
        for command in provider.commands:
            self.add_command(command, provider.name, entrypoint)

        log.debug('Registered %d commands from provider %r', len(provider.commands), provider.name)

    def emit_plugin_issue(self, message: str,
                          entrypoint: 'EntryPoint | None' = None) -> Exception | None:
        """Emit a plugin warning or return the exception.

        Args:
            message: Warning message to emit.
            entrypoint: Entry point associated with the issue, if applicable.

        Returns:
            PluginError on strict mode, otherwise `None`
                with producing a PluginWarning.
        """
        if self.strict_mode:
            return PluginError(message, entrypoint=entrypoint)

        warn(message, category=PluginWarning, stacklevel=2)

        return None

    def _load_plugin(self, entrypoint: 'EntryPoint') -> None:
        """Load and register a single provider entry point.

        Args:
            entrypoint: Entry point describing the provider to load.

        Raises:
            PluginError: If any loading issues occur on strict mode.
            DuplicateCommandError: If the provider redefines a command.
        """
        try:
            provider = entrypoint.load()

        except ValidationError as base:
            if error := self.emit_plugin_issue(
                f'Failed to validate entrypoint {entrypoint.name!r}',
                entrypoint,
            ):
                raise error from base
            return None

        except Exception as base:
            if error := self.emit_plugin_issue(
                f'Failed to load entrypoint {entrypoint.name!r}',
                entrypoint,
            ):
                raise error from base
            return None

        if not isinstance(provider, Provider):
            if error := self.emit_plugin_issue(
                f'Loaded from entrypoint {entrypoint.name!r} object is not a provider',
                entrypoint,
            ):
                raise error
            return None

        self.add_provider(provider, entrypoint)

    def clear_providers(self) -> None:
        """Clear all registered commands."""
        self.steps = {}
        self.sources = {}

    def load_plugins(self) -> None:
        """Load providers via entry points and register their commands.

        Discovers providers from the `tablerunner_steps` entry point group.

        Raises:
            PluginError: If any loading issues occur on strict mode.
            DuplicateCommandError: If a provider redefines a command.
        """
        from importlib.metadata import entry_points  # noqa: PLC0415

        for entrypoint in entry_points().select(group=ENTRYPOINT_GROUP):
            self._load_plugin(entrypoint)
