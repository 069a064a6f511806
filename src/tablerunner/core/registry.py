"""Step factory registry.

The registry maps command names to step models built from declarative
command definitions. It is populated once at startup from the built-in
provider, installed entry point providers, and any providers passed
explicitly, and is frozen afterwards.

Resolution is eager: a whole table is resolved before any of its steps
runs, and the first unknown command aborts the run.
"""

from types import MappingProxyType
from typing import TYPE_CHECKING

from tablerunner.builtins import commands
from tablerunner.errors import ErrorContext, RegistryFrozenError, UnknownCommandError
from tablerunner.models import RunnerSettings
from tablerunner.schema import ResolvedStep

from .loader import ProvidersLoaderMixin

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from typing import Self

if TYPE_CHECKING:
    from tablerunner.extensions import Provider
    from tablerunner.schema import BaseStep, CommandRow


class StepRegistry(ProvidersLoaderMixin):
    """Name-keyed dispatch table of step factories.

    The registry is stateful until frozen. Once frozen, any attempt to
    register more commands raises `RegistryFrozenError`.
    """

    def __init__(self, *providers: 'Provider',
                 strict: bool = True,
                 builtins: bool = True,
                 plugins: bool = True,
                 freeze: bool = True) -> None:
        """Initialize the registry.

        During initialization, the registry:
        - registers the built-in command set;
        - loads entry point providers;
        - registers the explicitly passed providers;
        - optionally freezes itself.

        Args:
            *providers: Additional providers to register.
            strict: Whether provider loading failures raise instead
                of emitting warnings.
            builtins: Whether to register the built-in command set.
            plugins: Whether to discover entry point providers.
            freeze: Whether to freeze the registry after population.

        Raises:
            PluginError: If a provider fails to load on strict mode.
            DuplicateCommandError: If two providers define the same command.
        """
        self.strict_mode = strict
        self._frozen = False

        self.clear_providers()

        if builtins:
            self.add_provider(commands.builtins)

        if plugins:
            self.load_plugins()

        self.register(*providers)

        if freeze:
            self.freeze()

    @classmethod
    def from_settings(cls, *providers: 'Provider',
                      settings: RunnerSettings | None = None) -> 'Self':
        """Build a frozen registry configured from runner settings.

        Args:
            *providers: Additional providers to register.
            settings: Runner settings; resolved from the environment if omitted.

        Returns:
            A frozen registry.
        """
        if settings is None:
            settings = RunnerSettings()

        return cls(
            *providers,
            strict=settings.strict,
            plugins=settings.load_plugins,
        )

    def register(self, *providers: 'Provider') -> 'Self':
        """Merge providers into the registry.

        Args:
            *providers: Providers to register.

        Returns:
            The registry itself.

        Raises:
            RegistryFrozenError: If the registry is frozen.
            DuplicateCommandError: If a command name is already registered.
        """
        self.check_writable()

        for provider in providers:
            self.add_provider(provider)

        return self

    def check_writable(self) -> None:
        """Ensure the registry accepts new commands.

        Raises:
            RegistryFrozenError: If the registry is frozen.
        """
        if self._frozen:
            raise RegistryFrozenError('Step registry is frozen')

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        """Whether the registry is read-only."""
        return self._frozen

    @property
    def commands(self) -> 'Mapping[str, type[BaseStep]]':
        """Read-only view of the registered step models."""
        return MappingProxyType(self.steps)

    def __contains__(self, command: object) -> bool:
        return command in self.steps

    def resolve(self, row: 'CommandRow', *,
                row_num: int | None = None,
                location: str | None = None) -> ResolvedStep:
        """Build the step for a single row.

        Args:
            row: Command row to resolve.
            row_num: Row index for error reporting.
            location: Page location for error reporting.

        Returns:
            The constructed step bound to its row.

        Raises:
            UnknownCommandError: If the command is not registered.
        """
        model = self.steps.get(row.command)
        if model is None:
            raise UnknownCommandError(row.command, context=ErrorContext(
                location=location,
                row_num=row_num,
                element=row.model_dump(),
            ))

        return ResolvedStep(
            row=row,
            step=model(locator=row.locator, value=row.value),
        )

    def resolve_all(self, rows: 'Iterable[CommandRow]', *,
                    location: str | None = None) -> tuple[ResolvedStep, ...]:
        """Resolve a whole table.

        Args:
            rows: Command rows in document order.
            location: Page location for error reporting.

        Returns:
            Resolved steps in row order.

        Raises:
            UnknownCommandError: On the first row with an unknown command.
        """
        return tuple(
            self.resolve(row, row_num=row_num, location=location)
            for row_num, row in enumerate(rows)
        )
