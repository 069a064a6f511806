"""Declarative command definitions and dynamic step model construction.

This module defines the abstraction for table commands. Commands are
declarative objects that describe how runtime step models are built
rather than being executed directly.

Commands are compiled into Pydantic models derived from `BaseStep`.
The generated model class is the step factory stored in the registry:
instantiating it from a row's locator and value yields an executable
step.
"""

from typing import Any, ClassVar

from pydantic import Field, create_model

from tablerunner.models import DescribedMixin
from tablerunner.names import CommandName  # noqa: TC001
from tablerunner.schema import BaseStep, CommandKind, CommandRunner


class Command(DescribedMixin):
    """Declarative command definition.

    A command defines:
    - the name used in the first column of table rows,
    - a callable implementing the command logic,
    - the command kind, which decides how a falsy outcome is reported,
    - whether a failed check lets the test proceed.
    """

    name: CommandName = Field(
        title='Command name',
        description=(
            'Name matched against the first cell of table rows. '
            'Must be unique across all registered providers.'
        ),
    )

    runner: CommandRunner = Field(
        title='Command function',
        description=(
            'Callable implementing the command logic.\n'
            'Receives the session, the test state, and the expanded '
            'locator and value of the row.'
        ),
    )

    kind: CommandKind = Field(
        default='action',
        title='Command kind',
        description=(
            'Actions perform side effects. Assertions and verifications '
            'check a condition; their failures are domain-level errors.'
        ),
    )

    continue_on_failure: bool | None = Field(
        default=None,
        title='Continue on failure',
        description=(
            'Whether the test proceeds after a failed check. '
            'Defaults to true for verifications and false otherwise.'
        ),
    )

    label: bool = Field(
        default=False,
        title='Declares a label',
        description='Whether the row locator declares a jump target.',
    )

    def build_continuation(self) -> tuple[Any, bool]:
        """Build the continuation class variable for the generated model.

        Returns:
            A tuple containing `ClassVar[bool]` and the resolved flag.
        """
        if self.continue_on_failure is None:
            return ClassVar[bool], self.kind == 'verification'

        return ClassVar[bool], self.continue_on_failure

    def build_runner(self) -> tuple[Any, CommandRunner]:
        """Build runner definition for the generated Pydantic model.

        Returns:
            A tuple containing `ClassVar[CommandRunner]` and the callable.
        """
        return ClassVar[CommandRunner], staticmethod(self.runner)

    def build_fields(self) -> dict[str, Any]:
        """Build class variable definitions for the generated step model."""
        return {
            'command': (ClassVar[str], self.name),
            'kind': (ClassVar[CommandKind], self.kind),
            'continue_on_failure': self.build_continuation(),
            'declares_label': (ClassVar[bool], self.label),
            'runner': self.build_runner(),
        }

    def build(self) -> type[BaseStep]:
        """Build a dynamic Pydantic model representing this command.

        Returns:
            Dynamically created subclass of `BaseStep`.
        """
        return create_model(f'{self.name}_Step', __base__=BaseStep, **self.build_fields())
