"""Base step definitions.

A step is the executable unit bound to one table row. Concrete step
models are generated from declarative command definitions: the command
callable is attached to the model as a class-level runner, while the
row's locator and value become model fields.

Steps report their outcome through a `Decorator`. Check steps
(assertions and verifications) turn a failed check into a failed
decorator themselves; anything else a runner raises propagates to the
interpreter, which classifies it as an unexpected failure.
"""

from collections.abc import Callable
from typing import Any, ClassVar, Literal

from pydantic import Field

from tablerunner.models import SchemaModel
from tablerunner.session import Session  # noqa: TC001
from tablerunner.state import TestState  # noqa: TC001

from .decorators import Decorator
from .rows import CommandRow  # noqa: TC001

#: Kind of a command. Actions perform side effects; assertions and
#: verifications check a condition of the page under test.
type CommandKind = Literal['action', 'assertion', 'verification']

#: The runner receives the session, the test state and the expanded
#: locator and value. Any runner may return a `Decorator` to control
#: execution. Other results of check runners are judged by truth: a
#: falsy result, `None` included, or a raised `AssertionError` fails
#: the check.
type CommandRunner = Callable[[Session, TestState, str, str], Any]


class BaseStep(SchemaModel):
    """Base class for executable steps.

    The actual execution logic is delegated to a class-level runner
    callable. Step models are the factories of the registry: building
    a step is validating a model from a row's locator and value.
    """

    #: Command name the model is registered under.
    command: ClassVar[str]
    #: Kind of the command.
    kind: ClassVar[CommandKind] = 'action'
    #: Whether a failed check lets the test proceed.
    continue_on_failure: ClassVar[bool] = False
    #: Whether the row's locator declares a jump target.
    declares_label: ClassVar[bool] = False

    #: Callable implementing the command logic.
    runner: ClassVar[CommandRunner]

    locator: str = Field(
        default='',
        title='Locator',
        description='Second cell of the row, before variable expansion.',
    )

    value: str = Field(
        default='',
        title='Value',
        description='Third cell of the row, before variable expansion.',
    )

    def execute(self, session: Session, state: TestState) -> Decorator:
        """Execute the step.

        Variable references in the locator and value are expanded
        against the test state before the runner is invoked.

        Args:
            session: Browser session handle.
            state: Shared test state.

        Returns:
            Outcome of the step.

        Raises:
            Any exception raised by the runner, except check failures.
        """
        locator = state.expand(self.locator)
        value = state.expand(self.value)

        if self.kind == 'action':
            outcome = type(self).runner(session, state, locator, value)
            if isinstance(outcome, Decorator):
                return outcome
            return Decorator.success()

        try:
            passed = type(self).runner(session, state, locator, value)

        except AssertionError as error:
            return self.fail(f'{error}')

        if isinstance(passed, Decorator):
            return passed

        if not passed:
            return self.fail()

        return Decorator.success()

    def fail(self, message: str | None = None) -> Decorator:
        """Build the failed outcome of a check step.

        Args:
            message: Optional failure description.

        Returns:
            Failed decorator of the step kind, continuable only when
            the command allows continuing on failure.
        """
        if not message:
            message = f'{self.command} failed'

        return Decorator.failed(
            'verification' if self.kind == 'verification' else 'assertion',
            message,
            continuable=self.continue_on_failure,
        )


class ResolvedStep(SchemaModel):
    """A command row bound to its constructed step.

    The wrapper retains the original row for logging and reporting and
    delegates execution to the wrapped step unchanged.
    """

    row: CommandRow
    step: BaseStep

    def execute(self, session: Session, state: TestState) -> Decorator:
        """Execute the wrapped step."""
        return self.step.execute(session, state)

    def __str__(self) -> str:
        """Render the original row."""
        return f'{self.row}'
