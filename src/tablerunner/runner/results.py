"""Step results and results sinks.

A step result couples an executed step with its terminal outcome and
classifies it into exactly one of three states:
- successful: the step produced no failure cause;
- error: the step intentionally signalled a failed assertion or
  verification;
- failure: something the test did not anticipate went wrong.
"""

from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable

from pydantic import Field

from tablerunner.models import SchemaModel
from tablerunner.schema import Cause, Decorator, ResolvedStep

if TYPE_CHECKING:
    from collections.abc import Sequence

#: Classification of a recorded step.
type StepStatus = Literal['successful', 'error', 'failure']


class StepResult(SchemaModel):
    """Executed step and its outcome."""

    step: ResolvedStep = Field(
        title='Executed step',
        description='Resolved step the outcome belongs to.',
    )

    decorator: Decorator = Field(
        title='Outcome',
        description='Terminal outcome of the step.',
    )

    @property
    def cause(self) -> Cause | None:
        """Failure cause, if any."""
        return self.decorator.cause

    @property
    def is_successful(self) -> bool:
        return self.cause is None

    @property
    def is_error(self) -> bool:
        return self.cause is not None and self.cause.is_domain

    @property
    def is_failure(self) -> bool:
        return not self.is_successful and not self.is_error

    @property
    def status(self) -> StepStatus:
        """Classification of the result."""
        if self.is_successful:
            return 'successful'

        if self.is_error:
            return 'error'

        return 'failure'

    @property
    def step_log(self) -> str:
        """Textual form of the executed row."""
        return f'{self.step}'


@runtime_checkable
class ResultsSink(Protocol):
    """Receiver of per-test outcomes."""

    def add_test(self, raw_source: str, results: 'Sequence[StepResult]') -> None:
        """Record the outcome of one test run."""
        ...  # pragma: no cover


class TestRecord(SchemaModel):
    """Outcome of one test page collected by `TestResults`."""

    __test__ = False

    raw_source: str
    results: tuple[StepResult, ...]

    @property
    def passed(self) -> bool:
        """Whether every recorded step succeeded."""
        return all(result.is_successful for result in self.results)

    def count(self, status: StepStatus) -> int:
        """Number of recorded steps with the given status."""
        return sum(1 for result in self.results if result.status == status)


class TestResults:
    """In-memory results sink."""

    __test__ = False

    def __init__(self) -> None:
        self.tests: list[TestRecord] = []

    def add_test(self, raw_source: str, results: 'Sequence[StepResult]') -> None:
        self.tests.append(TestRecord(raw_source=raw_source, results=tuple(results)))

    @property
    def passed(self) -> bool:
        """Whether every collected test passed."""
        return all(test.passed for test in self.tests)
