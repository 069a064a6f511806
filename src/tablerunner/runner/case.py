"""Runtime execution of a single test page.

This module defines the command interpreter. A test case positions the
browser on its page, scrapes the command rows, resolves them all
through the step registry, and executes them in row order, recording
exactly one classified result per attempted row. A non-continuable
outcome ends the run; the remaining rows are left out of the results.
"""

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from tablerunner.errors import RunnerError, StepLimitError
from tablerunner.models import RunnerSettings
from tablerunner.schema import Decorator, extract_rows
from tablerunner.state import TestState

from .results import StepResult

if TYPE_CHECKING:
    from typing import Self

    from tablerunner.core import StepRegistry
    from tablerunner.schema import ResolvedStep
    from tablerunner.session import Session

    from .results import ResultsSink

log = logging.getLogger(__name__)


class Phase(StrEnum):
    """Interpreter phases of a test case run."""

    NOT_STARTED = 'not_started'
    NAVIGATING = 'navigating'
    EXTRACTING = 'extracting'
    RESOLVING = 'resolving'
    EXECUTING = 'executing'
    DONE = 'done'


class TestCase:
    """Interpreter of one table-driven test page.

    Execution is sequential and synchronous. The test state is created
    fresh for each run and passed explicitly to every step.

    Labels are the literal locator text of `label` rows, indexed before
    any step runs; variable references in a label row are not expanded.
    Jumps may loop back, so a run is bounded by `max_steps`: the row
    that would exceed it is recorded as an unexpected failure instead
    of being executed.
    """

    __test__ = False

    def __init__(self, location: str, registry: 'StepRegistry', *,
                 max_steps: int | None = None) -> None:
        """Initialize a test case.

        Args:
            location: Location (URL) of the test page.
            registry: Registry resolving command names to steps.
            max_steps: Maximum number of executed steps per run;
                unbounded if omitted.
        """
        if not location:
            raise ValueError('Test location must not be empty')

        self.location = location
        self.registry = registry
        self.max_steps = max_steps

        self.phase = Phase.NOT_STARTED

    @classmethod
    def from_settings(cls, location: str, registry: 'StepRegistry',
                      settings: RunnerSettings | None = None) -> 'Self':
        """Build a test case configured from runner settings.

        Args:
            location: Location (URL) of the test page.
            registry: Registry resolving command names to steps.
            settings: Runner settings; resolved from the environment if omitted.
        """
        if settings is None:
            settings = RunnerSettings()

        return cls(location, registry, max_steps=settings.max_steps)

    def enter(self, phase: Phase) -> None:
        """Move the interpreter to a phase."""
        log.debug('%s: %s -> %s', self.location, self.phase, phase)
        self.phase = phase

    def navigate(self, session: 'Session') -> None:
        """Load the test page unless the browser is already on it."""
        self.enter(Phase.NAVIGATING)

        if session.driver.current_location() != self.location:
            log.info('Navigating to %s', self.location)
            session.driver.navigate(self.location)

    def run_step(self, step: 'ResolvedStep', session: 'Session',
                 state: TestState) -> Decorator:
        """Execute a single step, converting raised faults into outcomes.

        Args:
            step: Step to execute.
            session: Browser session handle.
            state: Shared test state.

        Returns:
            Outcome of the step; a non-continuable unexpected failure if
            the step raised.
        """
        try:
            decorator = step.execute(session, state)

        except Exception as error:
            log.debug('Step %s raised', step, exc_info=True)
            return Decorator.unexpected(error)

        if not isinstance(decorator, Decorator):
            return Decorator.unexpected(TypeError(
                f'Step {step} returned {decorator!r} instead of an outcome',
            ))

        return decorator

    def run_steps(self, steps: 'tuple[ResolvedStep, ...]',
                  session: 'Session') -> list[StepResult]:
        """Execute resolved steps in row order.

        Args:
            steps: Resolved steps of the page.
            session: Browser session handle.

        Returns:
            Results of the attempted steps, one per row.
        """
        self.enter(Phase.EXECUTING)

        state = TestState()
        for position, step in enumerate(steps):
            if type(step.step).declares_label:
                state.add_label(step.row.locator, position)

        results: list[StepResult] = []
        position = 0

        while position < len(steps):
            step = steps[position]
            log.info('%s', step)

            if self.max_steps is not None and len(results) >= self.max_steps:
                decorator = Decorator.unexpected(StepLimitError(
                    f'Step limit of {self.max_steps} exceeded',
                ))
            else:
                decorator = self.run_step(step, session, state)

            result = StepResult(step=step, decorator=decorator)
            results.append(result)

            if not result.is_successful:
                log.warning('%s: %s', step, result.cause)

            if not decorator.continuable:
                break

            if (target := state.pop_jump()) is not None:
                log.debug('Jumping to row %d', target + 1)
                position = target
            else:
                if decorator.skip:
                    log.debug('Skipping %d rows', decorator.skip)
                position += 1 + decorator.skip

        return results

    def run(self, results: 'ResultsSink', session: 'Session') -> list[StepResult]:
        """Run the test page and report its outcome.

        Args:
            results: Sink receiving the raw page source and step results.
            session: Browser session handle, owned by this run.

        Returns:
            Recorded step results.

        Raises:
            UnknownCommandError: If a row names an unknown command; no
                step is executed and the sink is not called.
            RowExtractionError: If the page rows can not be extracted.
            RunnerError: If the test case is already running.
        """
        if self.phase not in {Phase.NOT_STARTED, Phase.DONE}:
            raise RunnerError(f'Test {self.location} is already running')

        try:
            self.navigate(session)

            self.enter(Phase.EXTRACTING)
            raw_source = session.driver.page_source()
            rows = extract_rows(session.driver, self.location)

            self.enter(Phase.RESOLVING)
            steps = self.registry.resolve_all(rows, location=self.location)

            step_results = self.run_steps(steps, session)

        finally:
            self.enter(Phase.DONE)

        results.add_test(raw_source, step_results)

        return step_results
