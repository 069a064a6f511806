"""Step outcomes.

A decorator is the value produced by executing one step. It carries the
failure cause, if any, and tells the interpreter whether the test may
proceed to the next row. Decorators are immutable and composable: when
two outcomes are combined, the most severe cause and the most
restrictive continuation flag win.
"""

from typing import Literal, Self

from pydantic import Field, NonNegativeInt, model_validator

from tablerunner.models import SchemaModel

#: Failure kinds. `assertion` and `verification` are domain-level
#: errors intentionally signalled by a step; `unexpected` marks any
#: other fault raised while executing it.
type CauseKind = Literal['assertion', 'verification', 'unexpected']

#: Domain-level failure kinds.
DOMAIN_KINDS: frozenset[CauseKind] = frozenset({'assertion', 'verification'})

SEVERITY: dict[CauseKind | None, int] = {
    None: 0,
    'verification': 1,
    'assertion': 2,
    'unexpected': 3,
}


class Cause(SchemaModel):
    """Tagged failure value attached to a decorator."""

    kind: CauseKind = Field(
        title='Failure kind',
        description='Class of the failure: assertion, verification or unexpected.',
    )

    message: str = Field(
        default='',
        title='Message',
        description='Human-readable failure description.',
    )

    error: BaseException | None = Field(
        default=None,
        title='Original exception',
        description='Exception that produced the failure, if any.',
        exclude=True,
    )

    @property
    def is_domain(self) -> bool:
        """Whether the failure was intentionally signalled by a step."""
        return self.kind in DOMAIN_KINDS

    def __str__(self) -> str:
        """Short representation used in logs."""
        return f'{self.kind}: {self.message}' if self.message else self.kind


class Decorator(SchemaModel):
    """Outcome of executing a single step."""

    cause: Cause | None = Field(
        default=None,
        title='Failure cause',
        description='Failure produced by the step, or `None` on success.',
    )

    continuable: bool = Field(
        default=True,
        title='Continuation flag',
        description='Whether the interpreter may proceed to the next row.',
    )

    skip: NonNegativeInt = Field(
        default=0,
        title='Forward skip',
        description='Number of following rows to skip without executing them.',
    )

    @model_validator(mode='after')
    def check_unexpected_stops(self) -> Self:
        """Check that unexpected failures end the test.

        Returns:
            Self.

        Raises:
            ValueError: If an unexpected failure is marked continuable.
        """
        if self.cause is None or self.cause.is_domain or not self.continuable:
            return self

        raise ValueError('Unexpected failures can not be continuable')

    @classmethod
    def success(cls) -> 'Decorator':
        """Successful, continuable outcome."""
        return cls()

    @classmethod
    def stop(cls) -> 'Decorator':
        """Successful outcome that ends the test."""
        return cls(continuable=False)

    @classmethod
    def skipping(cls, count: int) -> 'Decorator':
        """Successful outcome skipping the next `count` rows."""
        return cls(skip=count)

    @classmethod
    def failed(cls, kind: CauseKind, message: str = '', *,
               continuable: bool = False,
               error: BaseException | None = None) -> 'Decorator':
        """Failed outcome of the given kind.

        Args:
            kind: Failure kind.
            message: Human-readable failure description.
            continuable: Whether the test may proceed after the failure.
                Unexpected failures are never continuable.
            error: Optional originating exception.

        Returns:
            A decorator carrying the failure cause.
        """
        return cls(
            cause=Cause(kind=kind, message=message, error=error),
            continuable=continuable and kind != 'unexpected',
        )

    @classmethod
    def unexpected(cls, error: BaseException) -> 'Decorator':
        """Non-continuable outcome for a fault raised by a step."""
        return cls.failed('unexpected', f'{error!r}', error=error)

    @property
    def severity(self) -> int:
        """Severity rank of the cause; zero when successful."""
        return SEVERITY[self.cause.kind if self.cause else None]

    def combine(self, other: 'Decorator') -> 'Decorator':
        """Compose two outcomes.

        The interpreter itself never composes outcomes; this is meant
        for provider runners folding several partial outcomes into the
        single decorator they return.

        The most severe cause is kept (the receiver wins ties), the
        continuation flags are combined with AND, and the larger
        forward skip is kept.

        Args:
            other: Outcome to combine with.

        Returns:
            The composed decorator.
        """
        cause = other.cause if other.severity > self.severity else self.cause

        return Decorator(
            cause=cause,
            continuable=self.continuable and other.continuable,
            skip=max(self.skip, other.skip),
        )
