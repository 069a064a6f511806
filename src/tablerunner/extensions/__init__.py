"""Declarative step provider definition.

A provider groups the commands contributed by one source, either the
built-in command set or a third-party package exposing a provider
through the `tablerunner_steps` entry point group.

The provider model is purely declarative. It contains no execution
logic and is consumed by the step registry, which builds a step model
for each command and rejects duplicate command names.
"""

from pydantic import Field

from tablerunner.models import SchemaModel
from tablerunner.names import Variable  # noqa: TC001

from .commands import Command

__all__ = (
    'Command',
    'Provider',
)


class Provider(SchemaModel):
    """Declarative container of table commands."""

    name: Variable = Field(
        title='Provider name',
        description=(
            'Name of the provider. Used for identification and in '
            'duplicate command diagnostics.'
        ),
    )

    version: int = Field(
        default=1,
        title='Provider contract version',
        description=(
            'Version of the provider contract. '
            'This is not a semantic version of the provider implementation.'
        ),
    )

    commands: list[Command] = Field(
        default_factory=list,
        title='Commands',
        description='Command definitions provided by this source.',
    )
