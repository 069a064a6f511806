"""Base Pydantic models and runtime settings.

This module defines the foundational model classes used by rows, steps,
decorators, results and command definitions. It enforces immutability
and strict validation so that resolved test tables are deterministic
and safe to execute.
"""

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all runner elements.

    Design principles enforced by this model:
        - Immutability: elements cannot be modified after creation.
          Outcomes recorded for a run can not be rewritten afterwards.
        - Strict validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos in definitions.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class DescribedMixin(SchemaModel):
    """Mixin providing element self-documentation.

    The fields defined in this model do not affect execution semantics
    and are used purely for descriptive purposes.
    """

    title: str | None = Field(
        default=None,
        title='Title',
        description='Short human-readable title of the element.',
    )

    description: str | None = Field(
        default=None,
        title='Description',
        description='Detailed human-readable description of the element.',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored,
          so that unrelated environment variables do not break resolution.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )


class RunnerSettings(SettingsModel):
    """Runner configuration resolved from `TABLERUN_*` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix='TABLERUN_',
        frozen=True,
        extra='ignore',
    )

    strict: bool = Field(
        default=True,
        title='Strict plugin loading',
        description=(
            'Raise on step provider loading failures instead of '
            'emitting warnings. Duplicate command names are always fatal.'
        ),
    )

    load_plugins: bool = Field(
        default=True,
        title='Load plugins',
        description='Discover step providers from installed entry points.',
    )

    page_load_timeout: NonNegativeInt = Field(
        default=30000,
        title='Page load timeout',
        description=(
            'Timeout in milliseconds passed to the command client '
            'by commands waiting for a page load.'
        ),
    )

    max_steps: PositiveInt | None = Field(
        default=10000,
        title='Step limit',
        description=(
            'Maximum number of steps executed by a single test run. '
            'Exceeding it records an unexpected failure and ends the run; '
            '`None` disables the limit.'
        ),
    )
