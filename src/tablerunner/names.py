"""Command and variable name types.

This module defines the name patterns and strongly-typed aliases used
by the step registry to validate command names and by the test state to
validate stored variable names.
"""

from re import ASCII
from re import compile as regexp
from typing import Annotated

from pydantic import Field

#: Base pattern for all identifiers.
#: Identifiers must start with a letter and may contain letters, digits, or underscores
_NAME_PATTERN = r'[a-zA-Z][\w]*'

#: Compiled pattern for variable identifiers
VARIABLE_PATTERN = regexp(
    rf'^(?P<name>{_NAME_PATTERN})$',
    flags=ASCII,
)

#: Compiled pattern for variable references inside locators and values,
#: for example `${userName}`.
REFERENCE_PATTERN = regexp(
    rf'\$\{{(?P<name>{_NAME_PATTERN})\}}',
    flags=ASCII,
)


CommandName = Annotated[
    str, Field(
        pattern=rf'^{_NAME_PATTERN}$',
        title='Command name',
        description=(
            'Name of the command written in the first column of a '
            'test table row. Command names are case-sensitive and '
            'limited to ASCII letters, digits, and underscores.'
        ),
        examples=[
            'open',
            'clickAndWait',
            'assertTitle',
        ],
    ),
]

Variable = Annotated[
    str, Field(
        pattern=rf'^{_NAME_PATTERN}$',
        title='Variable identifier',
        description=(
            'Name of a variable stored in the test state. '
            'Variable identifiers must start with a letter and may contain '
            'letters, digits, or underscores. '
            'Names are restricted to ASCII characters.'
        ),
        examples=[
            'userId',
            'page_title',
        ],
    ),
]
