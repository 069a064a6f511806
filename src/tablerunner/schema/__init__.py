"""Base schema of test tables, steps and outcomes.

Defines immutable Pydantic models describing command rows, executable
steps, and the decorators produced by executing them.
"""

from .decorators import Cause, CauseKind, Decorator
from .rows import EXTRACT_ROWS_SCRIPT, CommandRow, extract_rows, parse_rows
from .steps import BaseStep, CommandKind, CommandRunner, ResolvedStep

__all__ = (
    'EXTRACT_ROWS_SCRIPT',
    'BaseStep',
    'Cause',
    'CauseKind',
    'CommandKind',
    'CommandRow',
    'CommandRunner',
    'Decorator',
    'ResolvedStep',
    'extract_rows',
    'parse_rows',
)
