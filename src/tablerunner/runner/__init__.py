"""Execution layer for table-driven test pages.

This package defines the command interpreter and the result model
through which per-step outcomes reach a results sink.
"""

from .case import Phase, TestCase
from .results import ResultsSink, StepResult, StepStatus, TestRecord, TestResults

__all__ = (
    'Phase',
    'ResultsSink',
    'StepResult',
    'StepStatus',
    'TestCase',
    'TestRecord',
    'TestResults',
)
