"""Core command registry.

This package provides the step factory registry and the discovery of
third-party step providers through entry points.

The primary public entry point is `StepRegistry`, which registers the
built-in command set and all discovered providers, rejects duplicate
command names, and resolves table rows into executable steps.
"""

from .loader import ENTRYPOINT_GROUP
from .registry import StepRegistry

__all__ = (
    'ENTRYPOINT_GROUP',
    'StepRegistry',
)
