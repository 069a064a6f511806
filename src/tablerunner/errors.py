"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report plugin loading issues, registry misconfiguration, row
resolution failures, and page extraction errors in a structured way.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from yaml import dump

if TYPE_CHECKING:
    from importlib.metadata import EntryPoint

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_SEPARATOR = f' ---{linesep}'
SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_LOCATION = '<unknown page>'
FORMAT_INDENT = 4

SCALARS = (str, bytes, int, float, bool)
MAPPINGS = (dict,)
SEQUENCES = (list, tuple, set)


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Location (URL) of the test page.
    location: str | None

    #: Zero-based index of the table row.
    row_num: int | None

    #: Underlying exception that triggered formatting.
    error: Exception | None

    #: Test state variables available at the moment of failure.
    state: dict[str, Any] | None
    #: Runtime element associated with the error.
    element: Any


class ErrorFormatter:
    """Utility class for formatting runner errors.

    This formatter produces human-readable error messages with optional
    page location and a YAML snippet of the offending row.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format page and row location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including the page location
            and the row number when available.
        """
        indent = cls._ensure_indent(indent)

        location = context.get('location')
        if not location:
            location = FORMAT_LOCATION

        message = f'{indent}in "{location}"'
        if (row_num := context.get('row_num')) is not None:
            row_num += 1
            message += f', row {row_num}'
        message += linesep

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a formatted snippet illustrating the error context.

        Args:
            context: Error context containing the element and state.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no snippet data is available.
        """
        indent = cls._ensure_indent(indent)

        if element := context.get('element'):
            return cls._make_snippet(element, context, indent)

        return ''

    @classmethod
    def _make_snippet(cls, element: Any,  # noqa: ANN401
                      context: ErrorContext, indent: str) -> str:
        """Build a YAML-based snippet for an element.

        Args:
            element: Element associated with the error.
            context: Error context containing optional state values.
            indent: String indentation prefix.

        Returns:
            A formatted snippet string including state and element data.
        """
        snippet = f'{indent}{SNIPPET_ELLIPSIS}'

        if values := context.get('state'):
            snippet += cls._make_yaml({'state': {**values}}, indent)
            snippet += linesep
            snippet += f'{indent}{SNIPPET_SEPARATOR}'

        snippet += cls._make_yaml(element, indent)
        snippet += linesep

        return snippet

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively sanitize values for safe YAML serialization.

        Non-scalar and non-container objects are replaced with
        a placeholder.

        Args:
            value: Arbitrary value to sanitize.

        Returns:
            A YAML-safe representation of the value.
        """
        if value is None or isinstance(value, SCALARS):
            return value

        if isinstance(value, MAPPINGS):
            return {
                key: cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [
                cls._filter_unsafe(item)
                for item in value
            ]

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a value to a YAML-formatted string.

        Args:
            value: Arbitrary value to serialize.
            indent: Optional indentation prefix.

        Returns:
            A YAML-formatted string representation of the value.
        """
        data = dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input."""
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class PluginWarning(UserWarning):
    """Warning emitted for non-fatal plugin-related issues.

    This warning is used when a step provider cannot be loaded, but
    the error does not prevent further execution (relaxed mode).
    """


class RunnerError(Exception, ErrorFormatter):
    """Base exception for all tablerunner errors.

    All custom exceptions raised by the library inherit from this class
    to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional runtime values.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)


class PluginError(RunnerError):
    """Error raised for fatal plugin-related failures.

    This exception is raised when a provider entry point is invalid,
    misconfigured, or fails to load in strict mode.
    """

    def __init__(self, message: str, *,
                 entrypoint: 'EntryPoint | None' = None) -> None:
        """Initialize a plugin error.

        Args:
            message: Human-readable error description.
            entrypoint: Optional entry point associated with the error.
        """
        self.entrypoint = entrypoint

        super().__init__(message)


class DuplicateCommandError(PluginError):
    """Error raised when two providers register the same command name.

    Raised regardless of strict mode: a command name is bound to exactly
    one step factory for the whole process.
    """

    def __init__(self, command: str, *,
                 provider: str,
                 existing: str,
                 entrypoint: 'EntryPoint | None' = None) -> None:
        """Initialize a duplicate command error.

        Args:
            command: Conflicting command name.
            provider: Name of the provider registering the command again.
            existing: Name of the provider that registered it first.
            entrypoint: Optional entry point associated with the error.
        """
        self.command = command
        self.provider = provider
        self.existing = existing

        super().__init__(
            f'Command {command!r} from {provider!r} is already registered by {existing!r}',
            entrypoint=entrypoint,
        )


class RegistryFrozenError(RunnerError):
    """Error raised when registering commands into a frozen registry."""


class UnknownCommandError(RunnerError):
    """Error raised when a table row names an unregistered command.

    The error aborts the whole run before any step is executed.
    """

    def __init__(self, command: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an unknown command error.

        Args:
            command: Offending command name.
            context: Error context with the page location and row.
        """
        self.command = command

        super().__init__(f'Unknown command: {command}', context=context)


class RowExtractionError(RunnerError):
    """Error raised when the in-page script returns malformed rows."""


class UnknownLabelError(RunnerError):
    """Error raised when a control-flow step jumps to a missing label."""


class StepLimitError(RunnerError):
    """Error raised when a run executes more steps than allowed.

    Unconditional backward jumps would otherwise loop forever.
    """
