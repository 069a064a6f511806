"""Mutable test state threaded through a single run.

The state holds string variables stored by steps and the control-flow
bookkeeping used by jump-capable steps. A fresh state is created for
every run and is owned exclusively by it.
"""

from tablerunner.errors import UnknownLabelError
from tablerunner.names import REFERENCE_PATTERN, VARIABLE_PATTERN


class TestState(dict[str, str]):
    """Execution state of a single test table run.

    The state acts as a mapping of variable names to string values.
    Besides variables it tracks labels declared by the table and a
    pending jump requested by a control-flow step. The interpreter
    consumes the pending jump after the step that requested it.
    """

    __test__ = False

    def __init__(self, *args: 'dict[str, str]', **kwargs: str) -> None:
        """Initialize an empty state or a state with preset variables."""
        super().__init__(*args, **kwargs)

        self.labels: dict[str, int] = {}
        self._jump: int | None = None

    def store(self, name: str, value: object) -> None:
        """Bind a variable.

        Args:
            name: Variable identifier.
            value: Value to store; converted to its string form.

        Raises:
            ValueError: If the name is not a valid identifier.
        """
        if not VARIABLE_PATTERN.match(name):
            raise ValueError(f'Invalid variable name {name!r}')

        self[name] = f'{value}'

    def expand(self, text: str) -> str:
        """Substitute `${name}` references with stored values.

        References to unknown variables are left untouched.

        Args:
            text: Locator or value text from a table row.

        Returns:
            Text with all known references substituted.
        """
        if '${' not in text:
            return text

        return REFERENCE_PATTERN.sub(
            lambda found: self.get(found['name'], found[0]),
            text,
        )

    def add_label(self, name: str, position: int) -> None:
        """Declare a jump target at a row position.

        The first declaration of a label wins.

        Args:
            name: Label name.
            position: Zero-based index of the declaring row.
        """
        self.labels.setdefault(name, position)

    def jump_to(self, name: str) -> None:
        """Request execution to continue at a label.

        Args:
            name: Label name declared by the table.

        Raises:
            UnknownLabelError: If the label is not declared.
        """
        if name not in self.labels:
            raise UnknownLabelError(f'Unknown label {name!r}')

        self._jump = self.labels[name]

    def pop_jump(self) -> int | None:
        """Return and clear the pending jump target, if any."""
        position, self._jump = self._jump, None

        return position
