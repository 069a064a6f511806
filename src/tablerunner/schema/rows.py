"""Command rows and in-page row extraction.

A command row is the `command | locator | value` triple read from a
table row of a test page. Rows are scraped in document order by a
script evaluated inside the page; rows with fewer than three cells are
dropped by the script itself.
"""

import logging
from typing import TYPE_CHECKING, Any

from pydantic import Field, TypeAdapter, ValidationError

from tablerunner.errors import ErrorContext, RowExtractionError
from tablerunner.models import SchemaModel

if TYPE_CHECKING:
    from tablerunner.session import Driver

log = logging.getLogger(__name__)

#: Script returning the first three cells of every table row that has
#: at least three cells, across all tables, in document order.
EXTRACT_ROWS_SCRIPT = '''\
var toReturn = [];
var tables = document.getElementsByTagName('table');
for (var i = 0; i < tables.length; i++) {
  for (var rowCount = 0; rowCount < tables[i].rows.length; rowCount++) {
    if (tables[i].rows[rowCount].cells.length < 3) {
      continue;
    }
    var cells = tables[i].rows[rowCount].cells;
    toReturn.push([cells[0].textContent, cells[1].textContent, cells[2].textContent]);
  }
}
return toReturn;'''


class CommandRow(SchemaModel):
    """A single `command | locator | value` row of a test table."""

    command: str = Field(
        title='Command',
        description='Text of the first cell; the name of the command to run.',
    )

    locator: str = Field(
        default='',
        title='Locator',
        description='Text of the second cell; usually an element locator.',
    )

    value: str = Field(
        default='',
        title='Value',
        description='Text of the third cell; an input value or expected pattern.',
    )

    def __str__(self) -> str:
        """Render the row the way it is logged and reported."""
        return f'|{self.command} | {self.locator} | {self.value} |'


_RAW_ROWS = TypeAdapter(list[tuple[str, str, str]])


def parse_rows(raw: Any, location: str | None = None) -> tuple[CommandRow, ...]:  # noqa: ANN401
    """Validate the extraction script output into command rows.

    Args:
        raw: Value returned by the in-page extraction script.
        location: Page location for error reporting.

    Returns:
        Command rows in document order.

    Raises:
        RowExtractionError: If the output is not a list of string triples.
    """
    try:
        cells = _RAW_ROWS.validate_python(raw)

    except ValidationError as base:
        raise RowExtractionError(
            'Malformed rows returned by the extraction script',
            context=ErrorContext(location=location, error=base),
        ) from base

    return tuple(
        CommandRow(command=command, locator=locator, value=value)
        for command, locator, value in cells
    )


def extract_rows(driver: 'Driver', location: str | None = None) -> tuple[CommandRow, ...]:
    """Scrape command rows from the page currently loaded in the driver.

    Args:
        driver: Browser driver positioned on the test page.
        location: Page location for error reporting.

    Returns:
        Command rows in document order.

    Raises:
        RowExtractionError: If the script output is malformed.
    """
    rows = parse_rows(driver.execute_script(EXTRACT_ROWS_SCRIPT), location)
    log.debug('Extracted %d rows from %s', len(rows), location)

    return rows
