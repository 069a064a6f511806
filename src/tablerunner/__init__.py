"""Interpreter for table-driven browser test pages.

The `tablerunner` package executes legacy "Selenese" test pages: HTML
documents whose tables hold three-column `command | locator | value`
rows. Each row is resolved to an executable step through a registry of
named commands and executed in document order against a live browser
session.

Key features:
- eager resolution of all rows before any step runs;
- tri-state outcome classification (successful, error, failure);
- assertion and verification commands with distinct continuation rules;
- extensible command set through entry point providers.
"""
