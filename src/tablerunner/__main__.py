"""CLI utilities for inspecting the tablerunner command set.

The commands report what a registry built in the current environment
would resolve: the built-in commands plus those contributed by
installed step providers.
"""

from click import echo, group, option

from tablerunner.core import StepRegistry
from tablerunner.schema import EXTRACT_ROWS_SCRIPT


@group(help='Command-line utilities for tablerunner.')
def cli() -> None:
    """Root CLI group for tablerunner tools."""
    return None


@cli.command(
    name='commands',
    help='List registered table commands with their kind and provider.',
)
@option(
    '--relaxed',
    is_flag=True,
    default=False,
    help='Warn instead of failing on step provider loading errors.',
)
@option(
    '--no-plugins',
    is_flag=True,
    default=False,
    help='List only the built-in commands.',
)
def list_commands(relaxed: bool, no_plugins: bool) -> None:
    """Print the registered commands, one per line."""
    registry = StepRegistry(strict=not relaxed, plugins=not no_plugins)

    for name, model in sorted(registry.commands.items()):
        echo(f'{name}\t{model.kind}\t{registry.sources[name]}')


@cli.command(
    name='script',
    help='Print the in-page script extracting command rows.',
)
def print_script() -> None:
    """Print the row extraction script."""
    echo(EXTRACT_ROWS_SCRIPT)


if __name__ == '__main__':
    cli()
