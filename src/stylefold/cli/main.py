"""stylefold CLI entry point: Click group with subcommands."""

import click

from stylefold import __version__


@click.group()
@click.version_option(version=__version__, prog_name="stylefold")
def cli() -> None:
    """stylefold - precompile static JSS style sheets in JavaScript modules."""


# Import and register subcommands
from stylefold.cli.transform import transform  # noqa: E402
from stylefold.cli.inspect import inspect  # noqa: E402

cli.add_command(transform)
cli.add_command(inspect)
