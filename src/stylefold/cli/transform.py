"""CLI command: stylefold transform -- precompile the style sheets of a module."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from stylefold.config import TransformConfig
from stylefold.errors import ConfigurationError
from stylefold.parser import ParseError
from stylefold.transform import StyleSheetPrecompiler


@click.command()
@click.argument("jsfile", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None,
              help="Write the transformed module here instead of stdout.")
@click.option("--in-place", is_flag=True, help="Overwrite JSFILE with the result.")
@click.option("-i", "--identifier", "identifiers", multiple=True,
              help="Call name to precompile (repeatable; default: createStyleSheet).")
@click.option("--prefix", default="", help="Prefix for generated class names.")
@click.option("--plugin", "plugins", multiple=True,
              help="Built-in compiler plugin to run (repeatable, in order).")
@click.option("--check", is_flag=True,
              help="Write nothing; exit 1 if the module would change.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def transform(
    jsfile: str,
    output: str | None,
    in_place: bool,
    identifiers: tuple[str, ...],
    prefix: str,
    plugins: tuple[str, ...],
    check: bool,
    verbose: bool,
) -> None:
    """Precompile the static parts of style-sheet calls in a JavaScript file.

    The transformed module goes to stdout (or --output / --in-place);
    diagnostics about skipped calls go to stderr.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    if output and in_place:
        raise click.UsageError("--output and --in-place are mutually exclusive")

    try:
        config = TransformConfig.from_options(
            identifiers=identifiers, class_prefix=prefix, plugin_names=plugins
        )
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc

    js_path = Path(jsfile)
    try:
        source = js_path.read_text(encoding="utf-8")
        result = StyleSheetPrecompiler(config).transform(source, filename=js_path.name)
    except ParseError as exc:
        click.echo(f"Parse error: {exc}", err=True)
        sys.exit(1)

    for diag in result.diagnostics:
        click.echo(f"{js_path.name}: {diag}", err=True)

    if check:
        if result.changed:
            click.echo(f"{js_path.name}: {result.rewritten} call(s) would be rewritten", err=True)
            sys.exit(1)
        sys.exit(0)

    if in_place:
        js_path.write_text(result.code, encoding="utf-8")
    elif output:
        Path(output).write_text(result.code, encoding="utf-8")
    else:
        click.echo(result.code, nl=False)

    if any(d.is_error for d in result.diagnostics):
        sys.exit(1)
