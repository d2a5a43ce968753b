"""CLI command: stylefold inspect -- show how each style-sheet call splits."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from stylefold.config import TransformConfig
from stylefold.errors import ConfigurationError
from stylefold.parser import ParseError
from stylefold.transform import StyleSheetPrecompiler


@click.command()
@click.argument("jsfile", type=click.Path(exists=True, dir_okay=False))
@click.option("-i", "--identifier", "identifiers", multiple=True,
              help="Call name to look for (repeatable; default: createStyleSheet).")
def inspect(jsfile: str, identifiers: tuple[str, ...]) -> None:
    """Parse a JavaScript file and display every recognized call.

    Shows each selector's verdict (static, mixed, dynamic) with its static
    and dynamic properties.  Nothing is compiled or written.
    """
    try:
        config = TransformConfig.from_options(identifiers=identifiers)
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc

    js_path = Path(jsfile)
    try:
        source = js_path.read_text(encoding="utf-8")
        reports = StyleSheetPrecompiler(config).analyze(source, filename=js_path.name)
    except ParseError as exc:
        click.echo(f"Parse error: {exc}", err=True)
        sys.exit(1)

    click.echo(f"Module: {js_path.name}")
    click.echo(f"Calls:  {len(reports)}")

    for report in reports:
        click.echo()
        click.echo(f"{report.call.callee_name}() at line {report.line}, column {report.column}")
        if report.skipped:
            click.echo(f"  skipped: {report.skipped}")
            continue
        for selector in report.classification.selectors:
            name = selector.name if selector.name is not None else "<computed>"
            parts = [f"  {name}", selector.verdict.value]
            if selector.static_props:
                parts.append("static=" + ",".join(selector.static_props))
            if selector.dynamic_entries:
                dynamic = [
                    source[e.key.span.start:e.key.span.end] if e.key is not None else "..."
                    for e in selector.dynamic_entries
                ]
                parts.append("dynamic=" + ",".join(dynamic))
            if selector.verbatim:
                parts.append("(kept as written)")
            click.echo("  ".join(parts))
