from __future__ import annotations

import click

from quill.cli.context import CLIContext, ExitCode
from quill.cli.helpers import read_template
from quill.cli.output import format_error, format_json, format_parse_error
from quill.exceptions import ParseError, TemplateLoadError
from quill.template import parse


@click.command()
@click.argument("template_file", type=click.Path(dir_okay=False, allow_dash=True))
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
@click.pass_context
def check(ctx: click.Context, template_file: str, fmt: str) -> None:
    """Check that a template parses, without rendering it.

    Prints OK for a valid template, otherwise the parse diagnostic.

    Examples:
        quill check greeting.qt
        quill check greeting.qt --format json
    """
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]

    try:
        text = read_template(template_file)
    except TemplateLoadError as e:
        click.echo(format_error(e.message), err=True)
        raise SystemExit(ExitCode.FAILURE) from e

    try:
        parse(text)
    except ParseError as e:
        if fmt == "json":
            info = e.to_info()
            click.echo(
                format_json(
                    {
                        "valid": False,
                        "offset": info.offset,
                        "line": info.line,
                        "message": info.message,
                    }
                )
            )
        else:
            click.echo(format_parse_error(e, cli_ctx.context_size), err=True)
        raise SystemExit(ExitCode.FAILURE) from e

    if fmt == "json":
        click.echo(format_json({"valid": True}))
    else:
        click.echo("OK")
