from __future__ import annotations

from pathlib import Path

import click

from quill.cli.context import CLIContext, ExitCode
from quill.cli.helpers import (
    Assignment,
    apply_assignments,
    find_unbound_variables,
    load_variables,
    parse_assignments,
    read_template,
)
from quill.cli.output import format_error, format_parse_error, format_warning
from quill.exceptions import ParseError, TemplateLoadError
from quill.logging import get_logger
from quill.template import parse


@click.command()
@click.argument("template_file", type=click.Path(dir_okay=False, allow_dash=True))
@click.option(
    "--vars",
    "vars_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML or JSON file with the template variables.",
)
@click.option(
    "-s",
    "--set",
    "assignments",
    multiple=True,
    metavar="NAME=VALUE",
    callback=parse_assignments,
    help="Set a variable (repeatable). Dotted names create nested values.",
)
@click.pass_context
def render(
    ctx: click.Context,
    template_file: str,
    vars_file: Path | None,
    assignments: list[Assignment],
) -> None:
    """Render a template to stdout.

    TEMPLATE_FILE may be '-' to read the template from stdin.

    Examples:
        quill render greeting.qt --set name=Ada
        quill render report.qt --vars data.yaml
    """
    logger = get_logger(__name__)
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]

    try:
        text = read_template(template_file)
        variables = load_variables(vars_file)
    except TemplateLoadError as e:
        click.echo(format_error(e.message), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except KeyboardInterrupt as e:
        click.echo("Interrupted.", err=True)
        raise SystemExit(ExitCode.INTERRUPTED) from e

    apply_assignments(variables, assignments)

    try:
        tree = parse(text)
    except ParseError as e:
        logger.info("template_invalid", template=template_file, offset=e.offset)
        click.echo(format_parse_error(e, cli_ctx.context_size), err=True)
        raise SystemExit(ExitCode.FAILURE) from e

    output = tree.render(variables)
    click.echo(output + cli_ctx.config.render.newline, nl=False)

    if cli_ctx.config.render.strict_variables:
        missing = find_unbound_variables(tree, variables)
        for name in missing:
            click.echo(format_warning(f"Variable ${name} is not defined"), err=True)
        if missing:
            raise SystemExit(ExitCode.PARTIAL)
