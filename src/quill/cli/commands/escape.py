from __future__ import annotations

import click

from quill.template import escape as escape_text


@click.command()
@click.argument("text")
def escape(text: str) -> None:
    """Escape TEXT so that a template renders it literally.

    Examples:
        quill escape 'Price: $5'
    """
    click.echo(escape_text(text))
