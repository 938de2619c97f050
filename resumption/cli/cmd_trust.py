"""Trust command."""

import click

from . import cli
from .shared import console
from resumption.trust import is_trusted_service_url


@cli.command()
@click.argument("url")
def trust(url):
    """Check whether a service URL is trusted."""
    if is_trusted_service_url(url):
        console.print(f"[green]Trusted:[/green] {url}")
    else:
        console.print(f"[yellow]Not trusted:[/yellow] {url}")
        raise click.exceptions.Exit(1)
