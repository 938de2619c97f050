"""Decode commands: inspect tokens and rebuild resume messages."""

import click
from rich.table import Table

from . import cli
from .shared import console, _echo_json, _load_cookie, _read_token_arg
from resumption.conversation import resume_message
from resumption.errors import ResumptionError


@cli.command()
@click.argument("token")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
def decode(token, as_json):
    """Show the fields of a cookie token ('-' reads it from stdin)."""
    cookie = _load_cookie(_read_token_arg(token))

    if as_json:
        _echo_json(cookie.to_dict())
        return

    table = Table(title="Resumption Cookie", show_header=False, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")

    address = cookie.address
    table.add_row("Bot", address.bot_id)
    table.add_row("Channel", address.channel_id)
    table.add_row("User", address.user_id)
    table.add_row("Conversation", address.conversation_id)
    table.add_row("Service URL", address.service_url)
    table.add_row("User name", cookie.user_name or "[dim]-[/dim]")
    table.add_row("Locale", cookie.locale or "[dim]-[/dim]")
    table.add_row("Group", "yes" if cookie.is_group else "no")
    table.add_row(
        "Trusted",
        "[green]yes[/green]" if cookie.is_trusted_service_url else "[yellow]no[/yellow]",
    )
    console.print(table)


@cli.command()
@click.argument("token")
def message(token):
    """Print the message that resumes a cookie's conversation."""
    cookie = _load_cookie(_read_token_arg(token))
    try:
        msg = resume_message(cookie)
    except ResumptionError as e:
        raise click.ClickException(str(e)) from e
    _echo_json(msg.to_dict())
