"""Encode commands: build cookies and print their tokens."""

import json

import click

from . import cli
from resumption.cookie import ResumptionCookie
from resumption.errors import ResumptionError
from resumption.models import Activity


@cli.command()
@click.option("--user-id", required=True, help="User id")
@click.option("--bot-id", required=True, help="Bot id")
@click.option("--conversation-id", required=True, help="Conversation id")
@click.option("--channel-id", required=True, help="Channel id, e.g. 'telegram'")
@click.option("--service-url", required=True, help="Channel connector service URL")
@click.option("--locale", default=None, help="Message locale (default from settings)")
@click.option("--user-name", default=None, help="User display name")
@click.option("--group", "is_group", is_flag=True, help="Conversation is a group")
@click.pass_obj
def encode(settings, user_id, bot_id, conversation_id, channel_id, service_url, locale, user_name, is_group):
    """Build a cookie from identity fields and print its token."""
    cookie = ResumptionCookie.from_identity(
        user_id=user_id,
        bot_id=bot_id,
        conversation_id=conversation_id,
        channel_id=channel_id,
        service_url=service_url,
        locale=locale or settings.default_locale,
    )
    cookie.user_name = user_name
    cookie.is_group = is_group
    click.echo(cookie.serialize(compress_level=settings.compress_level))


@cli.command(name="from-activity")
@click.argument("source", type=click.File("r"))
@click.pass_obj
def from_activity(settings, source):
    """Build a cookie from an activity JSON file ('-' for stdin)."""
    try:
        data = json.load(source)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Activity is not valid JSON: {e}") from e
    try:
        cookie = ResumptionCookie.from_message(Activity.from_dict(data))
    except ResumptionError as e:
        raise click.ClickException(str(e)) from e
    click.echo(cookie.serialize(compress_level=settings.compress_level))
