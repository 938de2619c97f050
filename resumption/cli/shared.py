"""Shared utilities for Resumption CLI commands."""

import json
import sys

import click
from rich.console import Console

from resumption.cookie import ResumptionCookie
from resumption.errors import ResumptionError

console = Console()


def _load_cookie(token: str) -> ResumptionCookie:
    """Decode a token, turning decode failures into a click error."""
    try:
        return ResumptionCookie.deserialize(token)
    except ResumptionError as e:
        raise click.ClickException(str(e)) from e


def _echo_json(data: dict) -> None:
    """Print JSON on stdout without rich markup processing."""
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _read_token_arg(token: str) -> str:
    """'-' reads the token from stdin."""
    if token == "-":
        return sys.stdin.read().strip()
    return token
