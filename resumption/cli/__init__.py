"""Resumption CLI — command line interface."""

import logging

import click
from resumption import __version__
from .shared import console

_log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="resumption")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, debug):
    """Resumption — encode, decode and resume conversation cookies"""
    from resumption.config import load_settings
    from resumption.trust import load_default_trust_list

    if debug:
        logging.basicConfig(level=logging.DEBUG, format=_log_format)

    settings = load_settings()
    load_default_trust_list(settings)
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        _show_help()


def _show_help():
    """Show all available commands grouped by category."""
    console.print(f"[bold]Resumption v{__version__}[/bold] — conversation resumption cookies\n")

    groups = {
        "Cookies": [
            ("encode", "Build a cookie from identity fields and print its token"),
            ("from-activity", "Build a cookie from an activity JSON file"),
            ("decode", "Show the fields of a cookie token"),
        ],
        "Resume": [
            ("message", "Print the message that resumes a cookie's conversation"),
            ("trust", "Check whether a service URL is trusted"),
        ],
    }

    for category, commands in groups.items():
        console.print(f"  [bold cyan]{category}[/bold cyan]")
        for name, desc in commands:
            console.print(f"    [bold]resumption {name:14s}[/bold] {desc}")
        console.print()

    console.print("[dim]Run 'resumption <command> --help' for details on a specific command.[/dim]")


# Import all command modules (registers commands onto cli group)
from . import cmd_encode  # noqa: E402, F401
from . import cmd_decode  # noqa: E402, F401
from . import cmd_trust  # noqa: E402, F401


@cli.command(name="help", hidden=True)
def help_cmd():
    """Show all available commands."""
    _show_help()


def main():
    """CLI entry point."""
    import sys
    try:
        rc = cli(standalone_mode=False)
    except click.UsageError as e:
        if e.ctx:
            click.echo(e.ctx.command.get_usage(e.ctx), err=True)
        click.echo("Try 'resumption help' for help.\n", err=True)
        click.echo(f"Error: {e.format_message()}", err=True)
        sys.exit(2)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.exceptions.Exit as e:
        sys.exit(e.code)
    except click.Abort:
        click.echo("Aborted!", err=True)
        sys.exit(1)
    # Without standalone mode click returns the exit code instead of raising
    if isinstance(rc, int):
        sys.exit(rc)
