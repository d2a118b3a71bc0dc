#!/usr/bin/env python3
"""autogitpull CLI - Main entry point"""

import functools
import os
import sys

import rich_click as click
from rich.console import Console

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.MAX_WIDTH = 100
click.rich_click.STYLE_COMMAND = "bold cyan"
click.rich_click.STYLE_OPTION = "bold magenta"
click.rich_click.STYLE_SWITCH = "bold green"
click.rich_click.STYLE_ARGUMENT = "bold yellow"
click.rich_click.STYLE_OPTIONS_PANEL_BORDER = "cyan"
click.rich_click.STYLE_COMMANDS_PANEL_BORDER = "cyan"

from autogitpull.commands import check_ip, deploy, serve  # noqa: E402

console = Console()


def handle_cli_errors(func):
    """Decorator to handle CLI errors gracefully."""
    from click.exceptions import ClickException

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ClickException as e:
            e.show()
            sys.exit(e.exit_code)
        except KeyboardInterrupt:
            console.print("\n\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            sys.exit(130)
        except Exception as e:
            console.print(f"\n[bold red]✗ Unexpected error:[/bold red] {e}\n")

            if os.environ.get("DEBUG") or os.environ.get("VERBOSE"):
                import traceback

                console.print("[dim]Traceback:[/dim]")
                traceback.print_exc()
            sys.exit(1)

    return wrapper


@click.group()
@click.version_option(version="1.0.0")
def cli() -> None:
    """
    autogitpull - pull new commits onto a server when a push arrives.

    \b
    Quick Start:
      autogitpull deploy               # Pull now (trusted, local)
      autogitpull serve                # Listen for push webhooks
      autogitpull check-ip 192.30.252.1  # Test an address against the allow-list

    Configuration is read from --config, $AUTOGITPULL_CONFIG or ./autogitpull.yml.
    """


cli.add_command(deploy.deploy)
cli.add_command(serve.serve)
cli.add_command(check_ip.check_ip)


@handle_cli_errors
def main():
    """Main entry point with error handling."""
    cli()


if __name__ == "__main__":
    main()
