"""
autogitpull - UI Components
Standardized headers and summary panels
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

BRAND = "autogitpull"

# Color scheme
BRAND_COLOR = "cyan"
SUCCESS_COLOR = "green"
WARNING_COLOR = "yellow"
ERROR_COLOR = "red"


def show_header(
    title: str,
    subtitle: str = None,
    details: dict = None,
    console: Console = None,
):
    """
    Display a standardized command header.

    Args:
        title: Main title (e.g., "Deploy")
        subtitle: Optional subtitle line
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)
    """
    if console is None:
        console = Console()

    console.print(f" [bold color(214)]{BRAND}[/bold color(214)] [dim]›[/dim] [bold white]{title}[/bold white]")

    if subtitle:
        console.print(f" [bold color(214)]{BRAND}[/bold color(214)] [dim]›[/dim] [dim]{subtitle}[/dim]")

    if details:
        for key, value in details.items():
            console.print(
                f" [bold color(214)]{BRAND}[/bold color(214)] [dim]›[/dim] {key}: [cyan]{escape(str(value))}[/cyan]"
            )

    console.print()


def show_output_panel(output: str, title: str, success: bool, console: Console = None):
    """Show captured script output in a bordered panel."""
    if console is None:
        console = Console()

    color = SUCCESS_COLOR if success else ERROR_COLOR
    console.print(
        Panel(
            escape(output) if output else "[dim](no output)[/dim]",
            title=title,
            border_style=color,
            expand=False,
        )
    )
