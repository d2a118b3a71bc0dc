"""
Base Command Class

Abstract base for all autogitpull CLI commands.
Provides common functionality and structure.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from rich.console import Console

from autogitpull.core.config_loader import AppConfig, load_config
from autogitpull.exceptions import (
    AutoGitPullError,
    ConfigurationError,
    HookError,
    ScriptExecutionError,
    UnauthorizedCaller,
)
from autogitpull.ui_components import show_header


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Configuration loading
    - Header display
    - Error handling
    - JSON output support
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        verbose: bool = False,
        json_output: bool = False,
    ):
        self.config_path = config_path
        self.verbose = verbose
        self.json_output = json_output
        self.console = Console()
        self._config: Optional[AppConfig] = None

    @property
    def config(self) -> AppConfig:
        """Configuration, loaded on first use."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    def output_json(self, data: Dict[str, Any], exit_code: int = 0) -> None:
        """
        Output data as JSON and exit.

        Args:
            data: Data to output as JSON
            exit_code: Exit code (0 for success, non-zero for error)
        """
        print(json.dumps(data, indent=2))
        if exit_code != 0:
            raise SystemExit(exit_code)

    def output_json_error(
        self, error: str, details: Optional[Dict[str, Any]] = None, exit_code: int = 1
    ) -> None:
        """Output error as JSON and exit."""
        error_data = {"error": error}
        if details:
            error_data["details"] = details
        self.output_json(error_data, exit_code=exit_code)

    def show_header(
        self, title: str, subtitle: Optional[str] = None, details: Optional[dict] = None
    ) -> None:
        """Show command header (skip in JSON or verbose mode)."""
        if not self.verbose and not self.json_output:
            show_header(title=title, subtitle=subtitle, details=details, console=self.console)

    def print_success(self, message: str) -> None:
        """Print success message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[green]✓ {message}[/green]")

    def print_error(self, message: str) -> None:
        """Print error message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[red]✗ {message}[/red]")

    def print_dim(self, message: str) -> None:
        """Print dim message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[dim]{message}[/dim]")

    def handle_error(self, error: AutoGitPullError) -> None:
        """Report a known error in the current output mode."""
        if self.json_output:
            details = {"context": error.context} if error.context else None
            if isinstance(error, ScriptExecutionError):
                details = {"exit_code": error.outcome.exit_code, "output": error.outcome.output}
            self.output_json_error(error.message, details=details, exit_code=1)
            return

        self.print_error(error.message)
        if error.context:
            self.print_dim(f"Context: {error.context}")

    @abstractmethod
    def execute(self, **kwargs) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def run(self, **kwargs) -> None:
        """
        Run command with error handling.

        Args:
            **kwargs: Command arguments
        """
        try:
            self.execute(**kwargs)
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            raise SystemExit(130)
        except SystemExit:
            raise
        except (ConfigurationError, UnauthorizedCaller, ScriptExecutionError, HookError) as e:
            self.handle_error(e)
            raise SystemExit(1)
        except PermissionError as e:
            self.console.print(f"\n[bold red]✗ Permission denied:[/bold red] {e}\n")
            self.console.print("[dim]Try running with appropriate permissions[/dim]\n")
            raise SystemExit(1)
        except Exception as e:
            error_type = type(e).__name__
            self.console.print(f"\n[bold red]✗ {error_type}:[/bold red] {e}\n")
            raise SystemExit(1)
