"""
Logging system for autogitpull
Records the transcript of one deployment to a log file, the notification
buffer and (in verbose mode) the console
"""

import os
import re
import time
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from autogitpull.constants import LOG_DATE_FORMAT, LOG_FILE_MODE, LOG_FILE_PREFIX
from autogitpull.services.notification_service import NotificationSink

console = Console()

ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


class LogSink(ABC):
    """Destination for formatted log lines."""

    @abstractmethod
    def write(self, line: str) -> None:
        pass


class FileLogSink(LogSink):
    """
    Appends lines to auto-git-pull-<unix time>.log in a log directory.

    The file is created on first write and made world-writable so that the
    web server user and the deploy user can both append to it.
    """

    def __init__(self, log_directory: str, started_at: Optional[float] = None):
        self.log_directory = Path(log_directory)
        stamp = int(started_at if started_at is not None else time.time())
        self.log_path = self.log_directory / f"{LOG_FILE_PREFIX}{stamp}.log"

    def write(self, line: str) -> None:
        if not self.log_path.exists():
            self.log_directory.mkdir(parents=True, exist_ok=True)
            self.log_path.touch()
            os.chmod(self.log_path, LOG_FILE_MODE)

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(line)


class DeployLogger:
    """
    Manages logging for one deployment
    - Writes every line to the log sink (if any)
    - Buffers every line for the end-of-run notification
    - Shows lines in console when verbose
    """

    def __init__(
        self,
        sink: Optional[LogSink] = None,
        notifier: Optional[NotificationSink] = None,
        date_format: str = LOG_DATE_FORMAT,
        verbose: bool = False,
    ):
        """
        Initialize logger

        Args:
            sink: Where log lines are written (None disables file logging)
            notifier: Notification buffer receiving every line
            date_format: strftime format for line timestamps
            verbose: If True, show all lines in console
        """
        self.sink = sink
        self.notifier = notifier
        self.date_format = date_format
        self.verbose = verbose
        self.has_errors = False

    @property
    def log_path(self) -> Optional[Path]:
        return getattr(self.sink, "log_path", None)

    def format_line(self, message: str, level: str) -> str:
        timestamp = datetime.now().strftime(self.date_format)
        return f"[{timestamp}]\t{level}\t{message}\n"

    def log(self, message: str, level: str = "INFO") -> str:
        """
        Log a message to the sink, the notification buffer and maybe console

        Args:
            message: Message to log
            level: Log level (INFO, WARNING, ERROR, DEBUG, POST)

        Returns:
            The formatted line
        """
        line = self.format_line(message, level)

        if self.sink:
            self.sink.write(line)

        if self.notifier:
            self.notifier.record(line)

        if self.verbose:
            if level == "ERROR":
                console.print(f"[red]{escape(message)}[/red]", highlight=False)
            elif level == "WARNING":
                console.print(f"[yellow]{escape(message)}[/yellow]", highlight=False)
            elif level == "DEBUG":
                console.print(f"[dim]{escape(message)}[/dim]", highlight=False)
            else:
                console.print(message, markup=False, highlight=False)

        return line

    def log_command(self, command: str):
        """Log a command being executed"""
        self.log(f"Executing: {command}", "DEBUG")

    def log_output(self, output: str, header: str):
        """Log captured script output (ANSI colour codes stripped)"""
        clean_output = ANSI_ESCAPE.sub("", output or "").rstrip("\n")
        self.log(f"{header}\n{clean_output}" if clean_output else header)

    def log_error(self, error: str, context: Optional[str] = None):
        """Log an error with optional context"""
        self.has_errors = True
        if context:
            self.log(f"{error}\nContext: {context}", "ERROR")
        else:
            self.log(error, "ERROR")

    def warning(self, message: str):
        """Log a warning message"""
        self.log(message, "WARNING")

    def success(self, message: str):
        """Log a success message"""
        self.log(message, "INFO")
