"""
autogitpull Exception Hierarchy

Every terminal failure of a deployment maps to one of these types.
"""

from typing import Optional


class AutoGitPullError(Exception):
    """Base exception for all autogitpull errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ConfigurationError(AutoGitPullError):
    """Raised when configuration is invalid or missing."""

    pass


class UnauthorizedCaller(AutoGitPullError):
    """Raised when a networked caller is not covered by the allow-list."""

    def __init__(self, address: Optional[str]):
        self.address = address
        shown = address if address else "unknown address"
        super().__init__(
            f"{shown} is not an authorised remote IP address",
            context="Deployment aborted before running the update script",
        )


class ScriptExecutionError(AutoGitPullError):
    """Raised when the update script exits non-zero or fails to launch."""

    def __init__(self, outcome):
        self.outcome = outcome
        super().__init__(
            f"Error {outcome.exit_code} executing update script",
            context=outcome.output or None,
        )


class HookError(AutoGitPullError):
    """Raised when the post-deploy hook fails after a successful deployment."""

    pass
