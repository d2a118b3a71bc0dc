"""
Result Models

Dataclass models for deployment outcomes and notifications.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Tuple


class DeployState(Enum):
    """Lifecycle of a single deploy() call."""

    IDLE = "idle"
    AUTHORIZING = "authorizing"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self in (DeployState.SUCCEEDED, DeployState.FAILED, DeployState.REJECTED)


@dataclass(frozen=True)
class DeploymentOutcome:
    """Result of running the update script."""

    exit_code: int
    output: str = ""
    command: Tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def success(self) -> bool:
        """Exit code 0 is the only success signal."""
        return self.exit_code == 0

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "exit_code": self.exit_code,
            "output": self.output,
            "command": list(self.command),
            "timestamp": self.timestamp.isoformat(),
        }

    def __repr__(self) -> str:
        return f"DeploymentOutcome(exit_code={self.exit_code}, success={self.success})"


@dataclass(frozen=True)
class NotificationMessage:
    """Summary sent to recipients at the end of a deployment."""

    subject: str
    body: str
    recipients: Tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"NotificationMessage(subject={self.subject!r}, recipients={len(self.recipients)})"
