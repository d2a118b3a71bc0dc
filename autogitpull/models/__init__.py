"""
autogitpull Domain Models

Dataclass-based models for configuration, requests and results.
"""

from .config import (
    AllowListEntry,
    DeploymentConfig,
    build_allow_list,
    ipv4_to_int,
)
from .request import (
    Origin,
    RequestContext,
    headers_to_meta,
)
from .results import (
    DeployState,
    DeploymentOutcome,
    NotificationMessage,
)

__all__ = [
    # Config
    "AllowListEntry",
    "DeploymentConfig",
    "build_allow_list",
    "ipv4_to_int",
    # Request
    "Origin",
    "RequestContext",
    "headers_to_meta",
    # Results
    "DeployState",
    "DeploymentOutcome",
    "NotificationMessage",
]
