"""autogitpull - run a git pull script when an authorized trigger arrives."""

from autogitpull.deployer import Deployer
from autogitpull.exceptions import (
    AutoGitPullError,
    ConfigurationError,
    HookError,
    ScriptExecutionError,
    UnauthorizedCaller,
)
from autogitpull.models import DeploymentConfig, DeploymentOutcome, RequestContext

__version__ = "1.0.0"

__all__ = [
    "Deployer",
    "DeploymentConfig",
    "DeploymentOutcome",
    "RequestContext",
    "AutoGitPullError",
    "ConfigurationError",
    "HookError",
    "ScriptExecutionError",
    "UnauthorizedCaller",
]
