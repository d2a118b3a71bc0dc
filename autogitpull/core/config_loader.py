"""Configuration file loading for autogitpull"""

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml

from autogitpull.constants import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_FILE,
    DEFAULT_MAIL_SENDER,
    DEFAULT_SERVER_HOST,
    DEFAULT_SERVER_PORT,
    DEFAULT_SMTP_HOST,
    DEFAULT_SMTP_PORT,
    DEFAULT_WEBHOOK_PATH,
)
from autogitpull.exceptions import ConfigurationError
from autogitpull.models.config import DeploymentConfig
from autogitpull.services.notification_service import SmtpMailTransport

KNOWN_KEYS = {
    "directory",
    "branch",
    "remote",
    "deploy_user",
    "pull_script",
    "log_directory",
    "date_format",
    "allowed_ranges",
    "additional_allowed_ranges",
    "notify_emails",
    "post_deploy_command",
    "smtp",
    "server",
}

# Passed to the update script or used as paths; YAML may read them as numbers
SCALAR_KEYS = ("branch", "remote", "deploy_user", "pull_script", "log_directory", "date_format")


@dataclass
class SmtpConfig:
    """Mail server used for notifications"""

    host: str = DEFAULT_SMTP_HOST
    port: int = DEFAULT_SMTP_PORT
    sender: str = DEFAULT_MAIL_SENDER
    username: Optional[str] = None
    password: Optional[str] = None
    starttls: bool = False

    def build_transport(self) -> SmtpMailTransport:
        return SmtpMailTransport(
            host=self.host,
            port=self.port,
            sender=self.sender,
            username=self.username,
            password=self.password,
            starttls=self.starttls,
        )


@dataclass
class ServerConfig:
    """Webhook listener settings"""

    host: str = DEFAULT_SERVER_HOST
    port: int = DEFAULT_SERVER_PORT
    path: str = DEFAULT_WEBHOOK_PATH


def command_hook(command: List[str]) -> Callable[[], None]:
    """
    Wrap an argument vector as a post-deploy hook.

    The hook raises CalledProcessError when the command exits non-zero.
    """

    def hook() -> None:
        subprocess.run(command, check=True)

    hook.command = command
    return hook


class AppConfig:
    """Represents a loaded and validated autogitpull configuration file"""

    def __init__(self, config_dict: dict, config_path: Optional[Path] = None):
        """
        Initialize configuration

        Args:
            config_dict: Raw configuration dictionary from the YAML file
            config_path: Path the configuration was read from (optional)
        """
        self.raw_config = config_dict
        self.config_path = config_path
        self._validate()

        self.deployment = self._build_deployment()
        self.smtp = SmtpConfig(**self._section("smtp"))
        self.server = ServerConfig(**self._section("server"))

    def _validate(self) -> None:
        """Validate configuration"""
        unknown = sorted(set(self.raw_config) - KNOWN_KEYS)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                context=str(self.config_path) if self.config_path else None,
            )

        if not self.raw_config.get("directory"):
            raise ConfigurationError(
                "Missing required field: 'directory'",
                context=str(self.config_path) if self.config_path else None,
            )

        for key in ("directory",) + SCALAR_KEYS:
            value = self.raw_config.get(key)
            if value is not None and (isinstance(value, bool) or not isinstance(value, (str, int, float))):
                raise ConfigurationError(
                    f"Invalid '{key}': must be a string",
                    context=f"Got {type(value).__name__}: {value!r}",
                )

        for key in ("allowed_ranges", "additional_allowed_ranges", "notify_emails"):
            value = self.raw_config.get(key)
            if value is not None and not isinstance(value, list):
                raise ConfigurationError(f"Invalid '{key}': must be a list")

        command = self.raw_config.get("post_deploy_command")
        if command is not None and (
            not isinstance(command, list) or not command or not all(isinstance(c, str) for c in command)
        ):
            raise ConfigurationError(
                "Invalid 'post_deploy_command': must be a non-empty list of strings",
                context="Example: post_deploy_command: [systemctl, reload, php-fpm]",
            )

    def _section(self, name: str) -> Dict[str, Any]:
        section = self.raw_config.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigurationError(f"Invalid '{name}' section: must be a mapping")

        allowed = SmtpConfig.__dataclass_fields__ if name == "smtp" else ServerConfig.__dataclass_fields__
        unknown = sorted(set(section) - set(allowed))
        if unknown:
            raise ConfigurationError(f"Unknown keys in '{name}': {', '.join(unknown)}")

        path = section.get("path")
        if name == "server" and path is not None and (not isinstance(path, str) or not path.startswith("/")):
            raise ConfigurationError(
                f"Invalid server path: {path!r}",
                context="The webhook path must start with '/', e.g. /deploy",
            )
        return section

    def _scalar(self, key: str) -> Optional[str]:
        value = self.raw_config.get(key)
        return None if value is None else str(value)

    def _build_deployment(self) -> DeploymentConfig:
        raw = self.raw_config
        command = raw.get("post_deploy_command")

        return DeploymentConfig.from_options(
            directory=self._scalar("directory"),
            branch=self._scalar("branch"),
            remote=self._scalar("remote"),
            deploy_user=self._scalar("deploy_user"),
            pull_script_path=self._scalar("pull_script"),
            allowed_ranges=raw.get("allowed_ranges"),
            additional_allowed_ranges=raw.get("additional_allowed_ranges"),
            notify_emails=raw.get("notify_emails") or (),
            post_deploy_hook=command_hook(command) if command else None,
            log_directory=self._scalar("log_directory"),
            date_format=self._scalar("date_format"),
        )

    def build_transport(self) -> Optional[SmtpMailTransport]:
        """Mail transport, only when there is someone to notify"""
        if not self.deployment.email_enabled:
            return None
        return self.smtp.build_transport()


def resolve_config_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Explicit path, else $AUTOGITPULL_CONFIG, else ./autogitpull.yml"""
    if path:
        return Path(path).expanduser()
    return Path(os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE).expanduser()


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """
    Load and validate a YAML configuration file.

    Raises:
        ConfigurationError: file missing, unreadable or invalid
    """
    config_path = resolve_config_path(path)

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}",
            context=f"Pass --config or set {CONFIG_ENV_VAR}",
        )

    try:
        with open(config_path, "r") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}", context=str(e))

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

    return AppConfig(raw, config_path=config_path)
