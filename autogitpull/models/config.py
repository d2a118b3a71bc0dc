"""
Configuration Models

Dataclass models for the deployment configuration and its allow-list.
"""

import ipaddress
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Tuple

from autogitpull.constants import (
    DEFAULT_ALLOWED_RANGES,
    DEFAULT_BRANCH,
    DEFAULT_PULL_SCRIPT_PATH,
    DEFAULT_REMOTE,
    LOG_DATE_FORMAT,
)
from autogitpull.exceptions import ConfigurationError


def ipv4_to_int(address: Optional[str]) -> Optional[int]:
    """
    Convert an IPv4 dotted quad into a 32-bit unsigned integer.

    Returns None for anything that is not a valid IPv4 address.
    """
    if not isinstance(address, str):
        return None
    try:
        return int(ipaddress.IPv4Address(address.strip()))
    except ValueError:
        return None


@dataclass(frozen=True)
class AllowListEntry:
    """One permitted network range (address + prefix length)."""

    address: str
    prefix: int = 32

    def __post_init__(self):
        if ipv4_to_int(self.address) is None:
            raise ConfigurationError(f"Invalid allow-list address: {self.address!r}")
        if not 0 <= self.prefix <= 32:
            raise ConfigurationError(
                f"Invalid prefix length /{self.prefix} for {self.address}",
                context="Prefix must be between 0 and 32",
            )

    @classmethod
    def parse(cls, text: str) -> "AllowListEntry":
        """Parse 'a.b.c.d/n' or a bare 'a.b.c.d' (treated as /32)."""
        if not isinstance(text, str) or not text.strip():
            raise ConfigurationError(f"Invalid allow-list entry: {text!r}")

        address, _, prefix = text.strip().partition("/")
        address, prefix = address.strip(), prefix.strip()
        if not prefix:
            return cls(address=address)

        try:
            prefix_len = int(prefix)
        except ValueError:
            raise ConfigurationError(f"Invalid prefix in allow-list entry: {text!r}")
        return cls(address=address, prefix=prefix_len)

    @property
    def network(self) -> int:
        """Network address as a 32-bit integer."""
        return ipv4_to_int(self.address)

    def __str__(self) -> str:
        return f"{self.address}/{self.prefix}"


def build_allow_list(
    allowed_ranges: Optional[Iterable[str]] = None,
    additional_allowed_ranges: Optional[Iterable[str]] = None,
) -> Tuple[AllowListEntry, ...]:
    """
    Build the effective allow-list.

    Args:
        allowed_ranges: Full list replacing the provider defaults (if given)
        additional_allowed_ranges: Ranges merged onto the base list

    Returns:
        Ordered, de-duplicated tuple of entries
    """
    base = DEFAULT_ALLOWED_RANGES if allowed_ranges is None else allowed_ranges
    entries = []
    for text in list(base) + list(additional_allowed_ranges or []):
        entry = AllowListEntry.parse(text)
        if entry not in entries:
            entries.append(entry)
    return tuple(entries)


@dataclass(frozen=True)
class DeploymentConfig:
    """Everything a deployment needs to know, fixed at construction."""

    directory: str
    branch: str = DEFAULT_BRANCH
    remote: str = DEFAULT_REMOTE
    deploy_user: Optional[str] = None
    pull_script_path: str = DEFAULT_PULL_SCRIPT_PATH
    allowed_ranges: Tuple[AllowListEntry, ...] = field(default_factory=build_allow_list)
    notify_emails: Tuple[str, ...] = ()
    post_deploy_hook: Optional[Callable[[], None]] = None
    log_directory: Optional[str] = None
    date_format: str = LOG_DATE_FORMAT

    def __post_init__(self):
        if not self.directory or not str(self.directory).strip():
            raise ConfigurationError(
                "Deployment directory is required",
                context="Set 'directory' to the working tree to pull into",
            )
        if self.post_deploy_hook is not None and not callable(self.post_deploy_hook):
            raise ConfigurationError("post_deploy_hook must be callable")

    @classmethod
    def from_options(
        cls,
        directory: str,
        branch: str = DEFAULT_BRANCH,
        remote: str = DEFAULT_REMOTE,
        deploy_user: Optional[str] = None,
        pull_script_path: Optional[str] = None,
        allowed_ranges: Optional[Iterable[str]] = None,
        additional_allowed_ranges: Optional[Iterable[str]] = None,
        notify_emails: Iterable[str] = (),
        post_deploy_hook: Optional[Callable[[], None]] = None,
        log_directory: Optional[str] = None,
        date_format: str = LOG_DATE_FORMAT,
    ) -> "DeploymentConfig":
        """Build a config from plain option values (CIDR strings, lists)."""
        return cls(
            directory=directory,
            branch=branch or DEFAULT_BRANCH,
            remote=remote or DEFAULT_REMOTE,
            deploy_user=deploy_user or None,
            pull_script_path=pull_script_path or DEFAULT_PULL_SCRIPT_PATH,
            allowed_ranges=build_allow_list(allowed_ranges, additional_allowed_ranges),
            notify_emails=tuple(dict.fromkeys(notify_emails)),
            post_deploy_hook=post_deploy_hook,
            log_directory=log_directory or None,
            date_format=date_format or LOG_DATE_FORMAT,
        )

    @property
    def email_enabled(self) -> bool:
        """Whether notifications will be sent."""
        return len(self.notify_emails) > 0

    def __repr__(self) -> str:
        return (
            f"DeploymentConfig(directory={self.directory}, branch={self.branch}, "
            f"remote={self.remote}, ranges={len(self.allowed_ranges)})"
        )
