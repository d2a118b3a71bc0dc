"""
autogitpull Core

Configuration loading.
"""

from .config_loader import AppConfig, ServerConfig, SmtpConfig, load_config

__all__ = [
    "AppConfig",
    "ServerConfig",
    "SmtpConfig",
    "load_config",
]
