"""
Configuration package - unified access point.

This package provides all configuration classes and the global config instance.
"""

from github_extension.core.config.github_config import GitHubConfig
from github_extension.core.config.logging_config import LoggingConfig
from github_extension.core.config.settings import Config, config

__all__ = [
    "Config",
    "GitHubConfig",
    "LoggingConfig",
    "config",
]
