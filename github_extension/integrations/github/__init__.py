"""
GitHub API adapter.

This package provides the REST transport and the facades built on it.
"""

from github_extension.integrations.github.api import GitHubClient
from github_extension.integrations.github.clients import GitHubAppsClient, RepositoriesClient, UserClient
from github_extension.integrations.github.interface import GitHubTransport
from github_extension.integrations.github.manager import GitHubManager

__all__ = [
    "GitHubAppsClient",
    "GitHubClient",
    "GitHubManager",
    "GitHubTransport",
    "RepositoriesClient",
    "UserClient",
]
