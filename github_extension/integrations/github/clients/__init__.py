"""
Facades scoped to one area of the GitHub REST API.
"""

from github_extension.integrations.github.clients.apps import GitHubAppsClient
from github_extension.integrations.github.clients.repositories import RepositoriesClient
from github_extension.integrations.github.clients.user import UserClient

__all__ = [
    "GitHubAppsClient",
    "RepositoriesClient",
    "UserClient",
]
