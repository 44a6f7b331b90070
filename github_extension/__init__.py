"""
GitHub Extension.

Thin asynchronous facades over the GitHub REST API.
"""

from github_extension.integrations.github.manager import GitHubManager

__all__ = [
    "GitHubManager",
]
