"""
GitHub configuration.
"""

from dataclasses import dataclass


@dataclass
class GitHubConfig:
    """GitHub configuration."""

    api_base_url: str = "https://api.github.com"
    product_name: str = "github-extension"
    request_timeout: float = 30.0
    # GitHub App credentials, only needed for app (JWT) authentication
    app_id: str = ""
    private_key: str = ""
