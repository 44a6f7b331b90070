"""
Main configuration class that composes all configs.
"""

import os

from dotenv import load_dotenv

from github_extension.core.config.github_config import GitHubConfig
from github_extension.core.config.logging_config import LoggingConfig

# Load environment variables from a .env file
load_dotenv()


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        self.github = GitHubConfig(
            api_base_url=os.getenv("GITHUB_API_BASE_URL", "https://api.github.com").rstrip("/"),
            product_name=os.getenv("GITHUB_PRODUCT_NAME", "github-extension"),
            request_timeout=float(os.getenv("GITHUB_REQUEST_TIMEOUT", "30")),
            app_id=os.getenv("APP_CLIENT_ID_GITHUB", ""),
            private_key=os.getenv("PRIVATE_KEY_BASE64_GITHUB", ""),
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format=os.getenv("LOG_FORMAT", "%(asctime)s %(levelname)8s %(message)s"),
            json=os.getenv("LOG_JSON", "false").lower() == "true",
        )

    def validate(self, require_app: bool = False) -> bool:
        """Validate configuration."""
        errors = []

        if not self.github.api_base_url:
            errors.append("GITHUB_API_BASE_URL must not be empty")

        if not self.github.product_name:
            errors.append("GITHUB_PRODUCT_NAME must not be empty")

        if self.github.request_timeout <= 0:
            errors.append("GITHUB_REQUEST_TIMEOUT must be positive")

        if require_app:
            if not self.github.app_id:
                errors.append("APP_CLIENT_ID_GITHUB is required")

            if not self.github.private_key:
                errors.append("PRIVATE_KEY_BASE64_GITHUB is required")

        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

        return True


# Global config instance
config = Config()
