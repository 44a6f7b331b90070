from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog

from github_extension.core.config import config
from github_extension.core.utils.logging import log_operation
from github_extension.integrations.github.api import GitHubClient
from github_extension.integrations.github.auth import decode_private_key, generate_app_jwt
from github_extension.integrations.github.clients import GitHubAppsClient, RepositoriesClient, UserClient
from github_extension.integrations.github.interface import GitHubTransport

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = structlog.get_logger(__name__)

TransportFactory = Callable[[str], GitHubTransport]


class GitHubManager:
    """
    Entry point handing out GitHub API facades bound to one credential.

    The credential is whatever the caller supplies: a user or installation
    token for the repository and user facades, a GitHub App JWT for the apps
    facade.
    """

    def __init__(
        self,
        token: str,
        product_name: str | None = None,
        transport_factory: TransportFactory | None = None,
    ):
        if not token:
            raise ValueError("A GitHub token is required")

        self.product_name = product_name or config.github.product_name
        self._transport_factory = transport_factory or self._default_transport_factory
        self.client = self._transport_factory(token)

    def _default_transport_factory(self, token: str) -> GitHubTransport:
        return GitHubClient(token, product_name=self.product_name)

    @classmethod
    def for_app(
        cls,
        app_id: str | None = None,
        private_key: str | None = None,
        product_name: str | None = None,
        transport_factory: TransportFactory | None = None,
    ) -> GitHubManager:
        """
        Build a manager authenticated as a GitHub App.

        Args:
            app_id: The app's client id, defaults to ``APP_CLIENT_ID_GITHUB``
            private_key: Base64-encoded PEM key, defaults to ``PRIVATE_KEY_BASE64_GITHUB``

        The generated JWT is short lived; build a new manager once it expires.
        """
        app_id = app_id or config.github.app_id
        private_key = private_key or config.github.private_key
        if not app_id or not private_key:
            raise ValueError("GitHub App id and private key are required for app authentication")

        app_jwt = generate_app_jwt(app_id, decode_private_key(private_key))
        logger.info("github_app_jwt_generated", app_id=app_id)
        return cls(app_jwt, product_name=product_name, transport_factory=transport_factory)

    def repository(self, owner: str, name: str) -> RepositoriesClient:
        """
        Access GitHub's Repositories API.

        https://docs.github.com/rest/repos
        """
        return RepositoriesClient(self.client, owner, name)

    def user(self) -> UserClient:
        """
        Access GitHub's Users API.

        https://docs.github.com/rest/users
        """
        return UserClient(self.client)

    def apps(self) -> GitHubAppsClient:
        """
        Access GitHub's Apps API.

        https://docs.github.com/rest/apps
        """
        return GitHubAppsClient(self.client)

    async def get_user_list(self, tokens: Iterable[str]) -> dict[str, dict[str, Any]]:
        """
        Gets the user behind each token, one request at a time.

        The first failing lookup aborts the whole batch, and so does a token
        that appears more than once.

        Raises:
            ValueError: If a token is repeated (raised after its second lookup).
        """
        users: dict[str, dict[str, Any]] = {}
        async with log_operation("user_list_lookup"):
            for position, token in enumerate(tokens):
                user = await self.get_user(token)
                if token in users:
                    raise ValueError(f"Duplicate token in batch at position {position}")
                users[token] = user
        return users

    async def get_user(self, token: str) -> dict[str, Any]:
        """Gets the user behind ``token`` using a throwaway client."""
        if not token:
            raise ValueError("A GitHub token is required")

        transport = self._transport_factory(token)
        async with transport:
            return await transport.get_current_user()

    async def close(self) -> None:
        await self.client.close()

    async def __aenter__(self) -> GitHubManager:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
