from typing import Any

from github_extension.integrations.github.interface import GitHubTransport


class GitHubAppsClient:
    """
    Access GitHub's Apps API.

    These endpoints require the transport to carry a GitHub App JWT rather
    than a user token. See ``GitHubManager.for_app``.

    https://docs.github.com/rest/apps
    """

    def __init__(self, transport: GitHubTransport):
        self._transport = transport

    async def create_installation_token(self, installation_id: int) -> dict[str, Any]:
        """
        Create a time bound access token for an installation.

        Args:
            installation_id: The installation the token is scoped to

        Returns:
            The access token payload (``token``, ``expires_at``...)
        """
        return await self._transport.create_installation_token(installation_id)

    async def get(self, slug: str) -> dict[str, Any]:
        """Get a GitHub App by its URL-friendly slug."""
        return await self._transport.get_app(slug)

    async def get_all_installations_for_current(self) -> list[dict[str, Any]]:
        """List the installations of the authenticated app."""
        return await self._transport.list_installations_for_current_app()

    async def get_current(self) -> dict[str, Any]:
        return await self._transport.get_current_app()

    async def get_installation(self, installation_id: int) -> dict[str, Any]:
        return await self._transport.get_installation(installation_id)
