from typing import Any

from github_extension.integrations.github.interface import GitHubTransport


class UserClient:
    """
    Access GitHub's Users API.

    https://docs.github.com/rest/users
    """

    def __init__(self, transport: GitHubTransport):
        self._transport = transport

    async def get_current(self) -> dict[str, Any]:
        """Gets the user the client's credential belongs to."""
        return await self._transport.get_current_user()
