import base64
from typing import Any
from urllib.parse import quote

import aiohttp
import structlog

from github_extension.core.config import config
from github_extension.core.errors import GitHubAPIError, GitHubRateLimitError, GitHubResourceNotFoundError
from github_extension.integrations.github.interface import GitHubTransport
from github_extension.integrations.github.schemas import (
    CreateFileRequest,
    DeleteFileRequest,
    MergePullRequest,
    NewLabel,
    NewPullRequest,
    NewReference,
    PullRequestUpdate,
    UpdateFileRequest,
)

logger = structlog.get_logger(__name__)

_PER_PAGE = 100


class GitHubClient(GitHubTransport):
    """
    aiohttp implementation of the GitHub REST transport.

    The client is bound to a single credential. Personal access tokens, OAuth
    tokens, installation tokens and GitHub App JWTs are all sent as bearer
    tokens, so the same client serves every facade. Each call is one request:
    there is no pagination, retry or caching at this layer.
    """

    def __init__(
        self,
        token: str,
        product_name: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        self._token = token
        self.product_name = product_name or config.github.product_name
        self.base_url = (base_url or config.github.api_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else config.github.request_timeout
        self._session: aiohttp.ClientSession | None = None

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": self.product_name,
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        """Initializes and returns the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self._timeout))
        return self._session

    async def close(self) -> None:
        """Closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        session = await self._get_session()
        async with session.request(method, url, headers=self.headers, json=json, params=params) as response:
            if response.status == 204:
                return None
            if 200 <= response.status < 300:
                logger.debug("github_request_succeeded", method=method, url=url, status=response.status)
                return await response.json()

            await self._raise_for_response(method, path, url, response)

    @staticmethod
    async def _raise_for_response(method: str, path: str, url: str, response: aiohttp.ClientResponse) -> None:
        error_text = await response.text()
        logger.error(
            "github_request_failed",
            method=method,
            url=url,
            status=response.status,
            response_body=error_text,
        )
        if response.status == 404:
            raise GitHubResourceNotFoundError(f"{method} {path} not found")
        if response.status in (403, 429) and "rate limit" in error_text.lower():
            raise GitHubRateLimitError(response.status, "GitHub API rate limit exceeded")
        raise GitHubAPIError(response.status, error_text)

    @staticmethod
    def _repo_path(owner: str, repo: str) -> str:
        return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    @staticmethod
    def _encode_content(content: str) -> str:
        return base64.b64encode(content.encode("utf-8")).decode("ascii")

    # --- users ---

    async def get_current_user(self) -> dict[str, Any]:
        return await self._request("GET", "/user")

    # --- branches and git data ---

    async def get_branch(self, owner: str, repo: str, branch: str) -> dict[str, Any]:
        return await self._request("GET", f"{self._repo_path(owner, repo)}/branches/{quote(branch, safe='')}")

    async def list_branches(self, owner: str, repo: str) -> list[dict[str, Any]]:
        return await self._request("GET", f"{self._repo_path(owner, repo)}/branches", params={"per_page": _PER_PAGE})

    async def create_reference(self, owner: str, repo: str, reference: NewReference) -> dict[str, Any]:
        return await self._request("POST", f"{self._repo_path(owner, repo)}/git/refs", json=reference.to_payload())

    async def delete_reference(self, owner: str, repo: str, ref: str) -> None:
        ref_clean = ref.removeprefix("refs/")
        await self._request("DELETE", f"{self._repo_path(owner, repo)}/git/refs/{quote(ref_clean, safe='/')}")

    async def get_blob(self, owner: str, repo: str, sha: str) -> dict[str, Any]:
        return await self._request("GET", f"{self._repo_path(owner, repo)}/git/blobs/{sha}")

    # --- pull requests ---

    async def list_pull_requests(self, owner: str, repo: str) -> list[dict[str, Any]]:
        return await self._request(
            "GET", f"{self._repo_path(owner, repo)}/pulls", params={"state": "open", "per_page": _PER_PAGE}
        )

    async def get_pull_request(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        return await self._request("GET", f"{self._repo_path(owner, repo)}/pulls/{number}")

    async def create_pull_request(self, owner: str, repo: str, pull_request: NewPullRequest) -> dict[str, Any]:
        return await self._request("POST", f"{self._repo_path(owner, repo)}/pulls", json=pull_request.to_payload())

    async def update_pull_request(
        self, owner: str, repo: str, number: int, update: PullRequestUpdate
    ) -> dict[str, Any]:
        return await self._request(
            "PATCH", f"{self._repo_path(owner, repo)}/pulls/{number}", json=update.to_payload()
        )

    async def merge_pull_request(self, owner: str, repo: str, number: int, merge: MergePullRequest) -> dict[str, Any]:
        return await self._request(
            "PUT", f"{self._repo_path(owner, repo)}/pulls/{number}/merge", json=merge.to_payload()
        )

    async def is_pull_request_merged(self, owner: str, repo: str, number: int) -> bool:
        # GitHub answers 204 when merged and 404 when not
        path = f"{self._repo_path(owner, repo)}/pulls/{number}/merge"
        url = f"{self.base_url}{path}"
        session = await self._get_session()
        async with session.request("GET", url, headers=self.headers) as response:
            if response.status == 204:
                return True
            if response.status == 404:
                logger.debug("pull_request_not_merged", url=url)
                return False
            await self._raise_for_response("GET", path, url, response)
        return False

    async def list_pull_request_files(self, owner: str, repo: str, number: int) -> list[dict[str, Any]]:
        return await self._request(
            "GET", f"{self._repo_path(owner, repo)}/pulls/{number}/files", params={"per_page": _PER_PAGE}
        )

    # --- repository contents ---

    def _contents_path(self, owner: str, repo: str, path: str) -> str:
        return f"{self._repo_path(owner, repo)}/contents/{quote(path.lstrip('/'), safe='/')}"

    async def get_contents_by_ref(self, owner: str, repo: str, path: str, ref: str) -> list[dict[str, Any]]:
        data = await self._request("GET", self._contents_path(owner, repo, path), params={"ref": ref})
        if isinstance(data, dict):
            return [data]
        return data or []

    async def create_file(self, owner: str, repo: str, path: str, request: CreateFileRequest) -> dict[str, Any]:
        payload = request.to_payload()
        payload["content"] = self._encode_content(request.content)
        return await self._request("PUT", self._contents_path(owner, repo, path), json=payload)

    async def update_file(self, owner: str, repo: str, path: str, request: UpdateFileRequest) -> dict[str, Any]:
        payload = request.to_payload()
        payload["content"] = self._encode_content(request.content)
        return await self._request("PUT", self._contents_path(owner, repo, path), json=payload)

    async def delete_file(self, owner: str, repo: str, path: str, request: DeleteFileRequest) -> None:
        await self._request("DELETE", self._contents_path(owner, repo, path), json=request.to_payload())

    # --- labels and comments ---

    async def list_issue_labels(self, owner: str, repo: str, number: int) -> list[dict[str, Any]]:
        return await self._request(
            "GET", f"{self._repo_path(owner, repo)}/issues/{number}/labels", params={"per_page": _PER_PAGE}
        )

    async def create_label(self, owner: str, repo: str, label: NewLabel) -> dict[str, Any]:
        return await self._request("POST", f"{self._repo_path(owner, repo)}/labels", json=label.to_payload())

    async def delete_label(self, owner: str, repo: str, name: str) -> None:
        await self._request("DELETE", f"{self._repo_path(owner, repo)}/labels/{quote(name, safe='')}")

    async def list_issue_comments(self, owner: str, repo: str, number: int) -> list[dict[str, Any]]:
        return await self._request(
            "GET", f"{self._repo_path(owner, repo)}/issues/{number}/comments", params={"per_page": _PER_PAGE}
        )

    async def create_issue_comment(self, owner: str, repo: str, number: int, body: str) -> dict[str, Any]:
        return await self._request(
            "POST", f"{self._repo_path(owner, repo)}/issues/{number}/comments", json={"body": body}
        )

    async def delete_issue_comment(self, owner: str, repo: str, comment_id: int) -> None:
        await self._request("DELETE", f"{self._repo_path(owner, repo)}/issues/comments/{comment_id}")

    # --- GitHub Apps ---

    async def create_installation_token(self, installation_id: int) -> dict[str, Any]:
        return await self._request("POST", f"/app/installations/{installation_id}/access_tokens")

    async def get_app(self, slug: str) -> dict[str, Any]:
        return await self._request("GET", f"/apps/{quote(slug, safe='')}")

    async def list_installations_for_current_app(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/app/installations", params={"per_page": _PER_PAGE})

    async def get_current_app(self) -> dict[str, Any]:
        return await self._request("GET", "/app")

    async def get_installation(self, installation_id: int) -> dict[str, Any]:
        return await self._request("GET", f"/app/installations/{installation_id}")
