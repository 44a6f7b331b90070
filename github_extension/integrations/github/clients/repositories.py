import base64
from typing import Any

import structlog

from github_extension.core.errors import BranchNotFoundError, FileContentNotFoundError
from github_extension.integrations.github.interface import GitHubTransport
from github_extension.integrations.github.schemas import (
    CreateFileRequest,
    DeleteFileRequest,
    ItemState,
    MergePullRequest,
    NewLabel,
    NewPullRequest,
    NewReference,
    PullRequestUpdate,
    UpdateFileRequest,
)

logger = structlog.get_logger(__name__)


class RepositoriesClient:
    """
    Access GitHub's Repositories API scoped to a single repository.

    https://docs.github.com/rest/repos
    """

    def __init__(self, transport: GitHubTransport, owner: str, name: str):
        self._transport = transport
        self._owner = owner
        self._name = name

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def name(self) -> str:
        return self._name

    # --- branch ---

    async def get_branch(self, branch: str) -> dict[str, Any]:
        return await self._transport.get_branch(self._owner, self._name, branch)

    async def get_branch_for_sha(self, sha: str) -> dict[str, Any]:
        """
        Gets the base branch of the open pull request whose head is at ``sha``.

        Raises:
            BranchNotFoundError: If no open pull request has that head commit.
        """
        pull_requests = await self.get_all_open_pull_requests()
        match = next((pr for pr in pull_requests if (pr.get("head") or {}).get("sha") == sha), None)
        if match is None:
            logger.warning("no_open_pull_request_for_sha", repo=f"{self._owner}/{self._name}", sha=sha)
            raise BranchNotFoundError(f"No open pull request in {self._owner}/{self._name} has head commit {sha}")

        return await self._transport.get_branch(self._owner, self._name, match["base"]["ref"])

    async def get_all_branches(self) -> list[dict[str, Any]]:
        return await self._transport.list_branches(self._owner, self._name)

    async def create_branch(self, branch: str, base_ref: str) -> dict[str, Any]:
        """Creates ``branch`` pointing at the head commit of ``base_ref``."""
        base_branch = await self._transport.get_branch(self._owner, self._name, base_ref)
        reference = NewReference(ref=f"refs/heads/{branch}", sha=base_branch["commit"]["sha"])
        return await self._transport.create_reference(self._owner, self._name, reference)

    async def delete_branch(self, branch: str) -> None:
        await self._transport.delete_reference(self._owner, self._name, f"heads/{branch}")

    # --- pull request ---

    async def get_all_open_pull_requests(self) -> list[dict[str, Any]]:
        return await self._transport.list_pull_requests(self._owner, self._name)

    async def get_pull_request(self, number: int) -> dict[str, Any]:
        return await self._transport.get_pull_request(self._owner, self._name, number)

    async def create_pull_request(
        self, title: str, branch: str, base_ref: str, body: str | None = None
    ) -> dict[str, Any]:
        pull_request = NewPullRequest(title=title, head=branch, base=base_ref, body=body)
        return await self._transport.create_pull_request(self._owner, self._name, pull_request)

    async def open_pull_request(self, number: int) -> None:
        await self._transport.update_pull_request(
            self._owner, self._name, number, PullRequestUpdate(state=ItemState.OPEN)
        )

    async def close_pull_request(self, number: int) -> None:
        await self._transport.update_pull_request(
            self._owner, self._name, number, PullRequestUpdate(state=ItemState.CLOSED)
        )

    async def update_pull_request_title(self, number: int, title: str) -> dict[str, Any]:
        return await self._transport.update_pull_request(
            self._owner, self._name, number, PullRequestUpdate(title=title)
        )

    async def merge(self, number: int, title: str, message: str) -> None:
        merge = MergePullRequest(commit_title=title, commit_message=message)
        await self._transport.merge_pull_request(self._owner, self._name, number, merge)

    async def merged(self, number: int) -> bool:
        return await self._transport.is_pull_request_merged(self._owner, self._name, number)

    # --- pull request file ---

    async def get_files(self, number: int) -> list[dict[str, Any]]:
        return await self._transport.list_pull_request_files(self._owner, self._name, number)

    async def get_file_content(self, sha: str) -> str:
        """Gets the text of a blob, decoding its base64 payload as UTF-8."""
        blob = await self._transport.get_blob(self._owner, self._name, sha)
        return base64.b64decode(blob["content"]).decode("utf-8")

    async def create_file(self, path: str, message: str, content: str, branch: str) -> dict[str, Any]:
        request = CreateFileRequest(message=message, content=content, branch=branch)
        return await self._transport.create_file(self._owner, self._name, path, request)

    async def delete_file(self, path: str, message: str, branch: str) -> None:
        existing_sha = await self._get_existing_file_sha(path, branch)
        request = DeleteFileRequest(message=message, sha=existing_sha, branch=branch)
        await self._transport.delete_file(self._owner, self._name, path, request)

    async def update_file(self, path: str, message: str, content: str, branch: str) -> dict[str, Any]:
        existing_sha = await self._get_existing_file_sha(path, branch)
        request = UpdateFileRequest(message=message, content=content, sha=existing_sha, branch=branch)
        return await self._transport.update_file(self._owner, self._name, path, request)

    async def _get_existing_file_sha(self, path: str, branch: str) -> str:
        contents = await self._transport.get_contents_by_ref(self._owner, self._name, path, branch)
        if not contents:
            raise FileContentNotFoundError(
                f"File '{path}' not found on branch '{branch}' in {self._owner}/{self._name}"
            )
        return contents[0]["sha"]

    # --- label ---

    async def get_labels(self, number: int) -> list[dict[str, Any]]:
        return await self._transport.list_issue_labels(self._owner, self._name, number)

    async def create_label(self, name: str, color: str) -> dict[str, Any]:
        return await self._transport.create_label(self._owner, self._name, NewLabel(name=name, color=color))

    async def delete_label(self, name: str) -> None:
        await self._transport.delete_label(self._owner, self._name, name)

    # --- comment ---

    async def get_comments(self, number: int) -> list[dict[str, Any]]:
        return await self._transport.list_issue_comments(self._owner, self._name, number)

    async def create_comment(self, number: int, comment: str) -> dict[str, Any]:
        return await self._transport.create_issue_comment(self._owner, self._name, number, comment)

    async def delete_comment(self, comment_id: int) -> None:
        await self._transport.delete_issue_comment(self._owner, self._name, comment_id)
