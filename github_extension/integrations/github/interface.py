from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
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


class GitHubTransport(ABC):
    """
    Abstract interface over the GitHub REST API.

    The facades only ever talk to this interface, so the HTTP client can be
    swapped (or replaced by a test double) without touching them. Each method
    maps to exactly one REST call and returns the decoded JSON unchanged.
    """

    # --- users (https://docs.github.com/rest/users) ---

    @abstractmethod
    async def get_current_user(self) -> dict[str, Any]:
        """Return the user the credential belongs to."""
        pass

    # --- branches and git data (https://docs.github.com/rest/branches, /rest/git) ---

    @abstractmethod
    async def get_branch(self, owner: str, repo: str, branch: str) -> dict[str, Any]:
        pass

    @abstractmethod
    async def list_branches(self, owner: str, repo: str) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    async def create_reference(self, owner: str, repo: str, reference: NewReference) -> dict[str, Any]:
        pass

    @abstractmethod
    async def delete_reference(self, owner: str, repo: str, ref: str) -> None:
        """
        Delete a git reference.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Reference without the ``refs/`` prefix, e.g. ``heads/feature``
        """
        pass

    @abstractmethod
    async def get_blob(self, owner: str, repo: str, sha: str) -> dict[str, Any]:
        pass

    # --- pull requests (https://docs.github.com/rest/pulls) ---

    @abstractmethod
    async def list_pull_requests(self, owner: str, repo: str) -> list[dict[str, Any]]:
        """List the open pull requests of a repository."""
        pass

    @abstractmethod
    async def get_pull_request(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        pass

    @abstractmethod
    async def create_pull_request(self, owner: str, repo: str, pull_request: NewPullRequest) -> dict[str, Any]:
        pass

    @abstractmethod
    async def update_pull_request(
        self, owner: str, repo: str, number: int, update: PullRequestUpdate
    ) -> dict[str, Any]:
        pass

    @abstractmethod
    async def merge_pull_request(self, owner: str, repo: str, number: int, merge: MergePullRequest) -> dict[str, Any]:
        pass

    @abstractmethod
    async def is_pull_request_merged(self, owner: str, repo: str, number: int) -> bool:
        pass

    @abstractmethod
    async def list_pull_request_files(self, owner: str, repo: str, number: int) -> list[dict[str, Any]]:
        pass

    # --- repository contents (https://docs.github.com/rest/repos/contents) ---

    @abstractmethod
    async def get_contents_by_ref(self, owner: str, repo: str, path: str, ref: str) -> list[dict[str, Any]]:
        """
        Fetch the content entries at ``path`` on ``ref``.

        A file yields a single entry; a directory yields one entry per child.
        """
        pass

    @abstractmethod
    async def create_file(self, owner: str, repo: str, path: str, request: CreateFileRequest) -> dict[str, Any]:
        pass

    @abstractmethod
    async def update_file(self, owner: str, repo: str, path: str, request: UpdateFileRequest) -> dict[str, Any]:
        pass

    @abstractmethod
    async def delete_file(self, owner: str, repo: str, path: str, request: DeleteFileRequest) -> None:
        pass

    # --- labels and comments (https://docs.github.com/rest/issues) ---

    @abstractmethod
    async def list_issue_labels(self, owner: str, repo: str, number: int) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    async def create_label(self, owner: str, repo: str, label: NewLabel) -> dict[str, Any]:
        pass

    @abstractmethod
    async def delete_label(self, owner: str, repo: str, name: str) -> None:
        pass

    @abstractmethod
    async def list_issue_comments(self, owner: str, repo: str, number: int) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    async def create_issue_comment(self, owner: str, repo: str, number: int, body: str) -> dict[str, Any]:
        pass

    @abstractmethod
    async def delete_issue_comment(self, owner: str, repo: str, comment_id: int) -> None:
        pass

    # --- GitHub Apps (https://docs.github.com/rest/apps), JWT authenticated ---

    @abstractmethod
    async def create_installation_token(self, installation_id: int) -> dict[str, Any]:
        pass

    @abstractmethod
    async def get_app(self, slug: str) -> dict[str, Any]:
        pass

    @abstractmethod
    async def list_installations_for_current_app(self) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    async def get_current_app(self) -> dict[str, Any]:
        pass

    @abstractmethod
    async def get_installation(self, installation_id: int) -> dict[str, Any]:
        pass

    # --- lifecycle ---

    @abstractmethod
    async def close(self) -> None:
        """Release any network resources held by the transport."""
        pass

    async def __aenter__(self) -> GitHubTransport:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
