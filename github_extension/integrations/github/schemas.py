"""
Request bodies sent to the GitHub REST API.

Responses are passed through as decoded JSON; only the payloads this
package builds are modelled here.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class _RequestModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON body GitHub expects, dropping unset fields."""
        return self.model_dump(mode="json", exclude_none=True)


class ItemState(str, Enum):
    """State of an issue or pull request."""

    OPEN = "open"
    CLOSED = "closed"


class NewReference(_RequestModel):
    """Body for ``POST /repos/{owner}/{repo}/git/refs``."""

    ref: str
    sha: str


class NewPullRequest(_RequestModel):
    """Body for ``POST /repos/{owner}/{repo}/pulls``."""

    title: str
    head: str
    base: str
    body: str | None = None


class PullRequestUpdate(_RequestModel):
    """Body for ``PATCH /repos/{owner}/{repo}/pulls/{number}``."""

    title: str | None = None
    body: str | None = None
    state: ItemState | None = None


class MergePullRequest(_RequestModel):
    """Body for ``PUT /repos/{owner}/{repo}/pulls/{number}/merge``."""

    commit_title: str | None = None
    commit_message: str | None = None


class CreateFileRequest(_RequestModel):
    """Contents API create request. ``content`` is plain text; the transport encodes it."""

    message: str
    content: str
    branch: str | None = None


class UpdateFileRequest(CreateFileRequest):
    """Contents API update request, addressed by the current blob SHA."""

    sha: str


class DeleteFileRequest(_RequestModel):
    """Body for ``DELETE /repos/{owner}/{repo}/contents/{path}``."""

    message: str
    sha: str
    branch: str | None = None


class NewLabel(_RequestModel):
    """Body for ``POST /repos/{owner}/{repo}/labels``."""

    name: str
    color: str
