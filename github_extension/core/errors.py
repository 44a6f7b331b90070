"""
Core error classes for the GitHub Extension package.
"""


class GitHubAPIError(Exception):
    """Raised when the GitHub API answers with a non-success status."""

    def __init__(self, status: int, message: str = "") -> None:
        self.status = status
        self.message = message
        super().__init__(f"GitHub API error {status}: {message}")


class GitHubRateLimitError(GitHubAPIError):
    """Raised when GitHub API rate limit is exceeded."""

    pass


class GitHubResourceNotFoundError(GitHubAPIError):
    """Raised when a specific GitHub resource is not found."""

    def __init__(self, message: str = "", *, status: int = 404) -> None:
        super().__init__(status, message)


class BranchNotFoundError(GitHubResourceNotFoundError):
    """Raised when no open pull request has the requested head commit."""

    pass


class FileContentNotFoundError(GitHubResourceNotFoundError):
    """Raised when a file has no content entry on the requested branch."""

    pass
