import base64
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from structlog.testing import capture_logs

from github_extension.core.errors import GitHubAPIError, GitHubRateLimitError, GitHubResourceNotFoundError
from github_extension.integrations.github.api import GitHubClient
from github_extension.integrations.github.schemas import (
    CreateFileRequest,
    DeleteFileRequest,
    MergePullRequest,
    NewReference,
    UpdateFileRequest,
)


@pytest.fixture
def mock_aiohttp_session():
    with patch("aiohttp.ClientSession") as mock_session_cls:
        mock_session = AsyncMock()
        mock_session_cls.return_value = mock_session
        mock_session.closed = False

        # request() must return the response context manager directly, not a coroutine
        mock_session.request = MagicMock()

        def create_mock_response(status, json_data=None, text_data=None):
            mock_response = AsyncMock()
            mock_response.status = status

            async def mock_json():
                return json_data

            mock_response.json = mock_json

            async def mock_text():
                return text_data if text_data is not None else ""

            mock_response.text = mock_text

            mock_response.__aenter__.return_value = mock_response
            mock_response.__aexit__.return_value = None

            return mock_response

        mock_session.create_mock_response = create_mock_response

        yield mock_session


@pytest.fixture
def github_client(mock_aiohttp_session):
    client = GitHubClient("test-token", product_name="test-product", base_url="https://api.example.com")
    client._session = mock_aiohttp_session
    yield client


def _called_request(mock_session, index=-1):
    call = mock_session.request.call_args_list[index]
    method, url = call.args
    return method, url, call.kwargs


def test_headers_carry_token_and_product_name():
    client = GitHubClient("abc", product_name="my-product", base_url="https://api.example.com/")

    assert client.headers["Authorization"] == "Bearer abc"
    assert client.headers["User-Agent"] == "my-product"
    assert client.base_url == "https://api.example.com"


@pytest.mark.asyncio
async def test_get_current_user_success(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(
        200, json_data={"login": "octocat"}
    )

    user = await github_client.get_current_user()

    assert user == {"login": "octocat"}
    method, url, kwargs = _called_request(mock_aiohttp_session)
    assert method == "GET"
    assert url == "https://api.example.com/user"
    assert kwargs["headers"]["Authorization"] == "Bearer test-token"


@pytest.mark.asyncio
async def test_not_found_raises(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(
        404, text_data='{"message": "Not Found"}'
    )

    with pytest.raises(GitHubResourceNotFoundError):
        await github_client.get_pull_request("owner", "repo", 1)


@pytest.mark.asyncio
async def test_rate_limit_raises(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(
        403, text_data='{"message": "API rate limit exceeded for user"}'
    )

    with pytest.raises(GitHubRateLimitError):
        await github_client.list_branches("owner", "repo")


@pytest.mark.asyncio
async def test_other_errors_raise_api_error_with_status(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(
        422, text_data="Validation Failed"
    )

    with pytest.raises(GitHubAPIError) as exc_info:
        await github_client.create_issue_comment("owner", "repo", 1, "hi")

    assert exc_info.value.status == 422
    assert exc_info.value.message == "Validation Failed"


@pytest.mark.asyncio
async def test_list_pull_requests_requests_open_state(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(
        200, json_data=[{"number": 1}]
    )

    prs = await github_client.list_pull_requests("owner", "repo")

    assert prs == [{"number": 1}]
    method, url, kwargs = _called_request(mock_aiohttp_session)
    assert url == "https://api.example.com/repos/owner/repo/pulls"
    assert kwargs["params"]["state"] == "open"


@pytest.mark.asyncio
async def test_create_reference_posts_payload(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(
        201, json_data={"ref": "refs/heads/feature"}
    )

    result = await github_client.create_reference(
        "owner", "repo", NewReference(ref="refs/heads/feature", sha="abc123")
    )

    assert result == {"ref": "refs/heads/feature"}
    method, url, kwargs = _called_request(mock_aiohttp_session)
    assert method == "POST"
    assert url == "https://api.example.com/repos/owner/repo/git/refs"
    assert kwargs["json"] == {"ref": "refs/heads/feature", "sha": "abc123"}


@pytest.mark.asyncio
async def test_delete_reference_returns_none_on_no_content(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(204)

    result = await github_client.delete_reference("owner", "repo", "heads/feature")

    assert result is None
    method, url, _ = _called_request(mock_aiohttp_session)
    assert method == "DELETE"
    assert url == "https://api.example.com/repos/owner/repo/git/refs/heads/feature"


@pytest.mark.asyncio
async def test_merge_pull_request_sends_commit_title_and_message(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(
        200, json_data={"merged": True}
    )

    await github_client.merge_pull_request(
        "owner", "repo", 7, MergePullRequest(commit_title="Title", commit_message="Message")
    )

    method, url, kwargs = _called_request(mock_aiohttp_session)
    assert method == "PUT"
    assert url == "https://api.example.com/repos/owner/repo/pulls/7/merge"
    assert kwargs["json"] == {"commit_title": "Title", "commit_message": "Message"}


@pytest.mark.asyncio
async def test_is_pull_request_merged(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.side_effect = [
        mock_aiohttp_session.create_mock_response(204),
        mock_aiohttp_session.create_mock_response(404),
    ]

    assert await github_client.is_pull_request_merged("owner", "repo", 1) is True
    assert await github_client.is_pull_request_merged("owner", "repo", 2) is False


@pytest.mark.asyncio
async def test_unmerged_pull_request_is_not_logged_as_error(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(
        404, text_data='{"message": "Not Found"}'
    )

    with capture_logs() as logs:
        merged = await github_client.is_pull_request_merged("owner", "repo", 3)

    assert merged is False
    assert [entry for entry in logs if entry["log_level"] == "error"] == []


@pytest.mark.asyncio
async def test_merged_check_raises_on_server_error(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(
        502, text_data="Bad Gateway"
    )

    with pytest.raises(GitHubAPIError) as exc_info:
        await github_client.is_pull_request_merged("owner", "repo", 3)

    assert exc_info.value.status == 502


@pytest.mark.asyncio
async def test_get_contents_by_ref_wraps_single_file(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(
        200, json_data={"path": "README.md", "sha": "f00"}
    )

    contents = await github_client.get_contents_by_ref("owner", "repo", "/README.md", "main")

    assert contents == [{"path": "README.md", "sha": "f00"}]
    _, url, kwargs = _called_request(mock_aiohttp_session)
    assert url == "https://api.example.com/repos/owner/repo/contents/README.md"
    assert kwargs["params"] == {"ref": "main"}


@pytest.mark.asyncio
async def test_create_file_encodes_content(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(
        201, json_data={"content": {"path": "docs/a.md"}}
    )

    await github_client.create_file(
        "owner", "repo", "docs/a.md", CreateFileRequest(message="add", content="hello world", branch="main")
    )

    method, url, kwargs = _called_request(mock_aiohttp_session)
    assert method == "PUT"
    assert url == "https://api.example.com/repos/owner/repo/contents/docs/a.md"
    assert kwargs["json"] == {
        "message": "add",
        "content": base64.b64encode(b"hello world").decode(),
        "branch": "main",
    }


@pytest.mark.asyncio
async def test_update_file_sends_existing_sha(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(200, json_data={})

    await github_client.update_file(
        "owner", "repo", "a.txt", UpdateFileRequest(message="edit", content="new", sha="old", branch="dev")
    )

    _, _, kwargs = _called_request(mock_aiohttp_session)
    assert kwargs["json"]["sha"] == "old"
    assert kwargs["json"]["content"] == base64.b64encode(b"new").decode()


@pytest.mark.asyncio
async def test_delete_file_sends_body(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(
        200, json_data={"commit": {}}
    )

    await github_client.delete_file("owner", "repo", "a.txt", DeleteFileRequest(message="rm", sha="s1", branch="dev"))

    method, _, kwargs = _called_request(mock_aiohttp_session)
    assert method == "DELETE"
    assert kwargs["json"] == {"message": "rm", "sha": "s1", "branch": "dev"}


@pytest.mark.asyncio
async def test_delete_label_quotes_name(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(204)

    await github_client.delete_label("owner", "repo", "needs review")

    _, url, _ = _called_request(mock_aiohttp_session)
    assert url == "https://api.example.com/repos/owner/repo/labels/needs%20review"


@pytest.mark.asyncio
async def test_create_installation_token(github_client, mock_aiohttp_session):
    mock_aiohttp_session.request.return_value = mock_aiohttp_session.create_mock_response(
        201, json_data={"token": "ghs_x", "expires_at": "2030-01-01T00:00:00Z"}
    )

    token = await github_client.create_installation_token(42)

    assert token["token"] == "ghs_x"
    method, url, _ = _called_request(mock_aiohttp_session)
    assert method == "POST"
    assert url == "https://api.example.com/app/installations/42/access_tokens"


@pytest.mark.asyncio
async def test_close_closes_session(github_client, mock_aiohttp_session):
    await github_client.close()

    mock_aiohttp_session.close.assert_awaited_once()
