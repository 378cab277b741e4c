# tests/integration/test_github_client.py
import json

import httpx
import pytest

from sage_review.errors import ForgeAPIError
from sage_review.platforms.github import GitHubClient


REPO = "https://api.github.com/repos/acme/widgets"


@pytest.fixture
def client():
    return GitHubClient(token="ghs_testtoken1234567890", repository="acme/widgets")


@pytest.mark.asyncio
async def test_create_comment(httpx_mock, client):
    httpx_mock.add_response(url=f"{REPO}/issues/42/comments", method="POST", json={"id": 1})

    result = await client.create_comment(42, "hello")

    assert result == {"id": 1}
    request = httpx_mock.get_request()
    assert json.loads(request.content) == {"body": "hello"}
    assert request.headers["Authorization"] == "Bearer ghs_testtoken1234567890"
    assert request.headers["Accept"] == "application/vnd.github+json"


@pytest.mark.asyncio
async def test_update_comment(httpx_mock, client):
    httpx_mock.add_response(url=f"{REPO}/issues/comments/9", method="PATCH", json={"id": 9})

    await client.update_comment(9, "refreshed")

    assert json.loads(httpx_mock.get_request().content) == {"body": "refreshed"}


@pytest.mark.asyncio
async def test_create_review(httpx_mock, client):
    httpx_mock.add_response(url=f"{REPO}/pulls/42/reviews", method="POST", json={"id": 5})
    comments = [{"path": "src/app.py", "line": 12, "body": "fix"}]

    await client.create_review(42, "abc123", comments)

    assert json.loads(httpx_mock.get_request().content) == {
        "commit_id": "abc123",
        "event": "COMMENT",
        "comments": comments,
    }


@pytest.mark.asyncio
async def test_list_comments_follows_pages(httpx_mock, client):
    first_page = [{"id": i, "body": "x"} for i in range(100)]
    httpx_mock.add_response(url=f"{REPO}/issues/42/comments?per_page=100&page=1", json=first_page)
    httpx_mock.add_response(url=f"{REPO}/issues/42/comments?per_page=100&page=2", json=[{"id": 100, "body": "y"}])

    comments = await client.list_comments(42)

    assert len(comments) == 101
    assert comments[-1]["id"] == 100


@pytest.mark.asyncio
async def test_list_commits(httpx_mock, client):
    httpx_mock.add_response(
        url=f"{REPO}/pulls/42/commits?per_page=100&page=1",
        json=[{"sha": "first"}, {"sha": "last"}],
    )

    commits = await client.list_commits(42)

    assert [c["sha"] for c in commits] == ["first", "last"]


@pytest.mark.asyncio
async def test_http_error_becomes_forge_error(httpx_mock, client):
    httpx_mock.add_response(url=f"{REPO}/pulls/42/reviews", method="POST", status_code=422, json={"message": "bad line"})

    with pytest.raises(ForgeAPIError, match="GitHub API POST /pulls/42/reviews failed with HTTP 422"):
        await client.create_review(42, "abc123", [])


@pytest.mark.asyncio
async def test_transport_error_becomes_forge_error(httpx_mock, client):
    httpx_mock.add_exception(httpx.ConnectError("connection refused"))

    with pytest.raises(ForgeAPIError, match="connection refused"):
        await client.create_comment(42, "hello")


@pytest.mark.asyncio
async def test_enterprise_base_url(httpx_mock):
    client = GitHubClient(
        token="ghs_testtoken1234567890",
        repository="acme/widgets",
        base_url="https://github.example.com/api/v3/",
    )
    httpx_mock.add_response(url="https://github.example.com/api/v3/repos/acme/widgets/issues/1/comments", method="POST", json={})

    await client.create_comment(1, "hi")
