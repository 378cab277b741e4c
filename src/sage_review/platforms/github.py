from typing import Any

import httpx

from .base import GitPlatform
from sage_review.errors import ForgeAPIError


class GitHubClient(GitPlatform):
    PER_PAGE = 100

    def __init__(self, token: str, repository: str, base_url: str = "https://api.github.com"):
        self.token = token
        self.repository = repository
        self.base_url = base_url.rstrip("/")
        self.repo_url = f"{self.base_url}/repos/{repository}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "sage-review",
        }

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        async with httpx.AsyncClient() as client:
            try:
                response = await client.request(
                    method,
                    f"{self.repo_url}{path}",
                    headers=self._headers(),
                    timeout=30.0,
                    **kwargs,
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise ForgeAPIError(
                    f"GitHub API {method} {path} failed with HTTP {e.response.status_code}"
                ) from e
            except httpx.HTTPError as e:
                raise ForgeAPIError(f"GitHub API {method} {path} failed: {e}") from e
        return response.json()

    async def _paginate(self, path: str) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            batch = await self._request("GET", path, params={"per_page": self.PER_PAGE, "page": page})
            items.extend(batch)
            if len(batch) < self.PER_PAGE:
                return items
            page += 1

    async def list_comments(self, pr_number: int) -> list[dict[str, Any]]:
        return await self._paginate(f"/issues/{pr_number}/comments")

    async def create_comment(self, pr_number: int, body: str) -> dict[str, Any]:
        return await self._request("POST", f"/issues/{pr_number}/comments", json={"body": body})

    async def update_comment(self, comment_id: int, body: str) -> dict[str, Any]:
        return await self._request("PATCH", f"/issues/comments/{comment_id}", json={"body": body})

    async def create_review(
        self,
        pr_number: int,
        commit_sha: str,
        comments: list[dict[str, Any]],
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/pulls/{pr_number}/reviews",
            json={"commit_id": commit_sha, "event": "COMMENT", "comments": comments},
        )

    async def list_commits(self, pr_number: int) -> list[dict[str, Any]]:
        return await self._paginate(f"/pulls/{pr_number}/commits")
