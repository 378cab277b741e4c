from abc import ABC, abstractmethod
from typing import Any


class GitPlatform(ABC):
    """Forge operations the review engine publishes through."""

    @abstractmethod
    async def list_comments(self, pr_number: int) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    async def create_comment(self, pr_number: int, body: str) -> dict[str, Any]:
        pass

    @abstractmethod
    async def update_comment(self, comment_id: int, body: str) -> dict[str, Any]:
        pass

    @abstractmethod
    async def create_review(
        self,
        pr_number: int,
        commit_sha: str,
        comments: list[dict[str, Any]],
    ) -> dict[str, Any]:
        pass

    @abstractmethod
    async def list_commits(self, pr_number: int) -> list[dict[str, Any]]:
        pass


class DiffSource(ABC):
    @abstractmethod
    async def fetch_diff(self, base_ref: str) -> tuple[str, list[str]]:
        """Return the PR diff against ``base_ref`` and the changed paths."""
