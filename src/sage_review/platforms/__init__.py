from .base import DiffSource, GitPlatform
from .git import LocalGitRepository
from .github import GitHubClient

__all__ = ["DiffSource", "GitPlatform", "GitHubClient", "LocalGitRepository"]
