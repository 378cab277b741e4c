# src/sage_review/config.py
import re
from pathlib import PurePath
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sage_review.errors import ConfigurationError
from sage_review.models.review import Severity
from sage_review.providers.factory import ProviderName, get_supported_providers, resolve_provider_name


REPOSITORY_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+/[a-zA-Z0-9_.-]+$")
API_KEY_PATTERN = re.compile(r"^[a-zA-Z0-9_\-:.]+$")
PROJECT_ID_PATTERN = re.compile(r"^[a-z][a-z0-9-]{4,28}[a-z0-9]$")
GIT_REF_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._/-]*$")

MIN_MAX_TOKENS = 1000
MAX_MAX_TOKENS = 200000
MAX_THINKING_BUDGET = 100000
MIN_ANTHROPIC_THINKING_BUDGET = 1024
API_KEY_MIN_LENGTH = 10
API_KEY_MAX_LENGTH = 500
MODEL_NAME_MAX_LENGTH = 100


class Settings(BaseSettings):
    """Run configuration, read from the environment the CI job provides."""

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    # LLM provider
    llm_provider: str = "anthropic"
    llm_api_key: str | None = None
    llm_model: str | None = None

    # GitHub
    github_token: str | None = None
    github_repository: str | None = None
    github_api_url: str = "https://api.github.com"
    github_output: str | None = None
    pr_number: str | None = None
    base_ref: str | None = None
    head_sha: str | None = None
    workspace: str | None = None

    # Review
    thinking_budget: int = 10000
    max_tokens: int = 50000
    guidelines_path: str = "SAGE.md"
    severity_threshold: str = "LOW"
    fail_on_errors: bool = False
    dry_run: bool = False
    max_files: int = Field(default=50, ge=0)
    max_lines: int = Field(default=2000, ge=0)

    # Google Vertex AI
    google_project_id: str | None = None
    google_location: str = "us-central1"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    debug: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        return value.strip().upper() if isinstance(value, str) else value

    @property
    def provider(self) -> ProviderName | None:
        return resolve_provider_name(self.llm_provider)

    @property
    def pr(self) -> int:
        """PR number as an int; only meaningful after validate_settings passed."""
        return int(self.pr_number)

    @property
    def threshold(self) -> Severity:
        return Severity(self.severity_threshold.strip().upper())


_REQUIRED = [
    ("llm_provider", "provider"),
    ("llm_api_key", "apiKey"),
    ("github_token", "githubToken"),
    ("github_repository", "repository"),
    ("pr_number", "prNumber"),
    ("base_ref", "baseBranch"),
    ("workspace", "workspace"),
]


def parse_pr_number(value: str | None) -> int | None:
    if not value:
        return None
    try:
        number = int(value.strip())
    except ValueError:
        return None
    return number if number > 0 else None


def validate_settings(settings: Settings) -> None:
    """Reject anything malformed before any I/O happens.

    Messages never echo credential values.
    """
    for field, label in _REQUIRED:
        if not getattr(settings, field):
            raise ConfigurationError(f"Missing required configuration: {label}")

    if parse_pr_number(settings.pr_number) is None:
        raise ConfigurationError(
            f"Invalid PR number: must be a positive integer (got: {settings.pr_number})"
        )

    if not REPOSITORY_PATTERN.match(settings.github_repository):
        raise ConfigurationError(
            f"Invalid repository format: must be owner/repo (got: {settings.github_repository})"
        )

    if settings.provider is None:
        raise ConfigurationError(
            f"Unsupported provider: {settings.llm_provider}. "
            f"Supported: {', '.join(get_supported_providers())}"
        )

    valid_severities = [severity.value for severity in Severity]
    if settings.severity_threshold.strip().upper() not in valid_severities:
        raise ConfigurationError(
            f"Invalid severity threshold: {settings.severity_threshold}. "
            f"Must be one of: {', '.join(valid_severities)}"
        )

    if not MIN_MAX_TOKENS <= settings.max_tokens <= MAX_MAX_TOKENS:
        raise ConfigurationError(
            f"Invalid max-tokens: must be between {MIN_MAX_TOKENS} and {MAX_MAX_TOKENS} "
            f"(got: {settings.max_tokens})"
        )

    if not 0 <= settings.thinking_budget <= MAX_THINKING_BUDGET:
        raise ConfigurationError(
            f"Invalid thinking-budget: must be between 0 and {MAX_THINKING_BUDGET} "
            f"(got: {settings.thinking_budget})"
        )

    # Anthropic rejects extended thinking outside [1024, max_tokens)
    if settings.provider is ProviderName.ANTHROPIC and settings.thinking_budget:
        if settings.thinking_budget < MIN_ANTHROPIC_THINKING_BUDGET:
            raise ConfigurationError(
                f"Invalid thinking-budget: must be 0 or at least {MIN_ANTHROPIC_THINKING_BUDGET} "
                f"(got: {settings.thinking_budget})"
            )
        if settings.thinking_budget >= settings.max_tokens:
            raise ConfigurationError(
                f"Invalid thinking-budget: must be less than max-tokens ({settings.max_tokens}) "
                f"(got: {settings.thinking_budget})"
            )

    api_key = settings.llm_api_key
    if len(api_key) < API_KEY_MIN_LENGTH:
        raise ConfigurationError(f"Invalid API key: too short (minimum {API_KEY_MIN_LENGTH} characters)")
    if len(api_key) > API_KEY_MAX_LENGTH:
        raise ConfigurationError(f"Invalid API key: too long (maximum {API_KEY_MAX_LENGTH} characters)")
    if not API_KEY_PATTERN.match(api_key):
        raise ConfigurationError("Invalid API key: contains invalid characters")

    if len(settings.github_token) < API_KEY_MIN_LENGTH:
        raise ConfigurationError("Invalid GitHub token: too short")

    if settings.llm_model is not None and not 0 < len(settings.llm_model) <= MODEL_NAME_MAX_LENGTH:
        raise ConfigurationError(
            f"Invalid model name: must be between 1 and {MODEL_NAME_MAX_LENGTH} characters "
            f"(got: {len(settings.llm_model)} characters)"
        )

    if not GIT_REF_PATTERN.match(settings.base_ref) or ".." in settings.base_ref:
        raise ConfigurationError(f"Invalid base ref: {settings.base_ref}")

    if settings.provider is ProviderName.GOOGLE:
        if not settings.google_project_id:
            raise ConfigurationError("Google provider requires GOOGLE_PROJECT_ID environment variable")
        if not PROJECT_ID_PATTERN.match(settings.google_project_id):
            raise ConfigurationError("Invalid Google Project ID format")

    workspace = PurePath(settings.workspace)
    if ".." in workspace.parts or not workspace.is_absolute():
        raise ConfigurationError('Invalid workspace path: must be absolute and not contain ".."')
