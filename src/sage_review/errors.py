# src/sage_review/errors.py
import re


class SageError(Exception):
    """Base class for all review errors."""


class ConfigurationError(SageError):
    """Malformed or missing input. Terminal, never retried."""


class MissingCredentialError(ConfigurationError):
    pass


class UnknownProviderError(ConfigurationError):
    pass


class MissingProjectIdError(ConfigurationError):
    pass


class UpstreamProviderError(SageError):
    """LLM vendor call failed after all retry attempts."""


class ForgeAPIError(SageError):
    """A call to the forge (GitHub or local git) failed."""


class ParseError(SageError):
    """Model output could not be interpreted. Never escalated past the parser."""


_REDACTIONS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"sk-[a-zA-Z0-9_\-]{20,}"), "sk-***REDACTED***"),
    (re.compile(r"ghp_[a-zA-Z0-9]{36,}"), "ghp_***REDACTED***"),
    (re.compile(r"gho_[a-zA-Z0-9]{36,}"), "gho_***REDACTED***"),
    (re.compile(r"github_pat_[a-zA-Z0-9_]{82,}"), "github_pat_***REDACTED***"),
    (re.compile(r"Bearer [a-zA-Z0-9_\-.]{20,}"), "Bearer ***REDACTED***"),
    (re.compile(r"Authorization: [^\s]+"), "Authorization: ***REDACTED***"),
    (re.compile(r"x-api-key: [^\s]+", re.IGNORECASE), "x-api-key: ***REDACTED***"),
    (re.compile(r"\b[a-zA-Z0-9_\-]{40,}\b"), "***REDACTED***"),
]


def redact_secrets(message: str | None) -> str:
    """Scrub secret-shaped substrings before a message is logged or posted."""
    if not message:
        return "Unknown error"

    sanitized = message
    for pattern, replacement in _REDACTIONS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized
