# tests/unit/test_errors.py
import pytest

from sage_review.errors import redact_secrets


@pytest.mark.parametrize(
    "message, secret",
    [
        ("Invalid key sk-abcdefghijklmnopqrstuvwxyz123", "sk-abcdefghijklmnopqrstuvwxyz123"),
        ("token ghp_" + "a" * 36 + " rejected", "ghp_" + "a" * 36),
        ("token gho_" + "B" * 36, "gho_" + "B" * 36),
        ("pat github_pat_" + "c" * 82, "github_pat_" + "c" * 82),
        ("header Bearer abcdefghijklmnopqrstuvwxyz", "abcdefghijklmnopqrstuvwxyz"),
        ("Authorization: token123", "token123"),
        ("X-Api-Key: key-456", "key-456"),
        ("opaque " + "Z9" * 25, "Z9" * 25),
    ],
)
def test_secrets_are_redacted(message, secret):
    redacted = redact_secrets(message)

    assert secret not in redacted
    assert "REDACTED" in redacted


def test_plain_messages_are_untouched():
    message = "GitHub API POST /issues/42/comments failed with HTTP 403"
    assert redact_secrets(message) == message


@pytest.mark.parametrize("message", [None, ""])
def test_empty_message(message):
    assert redact_secrets(message) == "Unknown error"
