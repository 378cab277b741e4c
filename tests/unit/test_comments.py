# tests/unit/test_comments.py
import pytest

from sage_review.models.review import Finding, Severity, Usage
from sage_review.review.comments import (
    SUMMARY_MARKER,
    build_error_body,
    build_size_warning_body,
    build_summary,
    format_comment,
    format_fallback_comment,
)
from sage_review.review.findings import count_by_severity


def make_finding(severity=Severity.HIGH, suggestion="Use params."):
    return Finding(
        severity=severity,
        file="src/db.py",
        line=12,
        title="SQL injection",
        description="Query built from user input.",
        suggestion=suggestion,
    )


def test_format_comment():
    body = format_comment(make_finding(), "Anthropic Claude")

    assert body.startswith("⚠️ **Sage Review** [HIGH]")
    assert "**SQL injection**" in body
    assert "**Suggested fix:**\nUse params." in body
    assert body.endswith("*Reviewed with Sage using Anthropic Claude*")


def test_format_comment_without_suggestion():
    assert "Suggested fix" not in format_comment(make_finding(suggestion=None), "OpenAI")


def test_fallback_comment_names_location():
    assert format_fallback_comment("src/db.py", 12, "body") == "**src/db.py:12**\n\nbody"


def test_summary_ready_to_merge():
    findings = [make_finding(Severity.LOW)]
    summary = build_summary(
        findings, count_by_severity(findings), Usage(input_tokens=1200, output_tokens=300), "gpt-4o", 0.006, "OpenAI"
    )

    assert "✅ **Ready to merge**" in summary
    assert "**1** issue found" in summary
    assert "| 🔢 Tokens | 1,200 input / 300 output |" in summary
    assert "| 💰 Cost | $0.0060 |" in summary
    assert "Cache" not in summary
    assert summary.endswith(SUMMARY_MARKER)


def test_summary_with_blocking_findings():
    findings = [make_finding(Severity.CRITICAL), make_finding(Severity.HIGH), make_finding(Severity.HIGH)]
    usage = Usage(input_tokens=1000, output_tokens=500, cache_read_input_tokens=3000)
    summary = build_summary(findings, count_by_severity(findings), usage, "claude-sonnet-4-5", 0.01, "Anthropic Claude")

    assert "⚠️ **Review required**" in summary
    assert "**1** critical and **2** high-priority issues" in summary
    assert "<details open>" in summary
    assert "Critical Priority Issues (1)" in summary
    assert "High Priority Issues (2)" in summary
    assert "3,000 tokens (75% cached)" in summary


def test_error_body_lists_providers():
    body = build_error_body("Boom", ["anthropic", "openai", "google"])

    assert "```\nBoom\n```" in body
    assert "(anthropic, openai, google)" in body


def test_size_warning_body():
    body = build_size_warning_body(80, 5000, 50, 2000)

    assert "**Files changed:** 80 (limit: 50)" in body
    assert "**Lines changed:** 5000 (limit: 2000)" in body
