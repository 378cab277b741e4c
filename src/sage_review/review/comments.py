# src/sage_review/review/comments.py
from sage_review.models.review import Finding, Severity, SeverityCounts, Usage


SUMMARY_MARKER = "<!-- sage-review-summary -->"

SEVERITY_ICON = {
    Severity.CRITICAL: "🚨",
    Severity.HIGH: "⚠️",
    Severity.MEDIUM: "💡",
    Severity.LOW: "ℹ️",
}

SEVERITY_STATUS = {
    Severity.CRITICAL: "❌ Must fix",
    Severity.HIGH: "⚠️ Should fix",
    Severity.MEDIUM: "📝 Consider",
    Severity.LOW: "💬 Optional",
}

NO_FILES_BODY = """🧙‍♂️ **Sage Review Complete**

No reviewable files found in this PR. Only lock files, generated code, or binaries were changed.

*This is an automated review.*"""


def format_comment(finding: Finding, provider: str) -> str:
    """Body of one inline review comment."""
    suggestion = f"**Suggested fix:**\n{finding.suggestion}\n\n" if finding.suggestion else ""
    return (
        f"{SEVERITY_ICON[finding.severity]} **Sage Review** [{finding.severity.value}]\n\n"
        f"**{finding.title}**\n\n"
        f"{finding.description}\n\n"
        f"{suggestion}"
        f"---\n*Reviewed with Sage using {provider}*"
    )


def format_fallback_comment(path: str, line: int, body: str) -> str:
    """Issue comment used when an inline review cannot be attached to the diff."""
    return f"**{path}:{line}**\n\n{body}"


def _section(severity: Severity, findings: list[Finding], expanded: bool = False) -> str:
    items = []
    for i, f in enumerate(findings, 1):
        fix = f"\n\n**Suggested fix:**\n```\n{f.suggestion}\n```" if f.suggestion else ""
        items.append(f"#### {i}. {f.title}\n\n**📄** `{f.file}:{f.line}`\n\n{f.description}{fix}")
    label = severity.value.capitalize()
    return (
        f"<details{' open' if expanded else ''}>\n"
        f"<summary><strong>{SEVERITY_ICON[severity]} {label} Priority Issues ({len(findings)})</strong></summary>\n\n"
        + "\n\n---\n\n".join(items)
        + "\n\n</details>"
    )


def build_summary(
    findings: list[Finding],
    counts: SeverityCounts,
    usage: Usage,
    model: str,
    cost: float,
    provider: str,
) -> str:
    """Markdown for the single summary comment. Ends with SUMMARY_MARKER."""
    ready = counts.critical == 0 and counts.high == 0
    total = len(findings)
    plural = "" if total == 1 else "s"

    lines = [
        f"# {'✨' if ready else '🔍'} Sage Code Review",
        "",
        f"{'✅ **Ready to merge**' if ready else '⚠️ **Review required**'} • **{total}** issue{plural} found",
        "",
    ]
    if ready:
        lines.append("> 🎉 **No critical or high-priority issues detected!**")
    else:
        blocking = counts.critical + counts.high
        parts = []
        if counts.critical:
            parts.append(f"**{counts.critical}** critical")
        if counts.high:
            parts.append(f"**{counts.high}** high-priority")
        lines.append(
            f"> ⚠️ **Action required:** This PR has {' and '.join(parts)} "
            f"issue{'' if blocking == 1 else 's'} that should be addressed."
        )

    lines += [
        "",
        "## 📊 Summary",
        "",
        "| Severity | Count | Status |",
        "|----------|-------|--------|",
    ]
    for severity in Severity:
        count = getattr(counts, severity.value.lower())
        status = SEVERITY_STATUS[severity] if count else "✅"
        lines.append(f"| {SEVERITY_ICON[severity]} {severity.value.capitalize()} | {count} | {status} |")

    for severity in Severity:
        group = [f for f in findings if f.severity is severity]
        if group:
            lines += ["", _section(severity, group, expanded=severity in (Severity.CRITICAL, Severity.HIGH))]

    tokens = f"{usage.input_tokens:,} input / {usage.output_tokens:,} output"
    lines += [
        "",
        "---",
        "",
        "<details>",
        "<summary>📈 <strong>Review Metadata</strong></summary>",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| 🤖 Provider | {provider} |",
        f"| 🔧 Model | `{model}` |",
        f"| 🔢 Tokens | {tokens} |",
    ]
    if usage.cache_read_input_tokens:
        cached = usage.cache_read_input_tokens
        share = cached / (usage.input_tokens + cached) * 100
        lines.append(f"| ⚡ Cache | {cached:,} tokens ({share:.0f}% cached) |")
    lines += [
        f"| 💰 Cost | ${cost:.4f} |",
        "",
        "</details>",
        "",
        "---",
        "",
        "<sub>🧙‍♂️ Automated review by **Sage** • Comment `/sage` or add label `sage` to re-review "
        "• Human approval still required</sub>",
        SUMMARY_MARKER,
    ]
    return "\n".join(lines)


def build_error_body(message: str, supported_providers: list[str]) -> str:
    return f"""🧙‍♂️ **Sage Review Failed**

The automated code review encountered an error:

```
{message}
```

### Troubleshooting

1. **Check API key**: Verify `LLM_API_KEY` secret is set correctly
2. **Check provider**: Ensure provider is supported ({', '.join(supported_providers)})
3. **Check workflow logs**: View detailed logs in the Actions tab"""


def build_size_warning_body(files_changed: int, lines_changed: int, max_files: int, max_lines: int) -> str:
    return f"""🧙‍♂️ **Sage Review Skipped**

This PR exceeds the size limits for automated review:
- **Files changed:** {files_changed} (limit: {max_files})
- **Lines changed:** {lines_changed} (limit: {max_lines})

Split this PR into smaller, focused changes, or raise `MAX_FILES` / `MAX_LINES` for this workflow.
Larger PRs take longer and cost more to review."""
