"""Terminal rendering of a review for dry runs."""

from rich.console import Console
from rich.markup import escape

from sage_review.models.review import Finding, ReviewResponse, Severity, SeverityCounts


_SEVERITY_COLOR = {
    Severity.CRITICAL: "red",
    Severity.HIGH: "yellow",
    Severity.MEDIUM: "blue",
    Severity.LOW: "dim",
}


def print_report(
    findings: list[Finding],
    counts: SeverityCounts,
    response: ReviewResponse,
    cost: float,
    provider: str,
    console: Console | None = None,
) -> None:
    """Print findings, token usage and cost without posting anything."""
    console = console or Console()
    usage = response.usage
    ready = counts.critical == 0 and counts.high == 0

    console.rule("[bold cyan]SAGE CODE REVIEW RESULTS[/bold cyan]")
    status = "[green]✅ READY TO MERGE[/green]" if ready else "[yellow]⚠️  REVIEW REQUIRED[/yellow]"
    console.print(f"\n[bold]{status}[/bold] • {len(findings)} issue{'' if len(findings) == 1 else 's'} found\n")

    if findings:
        for severity in Severity:
            count = getattr(counts, severity.value.lower())
            if count:
                color = _SEVERITY_COLOR[severity]
                console.print(f"   {severity.value.capitalize():<9} [{color}]{count}[/{color}]")
    else:
        console.print("[green bold]✓ No issues found![/green bold]")

    console.print(f"\n   Provider:  {provider}")
    console.print(f"   Model:     {escape(response.model)}")
    console.print(f"   Cost:      ${cost:.4f}")
    console.print(f"   Tokens:    {usage.input_tokens:,} in / {usage.output_tokens:,} out")
    if usage.cache_creation_input_tokens:
        console.print(f"   Cache write: {usage.cache_creation_input_tokens:,} tokens")
    if usage.cache_read_input_tokens:
        console.print(f"   Cache read:  {usage.cache_read_input_tokens:,} tokens")
    console.print()

    for severity in Severity:
        group = [f for f in findings if f.severity is severity]
        if not group:
            continue
        color = _SEVERITY_COLOR[severity]
        console.print(f"[{color} bold]{severity.value}[/{color} bold] [dim]({len(group)})[/dim]")
        for finding in group:
            console.print(f"  [bold cyan]{escape(finding.file)}[/bold cyan][dim]:{finding.line}[/dim]")
            console.print(f"  [bold]{escape(finding.title)}[/bold]")
            for line in finding.description.splitlines():
                console.print(f"     {escape(line)}")
            if finding.suggestion:
                console.print("     [green]Suggested fix:[/green]")
                for line in finding.suggestion.splitlines():
                    console.print(f"        [dim]{escape(line)}[/dim]")
            console.print()

    console.rule(f"[dim]Reviewed with {escape(response.model)}[/dim]")
