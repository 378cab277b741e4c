# src/sage_review/outputs.py
import logging
from pathlib import Path

from sage_review.models.review import ReviewOutcome


logger = logging.getLogger(__name__)


def format_outputs(outcome: ReviewOutcome) -> dict[str, str]:
    cost = outcome.cost_estimate or 0.0
    return {
        "completed": "true" if outcome.completed else "false",
        "findings_count": str(outcome.findings_count),
        "critical_count": str(outcome.counts.critical),
        "high_count": str(outcome.counts.high),
        "cost_estimate": f"{cost:.4f}",
    }


def write_outputs(outcome: ReviewOutcome, path: str | Path | None) -> None:
    """Append ``key=value`` lines for downstream workflow steps."""
    if not path:
        return
    lines = "".join(f"{key}={value}\n" for key, value in format_outputs(outcome).items())
    with open(path, "a", encoding="utf-8") as f:
        f.write(lines)
    logger.debug(f"Wrote outputs to {path}")
