from .review import (
    Finding,
    PricingEntry,
    ReviewOptions,
    ReviewOutcome,
    ReviewRequest,
    ReviewResponse,
    Severity,
    SeverityCounts,
    SEVERITY_ORDER,
    Usage,
)

__all__ = [
    "Finding",
    "PricingEntry",
    "ReviewOptions",
    "ReviewOutcome",
    "ReviewRequest",
    "ReviewResponse",
    "Severity",
    "SeverityCounts",
    "SEVERITY_ORDER",
    "Usage",
]
