"""Per-provider token pricing with family inference for unseen model names.

Rates are USD per one million tokens. Lookup order for a model name:

1. exact match on the name with any ``:tag`` suffix stripped
2. the first :class:`PricingRule` whose needle occurs in the name
3. the family's default entry (its flagship tier)

Steps 2 and 3 log a warning so an unexpected model shows up in the run log.
A completely unknown model is priced at the flagship tier on purpose, so the
estimate errs high rather than low.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sage_review.models.review import PricingEntry, Usage


logger = logging.getLogger(__name__)

PER_MILLION = 1_000_000


@dataclass(frozen=True)
class PricingRule:
    """Maps any model name containing ``needle`` to ``key`` in the family table."""

    needle: str
    key: str
    label: str

    def matches(self, model_name: str) -> bool:
        return self.needle in model_name


@dataclass(frozen=True)
class PricingFamily:
    name: str
    table: Mapping[str, PricingEntry]
    rules: tuple[PricingRule, ...]
    default_key: str


_SONNET = PricingEntry(input=3.00, output=15.00, cache_write=6.00, cache_read=0.30)
_OPUS = PricingEntry(input=15.00, output=75.00, cache_write=30.00, cache_read=1.50)
_HAIKU = PricingEntry(input=0.80, output=4.00, cache_write=1.60, cache_read=0.08)

ANTHROPIC_PRICING = PricingFamily(
    name="Anthropic",
    table={
        "claude-sonnet-4-5-20250929": _SONNET,
        "claude-opus-4-5-20251101": _OPUS,
        "claude-haiku-4-5-20250101": _HAIKU,
        "claude-sonnet-4-20250514": _SONNET,
        "claude-3-5-sonnet-20241022": _SONNET,
        "claude-3-5-haiku-20241022": _HAIKU,
    },
    rules=(
        PricingRule("opus", "claude-opus-4-5-20251101", "Opus 4.5"),
        PricingRule("haiku", "claude-haiku-4-5-20250101", "Haiku 4.5"),
        PricingRule("sonnet", "claude-sonnet-4-5-20250929", "Sonnet 4.5"),
    ),
    default_key="claude-sonnet-4-5-20250929",
)

OPENAI_PRICING = PricingFamily(
    name="OpenAI",
    table={
        "gpt-4o-mini": PricingEntry(input=0.15, output=0.60),
        "gpt-4o": PricingEntry(input=2.50, output=10.00),
        "gpt-4-turbo-preview": PricingEntry(input=10.00, output=30.00),
        "gpt-4-turbo": PricingEntry(input=10.00, output=30.00),
        "gpt-4": PricingEntry(input=30.00, output=60.00),
        "gpt-3.5-turbo": PricingEntry(input=0.50, output=1.50),
    },
    # "gpt-4o" and "gpt-4-turbo" both contain "gpt-4"; keep the longer needles first.
    rules=(
        PricingRule("gpt-4o-mini", "gpt-4o-mini", "GPT-4o mini"),
        PricingRule("gpt-4o", "gpt-4o", "GPT-4o"),
        PricingRule("gpt-4-turbo", "gpt-4-turbo", "GPT-4 Turbo"),
        PricingRule("gpt-4", "gpt-4", "GPT-4"),
        PricingRule("gpt-3.5", "gpt-3.5-turbo", "GPT-3.5 Turbo"),
    ),
    default_key="gpt-4-turbo",
)

GOOGLE_PRICING = PricingFamily(
    name="Google",
    table={
        "gemini-1.5-pro": PricingEntry(input=3.50, output=10.50),
        "gemini-1.5-flash": PricingEntry(input=0.35, output=1.05),
        "gemini-pro": PricingEntry(input=0.50, output=1.50),
    },
    rules=(
        PricingRule("flash", "gemini-1.5-flash", "Gemini 1.5 Flash"),
        PricingRule("1.5-pro", "gemini-1.5-pro", "Gemini 1.5 Pro"),
        PricingRule("pro", "gemini-pro", "Gemini Pro"),
    ),
    default_key="gemini-1.5-pro",
)


def normalize_model_name(model_name: str) -> str:
    """Strip a trailing ``:version`` tag, e.g. ``claude-x:beta`` -> ``claude-x``."""
    return model_name.split(":", 1)[0]


def resolve_pricing(model_name: str | None, family: PricingFamily) -> PricingEntry:
    """Return the rates for ``model_name``; never raises."""
    normalized = normalize_model_name(model_name or "")

    if normalized in family.table:
        return family.table[normalized]

    for rule in family.rules:
        if rule.matches(normalized):
            logger.warning(f"Unknown {family.name} model {model_name}, using {rule.label} pricing")
            return family.table[rule.key]

    logger.warning(
        f"Unknown model {model_name}, using {family.default_key} pricing as fallback"
    )
    return family.table[family.default_key]


def _count(usage: Usage | Mapping[str, Any] | None, field: str) -> float:
    if usage is None:
        return 0
    if isinstance(usage, Mapping):
        value = usage.get(field)
    else:
        value = getattr(usage, field, None)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def compute_cost(usage: Usage | Mapping[str, Any] | None, prices: PricingEntry) -> float:
    """USD cost of one call. Cache terms apply only where the entry prices them."""
    cost = 0.0
    cost += _count(usage, "input_tokens") * (prices.input / PER_MILLION)
    # output includes thinking tokens
    cost += _count(usage, "output_tokens") * (prices.output / PER_MILLION)

    if prices.cache_write is not None:
        cost += _count(usage, "cache_creation_input_tokens") * (prices.cache_write / PER_MILLION)
    if prices.cache_read is not None:
        cost += _count(usage, "cache_read_input_tokens") * (prices.cache_read / PER_MILLION)

    return cost
