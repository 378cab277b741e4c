# src/sage_review/review/findings.py
import json
import logging
from typing import Any

from pydantic import ValidationError

from sage_review.errors import ParseError
from sage_review.models.review import Finding, Severity, SeverityCounts, SEVERITY_ORDER


logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()


def extract_json_array(text: str) -> list[Any]:
    """Return the first JSON array embedded in ``text``.

    The model is asked for bare JSON but often wraps it in prose or a code
    fence. Every ``[`` is tried as the start of an array; the first array that
    is empty or holds an object wins, otherwise the first array found at all.
    """
    first_array: list[Any] | None = None
    start = text.find("[")
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, list):
            if not value or any(isinstance(item, dict) for item in value):
                return value
            if first_array is None:
                first_array = value
        start = text.find("[", start + 1)

    if first_array is None:
        raise ParseError("No JSON array found in response")
    return first_array


def parse_findings(response_text: str) -> list[Finding]:
    """Turn raw model output into validated findings; never raises."""
    try:
        raw_findings = extract_json_array(response_text or "")
    except ParseError as e:
        logger.info(f"No structured findings found in response: {e}")
        return []

    findings = []
    for item in raw_findings:
        if not isinstance(item, dict):
            logger.warning(f"Skipping invalid finding: {json.dumps(item)}")
            continue
        try:
            findings.append(Finding.model_validate(item))
        except ValidationError as e:
            fields = ", ".join(str(error["loc"][0]) for error in e.errors() if error["loc"])
            logger.warning(f"Skipping invalid finding ({fields}): {json.dumps(item)[:200]}")

    logger.info(f"Parsed {len(findings)} valid findings")
    return findings


def passes_threshold(severity: Severity, threshold: Severity) -> bool:
    return SEVERITY_ORDER[severity] >= SEVERITY_ORDER[threshold]


def filter_by_severity(findings: list[Finding], threshold: Severity) -> list[Finding]:
    return [finding for finding in findings if passes_threshold(finding.severity, threshold)]


def count_by_severity(findings: list[Finding]) -> SeverityCounts:
    counts = SeverityCounts()
    for finding in findings:
        field = finding.severity.value.lower()
        setattr(counts, field, getattr(counts, field) + 1)
    return counts
