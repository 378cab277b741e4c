"""Decide which changed files are sent to the model."""

import logging
import re
from dataclasses import dataclass, field
from re import Pattern


logger = logging.getLogger(__name__)

# Files that add noise and no review value
EXCLUDED_PATTERNS: list[Pattern[str]] = [
    # Lock files
    re.compile(r"\.lock$"),
    re.compile(r"package-lock\.json$"),
    re.compile(r"yarn\.lock$"),
    re.compile(r"Gemfile\.lock$"),
    re.compile(r"poetry\.lock$"),
    re.compile(r"go\.sum$"),
    # Minified assets
    re.compile(r"\.min\.(js|css)$"),
    # Build output and vendored dependencies
    re.compile(r"dist/"),
    re.compile(r"build/"),
    re.compile(r"target/"),
    re.compile(r"node_modules/"),
    re.compile(r"vendor/"),
    # Generated code
    re.compile(r"\.generated\."),
    re.compile(r"_pb2\.py$"),
    re.compile(r"_pb2_grpc\.py$"),
    re.compile(r"\.pb\.go$"),
    # Binary/media files
    re.compile(r"\.(png|jpg|jpeg|gif|svg|ico|pdf|woff|woff2|ttf|eot)$"),
    # Snapshots
    re.compile(r"__snapshots__/"),
    re.compile(r"\.snap$"),
    # Migrations
    re.compile(r"migrations?/"),
    # CI workflows, reviewing them would retrigger the review
    re.compile(r"^\.github/workflows/"),
]

# Never sent to a third-party model
SENSITIVE_PATTERNS: list[Pattern[str]] = [
    re.compile(r"\.env$"),
    re.compile(r"\.env\."),
    re.compile(r"credentials", re.IGNORECASE),
    re.compile(r"secrets", re.IGNORECASE),
    re.compile(r"\.pem$"),
    re.compile(r"\.key$"),
    re.compile(r"\.p12$"),
    re.compile(r"\.pfx$"),
    re.compile(r"id_rsa"),
    re.compile(r"id_dsa"),
    re.compile(r"id_ecdsa"),
    re.compile(r"id_ed25519"),
    re.compile(r"\.ppk$"),
    re.compile(r"\.keystore$"),
    re.compile(r"\.jks$"),
    re.compile(r"token", re.IGNORECASE),
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"api[-_]?key", re.IGNORECASE),
]


@dataclass
class FileSelection:
    reviewable: list[str] = field(default_factory=list)
    excluded: list[str] = field(default_factory=list)
    sensitive: list[str] = field(default_factory=list)


def is_sensitive(file_path: str) -> bool:
    return any(pattern.search(file_path) for pattern in SENSITIVE_PATTERNS)


def is_excluded(file_path: str) -> bool:
    return any(pattern.search(file_path) for pattern in EXCLUDED_PATTERNS)


def filter_files(files: list[str]) -> FileSelection:
    """Split changed paths into reviewable, excluded and sensitive.

    Sensitive patterns are checked first, so a path matching both lists is
    reported as sensitive.
    """
    selection = FileSelection()
    for file_path in files:
        if is_sensitive(file_path):
            selection.sensitive.append(file_path)
        elif is_excluded(file_path):
            selection.excluded.append(file_path)
        else:
            selection.reviewable.append(file_path)

    if selection.sensitive:
        logger.warning(
            "Skipping sensitive files from review (security protection):\n"
            + "\n".join(f"  - {path}" for path in selection.sensitive)
        )
    if selection.excluded:
        logger.info(f"Excluded {len(selection.excluded)} generated, vendored or binary file(s)")

    return selection
