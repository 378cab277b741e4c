# src/sage_review/review/parser.py
import logging
from dataclasses import dataclass

from unidiff import PatchSet
from unidiff.errors import UnidiffParseError


logger = logging.getLogger(__name__)


@dataclass
class DiffFile:
    path: str
    added: int = 0
    removed: int = 0


def parse_diff(diff_text: str) -> list[DiffFile]:
    """Parse unified diff and extract per-file change counts."""
    try:
        patch = PatchSet(diff_text)
    except UnidiffParseError as e:
        logger.warning(f"Could not parse diff: {e}")
        return []

    return [
        DiffFile(
            path=patched_file.path,
            added=patched_file.added,
            removed=patched_file.removed,
        )
        for patched_file in patch
    ]


def count_changed_lines(diff_text: str) -> int:
    """Added plus removed lines across the whole diff."""
    return sum(f.added + f.removed for f in parse_diff(diff_text))


def select_files(diff_text: str, paths: list[str]) -> str | None:
    """Keep only the sections of ``diff_text`` that touch ``paths``.

    Returns None when the diff cannot be parsed.
    """
    try:
        patch = PatchSet(diff_text)
    except UnidiffParseError as e:
        logger.warning(f"Could not parse diff: {e}")
        return None

    wanted = set(paths)
    return "".join(str(patched_file) for patched_file in patch if patched_file.path in wanted)
