# src/sage_review/review/guidelines.py
import logging
from pathlib import Path, PurePath


logger = logging.getLogger(__name__)

MAX_GUIDELINES_CHARS = 50_000


def read_guidelines(workspace: str | Path, guidelines_path: str) -> str:
    """Read optional project guidelines from a workspace-relative path.

    Returns an empty string when the path is unsafe, missing or unreadable.
    """
    if not guidelines_path:
        return ""

    relative = PurePath(guidelines_path)
    if relative.is_absolute() or ".." in relative.parts:
        logger.warning('Invalid guidelines path (contains ".." or is absolute), skipping')
        return ""

    root = Path(workspace).resolve()
    path = (root / relative).resolve()
    if not path.is_relative_to(root):
        logger.warning("Guidelines path is outside workspace, skipping for security")
        return ""

    if not path.is_file():
        logger.info(f"No guidelines found at {guidelines_path}, using defaults")
        return ""

    try:
        guidelines = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to read guidelines: {e}")
        return ""

    if len(guidelines) > MAX_GUIDELINES_CHARS:
        logger.warning(f"Guidelines file too large (>{MAX_GUIDELINES_CHARS} chars), truncating")
        return guidelines[:MAX_GUIDELINES_CHARS]

    logger.info(f"Found guidelines at {guidelines_path} ({len(guidelines)} chars)")
    return guidelines
