# src/sage_review/main.py
import asyncio
import logging
import os
import sys

from pydantic import ValidationError

from sage_review.config import REPOSITORY_PATTERN, Settings
from sage_review.errors import redact_secrets
from sage_review.logging_config import setup_logging
from sage_review.models.review import ReviewOutcome
from sage_review.outputs import write_outputs
from sage_review.platforms.base import GitPlatform
from sage_review.platforms.git import LocalGitRepository
from sage_review.platforms.github import GitHubClient
from sage_review.review.engine import ReviewEngine


logger = logging.getLogger(__name__)


def build_forge(settings: Settings) -> GitPlatform | None:
    """GitHub client, or None when there is nowhere safe to post."""
    if settings.dry_run or not settings.github_token or not settings.github_repository:
        return None
    if not REPOSITORY_PATTERN.match(settings.github_repository):
        return None
    return GitHubClient(
        token=settings.github_token,
        repository=settings.github_repository,
        base_url=settings.github_api_url,
    )


async def run_review(settings: Settings) -> ReviewOutcome:
    engine = ReviewEngine(
        settings=settings,
        forge=build_forge(settings),
        diff_source=LocalGitRepository(settings.workspace or os.getcwd()),
    )
    return await engine.run()


def main() -> None:
    try:
        settings = Settings()
    except ValidationError as e:
        setup_logging()
        logger.error(f"Invalid configuration: {redact_secrets(str(e))}")
        write_outputs(ReviewOutcome(completed=False), os.environ.get("GITHUB_OUTPUT"))
        sys.exit(1)

    setup_logging(settings.log_level, settings.debug)
    logger.info("Sage review starting...")

    outcome = asyncio.run(run_review(settings))
    write_outputs(outcome, settings.github_output)

    if outcome.completed:
        logger.info(f"Review complete: {outcome.findings_count} findings")
    elif outcome.skipped_reason:
        logger.info(f"Review skipped: {outcome.skipped_reason}")

    if not outcome.completed and settings.fail_on_errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
