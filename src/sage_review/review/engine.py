# src/sage_review/review/engine.py
import logging
from collections.abc import Callable
from typing import Any

from rich.console import Console

from sage_review.config import Settings, parse_pr_number, validate_settings
from sage_review.errors import ForgeAPIError, SageError, redact_secrets
from sage_review.models.review import (
    Finding,
    ReviewOptions,
    ReviewOutcome,
    ReviewRequest,
    ReviewResponse,
)
from sage_review.platforms.base import DiffSource, GitPlatform
from sage_review.providers.base import LLMProvider
from sage_review.providers.factory import create_provider, get_supported_providers
from .comments import (
    NO_FILES_BODY,
    SUMMARY_MARKER,
    build_error_body,
    build_size_warning_body,
    build_summary,
    format_comment,
    format_fallback_comment,
)
from .filters import filter_files
from .findings import count_by_severity, filter_by_severity, parse_findings
from .guidelines import read_guidelines
from .parser import count_changed_lines, select_files
from .prompts import SYSTEM_PROMPT, build_user_prompt
from .report import print_report


logger = logging.getLogger(__name__)

ProviderFactory = Callable[[str, str, str | None, dict[str, Any] | None], LLMProvider]


class ReviewEngine:
    """Runs one review of one pull request from diff to posted summary.

    ``run`` always returns an outcome; failures are redacted, reported on the
    PR when possible and surfaced as ``completed=False``.
    """

    def __init__(
        self,
        settings: Settings,
        forge: GitPlatform | None,
        diff_source: DiffSource,
        provider_factory: ProviderFactory = create_provider,
        console: Console | None = None,
    ):
        self.settings = settings
        self.forge = forge
        self.diff_source = diff_source
        self.provider_factory = provider_factory
        self.console = console

    async def run(self) -> ReviewOutcome:
        try:
            return await self._review()
        except SageError as e:
            return await self._fail(e)
        except Exception as e:
            logger.debug("Unexpected error during review", exc_info=e)
            return await self._fail(e)

    async def _review(self) -> ReviewOutcome:
        settings = self.settings
        validate_settings(settings)
        logger.info(
            f"Reviewing PR #{settings.pr} in {settings.github_repository} "
            f"(provider: {settings.llm_provider}, dry run: {settings.dry_run})"
        )

        diff, changed_files = await self.diff_source.fetch_diff(settings.base_ref)

        # a limit of 0 disables that check
        lines_changed = count_changed_lines(diff)
        too_many_files = settings.max_files and len(changed_files) > settings.max_files
        too_many_lines = settings.max_lines and lines_changed > settings.max_lines
        if too_many_files or too_many_lines:
            return await self._skip_oversized(len(changed_files), lines_changed)

        selection = filter_files(changed_files)
        if not selection.reviewable:
            logger.info("No reviewable files found")
            if not settings.dry_run:
                await self._post_best_effort(NO_FILES_BODY, "no-files")
            return ReviewOutcome(completed=True)

        reviewable_diff = select_files(diff, selection.reviewable)
        if reviewable_diff is None:
            if selection.sensitive:
                raise ForgeAPIError("Could not isolate reviewable files from the diff")
            reviewable_diff = diff

        guidelines = read_guidelines(settings.workspace, settings.guidelines_path)
        request = ReviewRequest(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=build_user_prompt(
                settings.pr, settings.github_repository, selection.reviewable, reviewable_diff
            ),
            options=ReviewOptions(
                max_tokens=settings.max_tokens,
                thinking_budget=settings.thinking_budget or None,
                guidelines=guidelines,
            ),
        )

        provider = self.provider_factory(
            settings.llm_provider,
            settings.llm_api_key,
            settings.llm_model,
            {"project_id": settings.google_project_id, "location": settings.google_location},
        )
        logger.info(
            f"Using {provider.get_name()} ({provider.model}); "
            f"prompt caching: {provider.supports_prompt_caching()}, "
            f"extended thinking: {provider.supports_extended_thinking()}"
        )

        response = await provider.review(request.system_prompt, request.user_prompt, request.options)
        logger.info(
            f"Review received: {response.usage.input_tokens} input / "
            f"{response.usage.output_tokens} output tokens"
        )

        findings = filter_by_severity(parse_findings(response.text), settings.threshold)
        counts = count_by_severity(findings)
        cost = provider.calculate_cost(response.usage, response.model)
        logger.info(f"{len(findings)} findings at or above {settings.threshold.value}, cost ${cost:.4f}")

        if settings.dry_run or self.forge is None:
            print_report(findings, counts, response, cost, provider.get_name(), console=self.console)
        else:
            if findings:
                await self._post_review_comments(findings, provider.get_name())
            await self._upsert_summary(findings, response, cost, provider.get_name())

        return ReviewOutcome(
            completed=True,
            findings_count=len(findings),
            counts=counts,
            cost_estimate=cost,
        )

    async def _skip_oversized(self, files_changed: int, lines_changed: int) -> ReviewOutcome:
        settings = self.settings
        logger.warning(
            f"PR too large for review: {files_changed} files (limit {settings.max_files}), "
            f"{lines_changed} lines (limit {settings.max_lines})"
        )
        if not settings.dry_run:
            body = build_size_warning_body(
                files_changed, lines_changed, settings.max_files, settings.max_lines
            )
            await self._post_best_effort(body, "size warning")
        return ReviewOutcome(completed=False, skipped_reason="size")

    async def _post_best_effort(self, body: str, kind: str) -> None:
        if self.forge is None:
            return
        try:
            await self.forge.create_comment(self.settings.pr, body)
        except ForgeAPIError as e:
            logger.warning(f"Failed to post {kind} comment: {redact_secrets(str(e))}")

    async def _commit_sha(self) -> str:
        if self.settings.head_sha:
            return self.settings.head_sha
        commits = await self.forge.list_commits(self.settings.pr)
        if not commits:
            raise ForgeAPIError("Failed to post comments: pull request has no commits")
        return commits[-1]["sha"]

    async def _post_review_comments(self, findings: list[Finding], provider_name: str) -> None:
        """One review per file; a rejected review falls back to plain PR comments."""
        pr = self.settings.pr
        commit_sha = await self._commit_sha()

        by_file: dict[str, list[Finding]] = {}
        for finding in findings:
            by_file.setdefault(finding.file, []).append(finding)

        posted = 0
        for path, file_findings in by_file.items():
            comments = [
                {"path": f.file, "line": f.line, "body": format_comment(f, provider_name)}
                for f in file_findings
            ]
            try:
                await self.forge.create_review(pr, commit_sha, comments)
                posted += len(comments)
                logger.info(f"Posted {len(comments)} comments on {path}")
            except ForgeAPIError as e:
                logger.warning(f"Failed to post comments on {path}: {redact_secrets(str(e))}")
                for comment in comments:
                    body = format_fallback_comment(comment["path"], comment["line"], comment["body"])
                    try:
                        await self.forge.create_comment(pr, body)
                        posted += 1
                    except ForgeAPIError as fallback_error:
                        logger.warning(f"Failed fallback comment: {redact_secrets(str(fallback_error))}")

        logger.info(f"Posted {posted}/{len(findings)} comments")

    async def _upsert_summary(
        self,
        findings: list[Finding],
        response: ReviewResponse,
        cost: float,
        provider_name: str,
    ) -> None:
        pr = self.settings.pr
        body = build_summary(
            findings, count_by_severity(findings), response.usage, response.model, cost, provider_name
        )

        try:
            existing = next(
                (c for c in await self.forge.list_comments(pr) if SUMMARY_MARKER in (c.get("body") or "")),
                None,
            )
            if existing:
                await self.forge.update_comment(existing["id"], body)
                logger.info("Summary updated")
            else:
                await self.forge.create_comment(pr, body)
                logger.info("Summary posted")
        except ForgeAPIError as e:
            raise ForgeAPIError(f"Failed to post summary: {e}") from e

    async def _fail(self, error: Exception) -> ReviewOutcome:
        message = redact_secrets(str(error))
        logger.error(f"Review failed: {message}")

        if not self.settings.dry_run and self.forge is not None and parse_pr_number(self.settings.pr_number):
            try:
                await self.forge.create_comment(
                    self.settings.pr, build_error_body(message, get_supported_providers())
                )
            except ForgeAPIError as e:
                logger.warning(f"Failed to post error comment: {redact_secrets(str(e))}")

        return ReviewOutcome(completed=False, error=message)
