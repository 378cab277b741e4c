import asyncio
import logging
from pathlib import Path

from .base import DiffSource
from sage_review.errors import ForgeAPIError


logger = logging.getLogger(__name__)


class LocalGitRepository(DiffSource):
    """Reads the PR diff from the checked-out workspace."""

    def __init__(self, workspace: str | Path, remote: str = "origin"):
        self.workspace = Path(workspace)
        self.remote = remote

    async def _git(self, *args: str) -> str:
        process = await asyncio.create_subprocess_exec(
            "git",
            *args,
            cwd=self.workspace,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            raise ForgeAPIError(
                f"git {args[0]} exited with {process.returncode}: {stderr.decode(errors='replace').strip()}"
            )
        return stdout.decode("utf-8", errors="replace")

    async def fetch_diff(self, base_ref: str) -> tuple[str, list[str]]:
        revision = f"{self.remote}/{base_ref}...HEAD"
        try:
            diff = await self._git("diff", revision)
            names = await self._git("diff", "--name-only", revision)
        except (ForgeAPIError, OSError) as e:
            raise ForgeAPIError(f"Failed to get PR changes: {e}") from e

        changed_files = [name for name in names.strip().splitlines() if name]
        logger.info(f"Got diff ({len(diff)} chars, {len(changed_files)} files)")
        return diff, changed_files
