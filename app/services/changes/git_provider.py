"""
Git change-set provider.

Lists uncommitted changes with the git CLI:
    git diff --name-only HEAD
falling back to the union of staged and unstaged changes when HEAD does
not resolve (fresh repository without commits).
"""
import asyncio
import logging
import os
from typing import List, Optional, Set

from app.core.config import settings
from app.domain.exceptions import ChangeProviderError
from app.services.changes.base import ChangeSetProvider

logger = logging.getLogger(__name__)


class GitChangeProvider(ChangeSetProvider):
    """Change-set provider backed by `git diff` in a repository root."""

    def __init__(self, root: str, timeout: Optional[float] = None, git_binary: str = "git"):
        self.root = root
        self.timeout = timeout if timeout is not None else settings.GIT_COMMAND_TIMEOUT_SECONDS
        self.git_binary = git_binary

    async def _run_git(self, *args: str) -> str:
        """
        Run a git subcommand in the repository root and return stdout.

        Raises:
            ChangeProviderError: git missing, timed out or exited non-zero
        """
        if not os.path.isdir(self.root):
            raise ChangeProviderError(f"Workspace root {self.root} does not exist")

        try:
            process = await asyncio.create_subprocess_exec(
                self.git_binary,
                *args,
                cwd=self.root,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ChangeProviderError(f"Could not start git: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            raise ChangeProviderError(f"git {' '.join(args)} timed out after {self.timeout}s") from e

        if process.returncode != 0:
            raise ChangeProviderError(
                f"git {' '.join(args)} exited with {process.returncode}: "
                f"{stderr.decode(errors='replace').strip()}"
            )

        return stdout.decode(errors="replace")

    @staticmethod
    def _parse_name_only(output: str) -> List[str]:
        return [line.strip() for line in output.splitlines() if line.strip()]

    async def enumerate_changed_files(self) -> Set[str]:
        try:
            output = await self._run_git("diff", "--name-only", "HEAD")
            return set(self._parse_name_only(output))
        except ChangeProviderError as e:
            logger.debug(f"git diff HEAD failed in {self.root} ({e}), trying staged + unstaged")

        staged = self._parse_name_only(await self._run_git("diff", "--name-only", "--cached"))
        unstaged = self._parse_name_only(await self._run_git("diff", "--name-only"))
        return set(staged) | set(unstaged)
