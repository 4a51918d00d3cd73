"""
Fetch-and-flatten intake for remote GitHub repositories
"""

import asyncio
import re
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

import aiofiles
from loguru import logger

from ..errors import RepositoryFetchError, SourceReadError, UnsupportedInputError
from ..models.sources import SourceUnit
from ..nodes_config import config

GITHUB_URL_PATTERN = re.compile(
    r"^https://github\.com/(?P<owner>[A-Za-z0-9_.-]+)/(?P<repo>[A-Za-z0-9_.-]+?)(?:\.git)?/?$"
)
BRANCH_PATTERN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9._/-]*$")


class RepositoryFetcher:
    """Clones a GitHub repository and returns its Solidity files as sources"""

    def __init__(
        self,
        enabled: Optional[bool] = None,
        ignore_folders: Optional[List[str]] = None,
        max_files: Optional[int] = None,
        git_command: Optional[str] = None,
    ):
        """
        Initialize the fetcher

        Args:
            enabled: Whether remote repositories are accepted at all
            ignore_folders: Directory names whose files are skipped
            max_files: Maximum number of Solidity files returned
            git_command: Git executable
        """
        self.enabled = config.REMOTE_REPOSITORIES_ENABLED if enabled is None else enabled
        if ignore_folders is None:
            ignore_folders = [name.strip() for name in config.REPOSITORY_IGNORE_FOLDERS.split(",")]
        self.ignore_folders = {name for name in ignore_folders if name}
        self.max_files = max_files if max_files is not None else config.MAX_REPOSITORY_FILES
        self.git_command = git_command or config.GIT_COMMAND

    def validate_url(self, repo_url: str) -> str:
        """
        Check that ``repo_url`` can be fetched

        Returns:
            Normalized clone URL

        Raises:
            UnsupportedInputError: If intake is disabled or the URL is not a GitHub repository
        """
        if not self.enabled:
            raise UnsupportedInputError("Remote repository input is not supported by this deployment")

        match = GITHUB_URL_PATTERN.match(repo_url.strip())
        if not match:
            raise UnsupportedInputError(
                f"Unsupported repository URL {repo_url!r}: expected https://github.com/<owner>/<repo>"
            )
        return f"https://github.com/{match.group('owner')}/{match.group('repo')}.git"

    async def fetch(self, repo_url: str, branch: Optional[str] = None) -> List[SourceUnit]:
        """
        Clone ``repo_url`` and load its Solidity files

        Args:
            repo_url: GitHub repository URL
            branch: Branch to clone, the default branch if None

        Returns:
            Source units labelled with repository-relative paths, sorted by path

        Raises:
            SourceReadError: If a Solidity file is not valid UTF-8 text
        """
        clone_url = self.validate_url(repo_url)
        if branch and not BRANCH_PATTERN.match(branch):
            raise UnsupportedInputError(f"Unsupported branch name {branch!r}")

        logger.info(f"Fetching repository {clone_url}" + (f" (branch: {branch})" if branch else ""))
        temp_dir = tempfile.mkdtemp(prefix="contract-auditor-")

        try:
            await self._clone(clone_url, branch, temp_dir)
            sources = await self._collect(Path(temp_dir))
        finally:
            await asyncio.to_thread(shutil.rmtree, temp_dir, ignore_errors=True)

        logger.info(f"Fetched {len(sources)} Solidity file(s) from {clone_url}")
        return sources

    async def _clone(self, clone_url: str, branch: Optional[str], target: str) -> None:
        args = [self.git_command, "clone", "--depth=1", "--single-branch"]
        if branch:
            args.extend(["--branch", branch])
        args.extend([clone_url, target])

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except FileNotFoundError:
            raise RepositoryFetchError(f"git executable not found: {self.git_command}")

        _, stderr = await process.communicate()
        if process.returncode != 0:
            error_msg = stderr.decode(errors="replace").strip() if stderr else "unknown error"
            raise RepositoryFetchError(f"Failed to clone repository {clone_url}: {error_msg}")

    def _is_ignored(self, relative: Path) -> bool:
        return any(part in self.ignore_folders or part.startswith(".") for part in relative.parts[:-1])

    async def _collect(self, root: Path) -> List[SourceUnit]:
        paths = await asyncio.to_thread(lambda: sorted(root.rglob("*.sol")))

        sources = []
        for path in paths:
            relative = path.relative_to(root)
            if self._is_ignored(relative) or not path.is_file():
                continue
            if len(sources) >= self.max_files:
                logger.warning(f"Repository file limit of {self.max_files} reached, remaining files skipped")
                break
            try:
                async with aiofiles.open(path, "r", encoding="utf-8") as f:
                    text = await f.read()
            except UnicodeDecodeError:
                raise SourceReadError(relative.as_posix(), "file is not valid UTF-8 text")
            except OSError as e:
                raise SourceReadError(relative.as_posix(), str(e))
            sources.append(SourceUnit(label=relative.as_posix(), text=text))
        return sources
