"""
Diff Engine

Computes what changed on a working branch relative to the stable branch,
either from the working pull request's file list or from a direct
``stable...branch`` comparison, and loads before/after content for each
changed file.
"""

import logging
from typing import List, Optional

from ..documents.codec import load_yaml
from ..errors import FileContentError
from ..github.client import GitHubClient
from ..github.parser import GitHubResponseParser
from ..models.changes import ChangedFile, ChangedFilesResult, DetailedFile
from ..models.repository import ChangedFileSummary
from .concurrency import fan_out
from .lines import diff_lines
from .resolver import BranchResolver


logger = logging.getLogger(__name__)


NO_CHANGES_MESSAGE = "The branch has no changes to compare with {stable}."


class DiffEngine:
    """
    Changed-file computation for working branches.

    A failure to load any single file aborts the whole batch with a
    FileContentError naming that file; no partial results are returned.
    """

    def __init__(
        self,
        client: GitHubClient,
        resolver: Optional[BranchResolver] = None,
        stable_branch: str = "main",
        max_workers: int = 8,
        parser: Optional[GitHubResponseParser] = None,
    ):
        self.client = client
        self.parser = parser or GitHubResponseParser()
        self.stable_branch = stable_branch
        self.resolver = resolver or BranchResolver(client, stable_branch, self.parser)
        self.max_workers = max_workers

    def _read_text(self, repo: str, path: str, ref: str) -> str:
        return self.parser.parse_file_content(self.client.get_contents(repo, path, ref), path).text

    def pull_request_files(self, repo: str, pr_number: int) -> List[ChangedFileSummary]:
        return self.parser.parse_file_changes(self.client.get_pull_request_files(repo, pr_number))

    def compare_files(self, repo: str, base: str, head: str) -> List[ChangedFileSummary]:
        """Files changed in ``base...head``."""
        return self.parser.parse_comparison(self.client.compare(repo, base, head), base, head).files

    def branch_files(self, repo: str, branch: str) -> List[ChangedFileSummary]:
        """
        Files changed on ``branch``: the open pull request's file list when
        there is one, otherwise the ``stable...branch`` comparison.
        """
        pull_request = self.resolver.find_pull_request(repo, branch)
        if pull_request is not None:
            return self.pull_request_files(repo, pull_request.number)
        return self.compare_files(repo, self.stable_branch, branch)

    def get_changed_files(self, repo: str, branch: str) -> ChangedFilesResult:
        """
        Get changed files of the working pull request with before/after content.

        May open a draft pull request when the branch is ahead of the stable
        branch and has none.

        Args:
            repo: Repository name
            branch: Working branch name

        Returns:
            ChangedFilesResult with files in the pull request's order, or a
            no-changes result when the branch is not ahead

        Raises:
            FileContentError: If the content of any changed file cannot be loaded
        """
        logger.info(f"Collecting changed files for {repo}:{branch}")

        resolved = self.resolver.resolve(repo, branch)
        if resolved.no_changes:
            return ChangedFilesResult(
                no_changes=True,
                message=NO_CHANGES_MESSAGE.format(stable=self.stable_branch),
            )

        pr_number = resolved.number
        summaries = self.pull_request_files(repo, pr_number)

        def load(summary: ChangedFileSummary) -> ChangedFile:
            try:
                before = None
                if summary.exists_before:
                    before = self._read_text(repo, summary.before_path, self.stable_branch)
                after = None
                if summary.exists_after:
                    after = self._read_text(repo, summary.filename, branch)
            except Exception as e:
                logger.error(f"Error retrieving content for file {summary.filename}: {e}")
                raise FileContentError(summary.filename) from e

            return ChangedFile(
                filename=summary.filename,
                status=summary.status,
                sha=summary.sha,
                before=before,
                after=after,
                diff=diff_lines(before, after),
            )

        files = fan_out(load, summaries, self.max_workers)
        comments = self.parser.parse_review_comments(self.client.list_review_comments(repo, pr_number))

        logger.info(f"PR #{pr_number}: {len(files)} changed files, {len(comments)} review comments")
        return ChangedFilesResult(pull_request_number=pr_number, files=files, comments=comments)

    def get_detailed_diff(self, repo: str, branch: str) -> List[DetailedFile]:
        """
        Get the branch-side content of every changed file, parsed as YAML.

        Removed files are reported with ``content`` set to None.

        Raises:
            FileContentError: If any changed file cannot be loaded or parsed
        """
        summaries = self.branch_files(repo, branch)
        logger.info(f"Loading {len(summaries)} changed files of {repo}:{branch}")

        def load(summary: ChangedFileSummary) -> DetailedFile:
            content = None
            if summary.exists_after:
                try:
                    content = load_yaml(self._read_text(repo, summary.filename, branch))
                except Exception as e:
                    logger.error(f"Error retrieving content for file {summary.filename}: {e}")
                    raise FileContentError(summary.filename) from e
            return DetailedFile(filename=summary.filename, status=summary.status, content=content)

        return fan_out(load, summaries, self.max_workers)

    def get_diff(self, repo: str, branch: str) -> List[ChangedFileSummary]:
        """Raw ``stable...branch`` comparison, without any pull request lookup."""
        return self.compare_files(repo, self.stable_branch, branch)
