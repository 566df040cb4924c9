"""
Branch Resolver

Finds the pull request that represents a working branch against the
stable branch, opening a draft pull request when the branch has
outgoing commits but no pull request yet.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..github.client import GitHubClient
from ..github.parser import GitHubResponseParser
from ..models.repository import PullRequest


logger = logging.getLogger(__name__)


@dataclass
class ResolvedPullRequest:
    """Outcome of resolving a working branch."""
    pull_request: Optional[PullRequest] = None
    created: bool = False
    no_changes: bool = False

    @property
    def number(self) -> Optional[int]:
        return self.pull_request.number if self.pull_request else None


class BranchResolver:
    """
    Resolves working branches to pull requests.

    At most one open pull request per (repository, branch, stable branch)
    is supported; when the host returns several, the most recently updated
    one is used.
    """

    def __init__(self, client: GitHubClient, stable_branch: str = "main",
                 parser: Optional[GitHubResponseParser] = None):
        self.client = client
        self.stable_branch = stable_branch
        self.parser = parser or GitHubResponseParser()

    def find_pull_request(self, repo: str, branch: str) -> Optional[PullRequest]:
        """
        Find the open pull request from ``branch`` into the stable branch.

        Returns:
            The pull request, or None if there is none
        """
        pulls = [
            self.parser.parse_pull_request(data)
            for data in self.client.list_pull_requests(repo, branch, self.stable_branch)
        ]
        return self._pick(branch, pulls)

    def _pick(self, branch: str, pulls: List[PullRequest]) -> Optional[PullRequest]:
        if not pulls:
            return None
        if len(pulls) == 1:
            return pulls[0]

        # ISO 8601 timestamps sort lexicographically
        chosen = max(pulls, key=lambda pr: pr.updated_at or '')
        logger.warning(
            f"Found {len(pulls)} open pull requests for {branch}; "
            f"using #{chosen.number}, the most recently updated"
        )
        return chosen

    def resolve(self, repo: str, branch: str) -> ResolvedPullRequest:
        """
        Resolve the working pull request for ``branch``, creating a draft if needed.

        Args:
            repo: Repository name
            branch: Working branch name

        Returns:
            ResolvedPullRequest; ``no_changes`` is set when the branch is not
            ahead of the stable branch, in which case nothing is created
        """
        existing = self.find_pull_request(repo, branch)
        if existing is not None:
            logger.debug(f"Using existing PR #{existing.number} for {branch}")
            return ResolvedPullRequest(pull_request=existing)

        comparison = self.parser.parse_comparison(
            self.client.compare(repo, self.stable_branch, branch),
            base=self.stable_branch,
            head=branch,
        )
        if comparison.ahead_by == 0:
            logger.info(f"{branch} has no commits ahead of {self.stable_branch} in {repo}")
            return ResolvedPullRequest(no_changes=True)

        created = self.client.create_pull_request(
            repo,
            title=f"New changes from {branch}",
            body=f"Please review and merge these changes from {branch}",
            head=branch,
            base=self.stable_branch,
            draft=True,
        )
        pull_request = self.parser.parse_pull_request(created)
        logger.info(f"Created draft PR #{pull_request.number} for {branch} ({comparison.ahead_by} commits ahead)")
        return ResolvedPullRequest(pull_request=pull_request, created=True)
