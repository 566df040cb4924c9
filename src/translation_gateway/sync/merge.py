"""
Merge Orchestrator

Closes a working branch: resolves its pull request, checks mergeability,
promotes drafts, merges, then deletes the branch.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..errors import MergeFailedError, NotMergeableError, PullRequestNotFoundError
from ..github.client import GitHubAPIError, GitHubClient, GitHubTimeoutError
from ..github.parser import GitHubResponseParser
from .resolver import BranchResolver


logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """Outcome of a successful merge."""
    pull_request_number: int
    branch: str
    branch_deleted: bool = True
    warning: Optional[str] = None

    @property
    def message(self) -> str:
        if self.branch_deleted:
            return "Merge successful and branch deleted"
        return "Merge successful but branch could not be deleted"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'message': self.message,
            'pullRequestNumber': self.pull_request_number,
            'branchDeleted': self.branch_deleted,
        }
        if self.warning:
            data['warning'] = self.warning
        return data


class MergeOrchestrator:
    """
    Merge state machine for working branches.

    NoPR -> fail (404). Not mergeable -> fail (400), no merge attempted.
    Draft -> mark ready -> merge. Merged -> delete branch; a failed merge
    fails (400). A failed branch deletion after a confirmed merge is
    reported on the result instead of failing the merge.
    """

    def __init__(self, client: GitHubClient, resolver: Optional[BranchResolver] = None,
                 stable_branch: str = "main", parser: Optional[GitHubResponseParser] = None):
        self.client = client
        self.parser = parser or GitHubResponseParser()
        self.resolver = resolver or BranchResolver(client, stable_branch, self.parser)

    def merge_branch(self, repo: str, branch: str) -> MergeResult:
        """
        Merge the working pull request of ``branch`` and delete the branch.

        Raises:
            PullRequestNotFoundError: If the branch has no open pull request
            NotMergeableError: If GitHub reports the pull request as not mergeable
            MergeFailedError: If GitHub did not merge the pull request
        """
        found = self.resolver.find_pull_request(repo, branch)
        if found is None:
            raise PullRequestNotFoundError(f"No pull requests found for branch: {branch}")

        pull_request = self.parser.parse_pull_request(self.client.get_pull_request(repo, found.number))
        if not pull_request.mergeable:
            logger.info(f"PR #{pull_request.number} is not mergeable (mergeable={pull_request.mergeable})")
            raise NotMergeableError("The pull request is not mergeable. Please check for conflicts.")

        if pull_request.draft:
            self.client.mark_ready_for_review(pull_request.node_id)

        response = self.client.merge_pull_request(
            repo,
            pull_request.number,
            commit_title=f"Merge pull request #{pull_request.number}",
            commit_message="Merging pull request",
        )
        if not response.get('merged'):
            logger.warning(f"Merge of PR #{pull_request.number} rejected: {response.get('message')}")
            raise MergeFailedError("The merge operation could not be completed.")

        logger.info(f"Merged PR #{pull_request.number} from {branch}")

        try:
            self.client.delete_branch(repo, branch)
        except (GitHubAPIError, GitHubTimeoutError) as e:
            logger.warning(f"PR #{pull_request.number} merged but branch {branch} was not deleted: {e}")
            return MergeResult(
                pull_request_number=pull_request.number,
                branch=branch,
                branch_deleted=False,
                warning=f"Branch {branch} could not be deleted: {e}",
            )

        return MergeResult(pull_request_number=pull_request.number, branch=branch)
