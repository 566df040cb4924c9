"""
Translation Gateway API

Main interface that wires the synchronisation services together for a
single caller. GitHub clients are built per request from the caller's
token; nothing is shared between requests.
"""

import logging
from typing import Dict, List, Optional

from .config import AppConfig, get_config
from .errors import AuthorizationError, ValidationError
from .github.client import GitHubClient
from .github.parser import GitHubResponseParser
from .models.approval import FileApprovalStatus
from .models.changes import ChangedFilesResult, ConflictCheck, DetailedFile, FileConflicts
from .models.repository import ChangedFileSummary
from .review.approvals import ApprovalScanner
from .sync.conflicts import ConflictDetector
from .sync.diff import DiffEngine
from .sync.merge import MergeOrchestrator, MergeResult
from .sync.resolver import BranchResolver
from .translations.merger import TranslationUpdater


logger = logging.getLogger(__name__)


class GatewaySession:
    """
    Services bound to one GitHub client.

    Provides:
    1. Changed files, detailed diff and raw compare for a working branch
    2. Conflict detection against a reference branch
    3. Translation updates
    4. Approval checks and approval comments
    5. Merging a working branch
    """

    def __init__(self, client: GitHubClient, config: AppConfig):
        self.client = client
        self.config = config

        stable_branch = config.repository.stable_branch
        max_workers = config.sync.max_workers
        parser = GitHubResponseParser()

        self.resolver = BranchResolver(client, stable_branch, parser)
        self.diff_engine = DiffEngine(
            client,
            resolver=self.resolver,
            stable_branch=stable_branch,
            max_workers=max_workers,
            parser=parser,
        )
        self.conflict_detector = ConflictDetector(
            client,
            diff_engine=self.diff_engine,
            stable_branch=stable_branch,
            max_workers=max_workers,
            parser=parser,
        )
        self.updater = TranslationUpdater(client, parser)
        self.approval_scanner = ApprovalScanner(
            client,
            stable_branch=stable_branch,
            reviewers_path=config.repository.reviewers_path,
            exact_match=config.sync.exact_approval_match,
            parser=parser,
        )
        self.merger = MergeOrchestrator(client, resolver=self.resolver, parser=parser)

    def get_changed_files(self, repo: str, branch: str) -> ChangedFilesResult:
        return self.diff_engine.get_changed_files(repo, branch)

    def get_detailed_diff(self, repo: str, branch: str) -> List[DetailedFile]:
        return self.diff_engine.get_detailed_diff(repo, branch)

    def get_diff(self, repo: str, branch: str) -> List[ChangedFileSummary]:
        return self.diff_engine.get_diff(repo, branch)

    def check_conflicts(self, repo: str, branch: str, reference: Optional[str] = None) -> ConflictCheck:
        return self.conflict_detector.check_conflicts(repo, branch, reference)

    def get_conflicts(self, repo: str, branch: str, reference: Optional[str] = None) -> List[FileConflicts]:
        return self.conflict_detector.get_conflicts(repo, branch, reference)

    def update_file_with_translations(self, repo: str, translations: Dict[str, Dict[str, str]],
                                      branch: str, filename: str) -> Dict:
        return self.updater.update_file_with_translations(repo, translations, branch, filename)

    def check_file_approval(self, repo: str, pr_number: int, file_path: str, branch: str) -> FileApprovalStatus:
        return self.approval_scanner.check_file_approval(repo, pr_number, file_path, branch)

    def approve_file(self, repo: str, pr_number: int, file_path: str, sha: str,
                     lang: str, label_name: str) -> Dict:
        return self.approval_scanner.approve_file(repo, pr_number, file_path, sha, lang, label_name)

    def get_reviewers(self, repo: str) -> List[str]:
        return self.approval_scanner.get_reviewers(repo)

    def merge_branch(self, repo: str, branch: str) -> MergeResult:
        return self.merger.merge_branch(repo, branch)


class TranslationGatewayAPI:
    """
    Main Translation Gateway API interface.

    Holds configuration only; each call to ``session`` builds a fresh
    GitHub client for the caller's token.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        """
        Initialize Translation Gateway API.

        Args:
            config: Optional configuration object (defaults to the active configuration)
        """
        self.config = config or get_config()
        logger.info(
            f"Translation Gateway API initialized for owner {self.config.repository.owner} "
            f"(stable branch: {self.config.repository.stable_branch})"
        )

    def client_for(self, token: str) -> GitHubClient:
        """Build a GitHub client for ``token``."""
        if not token:
            raise AuthorizationError("No token provided")

        github = self.config.github
        return GitHubClient(
            token=token,
            owner=self.config.repository.owner,
            base_url=github.api_base_url,
            api_version=github.api_version,
            timeout=github.timeout_seconds,
            rate_limit_floor=github.rate_limit_floor,
            pool_size=self.config.sync.max_workers,
        )

    def session(self, token: str) -> GatewaySession:
        """Services for one request, authenticated with ``token``."""
        return GatewaySession(self.client_for(token), self.config)

    def check_branch(self, branch: str) -> None:
        """
        Reject working branches outside the configured prefix.

        Raises:
            ValidationError: If a prefix is configured and ``branch`` does not start with it
        """
        prefix = self.config.repository.key_branch_prefix
        if prefix and not branch.startswith(prefix):
            raise ValidationError(f"Branch {branch} does not start with {prefix}")
