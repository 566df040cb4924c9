"""
GitHub Response Parser

Parses GitHub API responses (pull requests, file lists, comparisons,
contents and review comments) into structured models.
"""

import base64
import binascii
import logging
from typing import Dict, List, Optional

from ..models.repository import (
    PullRequest,
    FileContent,
    ChangedFileSummary,
    Comparison,
    ReviewComment,
)


logger = logging.getLogger(__name__)


TRANSLATION_EXTENSIONS = {'yml', 'yaml'}

KNOWN_STATUSES = {'added', 'removed', 'modified', 'renamed', 'copied', 'changed', 'unchanged'}


class GitHubResponseParser:
    """
    Parser for GitHub API response payloads.

    Converts raw JSON dictionaries into the repository models used by the
    synchronisation services.
    """

    def parse_pull_request(self, pr_data: Dict) -> PullRequest:
        """
        Parse pull request data.

        Args:
            pr_data: Pull request from GitHub API (list or detail form)

        Returns:
            Structured PullRequest object
        """
        head = pr_data.get('head') or {}
        base = pr_data.get('base') or {}

        return PullRequest(
            number=pr_data['number'],
            node_id=pr_data.get('node_id'),
            state=pr_data.get('state', 'open'),
            draft=bool(pr_data.get('draft', False)),
            mergeable=pr_data.get('mergeable'),
            head_ref=head.get('ref'),
            base_ref=base.get('ref'),
            updated_at=pr_data.get('updated_at'),
            html_url=pr_data.get('html_url'),
        )

    def parse_file_change(self, file_data: Dict) -> ChangedFileSummary:
        """
        Parse individual file change data.

        Args:
            file_data: File change data from GitHub API

        Returns:
            Structured ChangedFileSummary object
        """
        file_path = file_data['filename']
        logger.debug(f"Parsing file change: {file_path}")

        return ChangedFileSummary(
            filename=file_path,
            status=self._determine_status(file_data.get('status', 'modified')),
            sha=file_data.get('sha'),
            additions=file_data.get('additions', 0),
            deletions=file_data.get('deletions', 0),
            changes=file_data.get('changes', 0),
            patch=file_data.get('patch'),
            previous_filename=file_data.get('previous_filename'),
        )

    def parse_file_changes(self, files_data: List[Dict]) -> List[ChangedFileSummary]:
        """Parse a file list, keeping its order."""
        return [self.parse_file_change(file_data) for file_data in files_data or []]

    def _determine_status(self, status: str) -> str:
        """
        Validate a GitHub file status.

        Args:
            status: GitHub file status

        Returns:
            The status, or 'modified' for statuses this parser does not know
        """
        if status in KNOWN_STATUSES:
            return status
        logger.debug(f"Unknown file status '{status}', treating as modified")
        return 'modified'

    def parse_comparison(self, compare_data: Dict, base: str, head: str) -> Comparison:
        """Parse a compare response."""
        return Comparison(
            base=base,
            head=head,
            status=compare_data.get('status', ''),
            ahead_by=int(compare_data.get('ahead_by', 0)),
            behind_by=int(compare_data.get('behind_by', 0)),
            files=self.parse_file_changes(compare_data.get('files', [])),
        )

    def parse_file_content(self, content_data: Dict, path: Optional[str] = None) -> FileContent:
        """
        Decode a contents response.

        Args:
            content_data: Contents payload (base64 ``content`` plus ``sha``)
            path: Requested path, used when the payload has none

        Returns:
            FileContent with decoded UTF-8 text

        Raises:
            ValueError: If the payload is not a base64 encoded file
        """
        if isinstance(content_data, list) or content_data.get('type', 'file') != 'file':
            raise ValueError(f"{path or content_data.get('path')} is not a file")

        try:
            raw = base64.b64decode(content_data.get('content') or '')
            text = raw.decode('utf-8')
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValueError(f"Cannot decode content of {path or content_data.get('path')}: {e}") from e

        return FileContent(
            path=content_data.get('path') or path or '',
            sha=content_data.get('sha', ''),
            text=text,
        )

    def parse_review_comment(self, comment_data: Dict) -> ReviewComment:
        """Parse one pull request review comment."""
        user = comment_data.get('user') or {}
        line = comment_data.get('line')
        if line is None:
            line = comment_data.get('position')

        return ReviewComment(
            id=comment_data['id'],
            path=comment_data.get('path', ''),
            body=comment_data.get('body') or '',
            user=user.get('login'),
            line=line,
            created_at=comment_data.get('created_at'),
            html_url=comment_data.get('html_url'),
        )

    def parse_review_comments(self, comments_data: List[Dict]) -> List[ReviewComment]:
        return [self.parse_review_comment(comment) for comment in comments_data or []]

    def get_file_extension(self, file_path: str) -> Optional[str]:
        """
        Get file extension from file path.

        Args:
            file_path: Path to file

        Returns:
            File extension or None
        """
        name = file_path.rsplit('/', 1)[-1]
        if '.' not in name:
            return None

        return name.split('.')[-1].lower()

    def is_translation_file(self, file_path: str) -> bool:
        """Check whether a path follows the translation file naming convention."""
        return self.get_file_extension(file_path) in TRANSLATION_EXTENSIONS
