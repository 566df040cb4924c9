"""
Approval Scanner

Per-label review sign-off. A label is approved when an allow-listed
reviewer has left a review comment on the file whose body contains
``approved-<label name>`` (case-insensitive).
"""

import logging
import re
from typing import Dict, List, Optional, Tuple
from urllib.parse import unquote

from ..github.client import GitHubClient
from ..github.parser import GitHubResponseParser
from ..models.approval import ApprovalRecord, FileApprovalStatus, UnapprovedLabel
from ..models.repository import ReviewComment
from .reviewers import load_reviewers


logger = logging.getLogger(__name__)


LABEL_MARKER = "- name"
APPROVAL_PREFIX = "approved-"

_LABEL_NAME = re.compile(r'-\s*name\s*:?\s*(.*)$')


def label_name_from_line(line: str) -> str:
    """Extract the label name from a ``- name: ...`` line, without quotes."""
    match = _LABEL_NAME.search(line.strip())
    value = match.group(1) if match else line
    return value.strip().strip('"').strip("'").strip()


def find_label_lines(text: str) -> List[Tuple[int, str]]:
    """
    Find label declaration lines.

    Returns:
        (1-based line number, label name) for every line containing ``- name``
    """
    return [
        (index, label_name_from_line(line))
        for index, line in enumerate(text.split('\n'), start=1)
        if LABEL_MARKER in line
    ]


def approval_token(label_name: str) -> str:
    return f"{APPROVAL_PREFIX}{label_name}".lower().strip()


def approval_comment_body(label_name: str, language: str) -> str:
    return f"{APPROVAL_PREFIX}{label_name}: {language}"


def comment_matches(body: str, token: str, exact: bool = False) -> bool:
    """
    Check whether a comment body approves ``token``.

    By default the token only has to appear somewhere in the body. In exact
    mode the body must be ``approved-<label>: <lang>`` (or the bare token)
    for this label; only the part after the last colon is taken as the
    language, so label names containing colons still match.
    """
    normalized = body.strip().lower()
    if not exact:
        return token in normalized
    if normalized == token:
        return True
    head, separator, _ = normalized.rpartition(':')
    return bool(separator) and head.strip() == token


class ApprovalScanner:
    """
    Approval state of translation files in a pull request.
    """

    def __init__(
        self,
        client: GitHubClient,
        stable_branch: str = "main",
        reviewers_path: str = "reviewers.json",
        exact_match: bool = False,
        parser: Optional[GitHubResponseParser] = None,
    ):
        self.client = client
        self.stable_branch = stable_branch
        self.reviewers_path = reviewers_path
        self.exact_match = exact_match
        self.parser = parser or GitHubResponseParser()

    def get_reviewers(self, repo: str) -> List[str]:
        """Reviewer usernames from the manifest on the stable branch."""
        return load_reviewers(self.client, repo, self.stable_branch, self.reviewers_path, self.parser)

    def _find_approval(self, comments: List[ReviewComment], path: str, token: str,
                       reviewers: List[str]) -> Optional[ReviewComment]:
        for comment in comments:
            if comment.path != path or comment.user not in reviewers:
                continue
            if comment_matches(comment.body, token, self.exact_match):
                return comment
        return None

    def check_file_approval(self, repo: str, pr_number: int, file_path: str, branch: str) -> FileApprovalStatus:
        """
        Check which labels of a file have been approved.

        Args:
            repo: Repository name
            pr_number: Pull request number
            file_path: File path, possibly URL-encoded
            branch: Branch to read the file from

        Returns:
            FileApprovalStatus; ``approved`` requires at least one approved
            label and no unapproved ones

        Raises:
            ReviewersManifestNotFoundError: If the reviewers manifest is missing
            ReviewersManifestError: If the reviewers manifest cannot be used
        """
        path = unquote(file_path)

        content = self.parser.parse_file_content(self.client.get_contents(repo, path, branch), path)
        label_lines = find_label_lines(content.text)

        comments = self.parser.parse_review_comments(self.client.list_review_comments(repo, pr_number))
        reviewers = self.get_reviewers(repo)

        status = FileApprovalStatus(checked_file=path, eligible_reviewers=reviewers)
        for line_number, label in label_lines:
            comment = self._find_approval(comments, path, approval_token(label), reviewers)
            if comment is None:
                status.unapproved_labels.append(UnapprovedLabel(label=label, line_number=line_number))
                continue

            status.approved_labels.append(ApprovalRecord(
                label=label,
                line_number=line_number,
                reviewer=comment.user,
                timestamp=comment.created_at,
                comment_id=comment.id,
                comment_url=comment.html_url,
            ))

        logger.info(
            f"{path} in PR #{pr_number}: {len(status.approved_labels)} approved, "
            f"{len(status.unapproved_labels)} unapproved"
        )
        return status

    def approve_file(self, repo: str, pr_number: int, file_path: str, sha: str,
                     lang: str, label_name: str) -> Dict:
        """
        Record an approval by commenting ``approved-<label>: <lang>`` on the file.

        Returns:
            The created review comment
        """
        return self.client.create_review_comment(
            repo,
            pr_number,
            body=approval_comment_body(label_name, lang),
            commit_id=sha,
            path=unquote(file_path),
            line=1,
            side="RIGHT",
        )
