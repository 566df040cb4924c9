"""
Conflict Detector

Reports label/language values that a working branch and a reference
branch both touched and that disagree.
"""

import logging
from typing import List, Optional

from ..documents.codec import parse_document
from ..github.client import GitHubClient
from ..github.parser import GitHubResponseParser
from ..models.changes import Conflict, ConflictCheck, FileConflicts
from ..models.translation import TranslationDocument
from .concurrency import fan_out
from .diff import DiffEngine


logger = logging.getLogger(__name__)


def find_conflicts(filename: str, reference: TranslationDocument,
                   branch: TranslationDocument) -> List[Conflict]:
    """
    Compare two versions of a translation document.

    For every reference label that also exists (by name) in the branch
    version, each reference language entry is matched with the branch entry
    of the same language. A conflict is reported when the values differ and
    the reference value is not blank. Languages present on one side only
    are not conflicts.
    """
    conflicts = []

    for reference_label in reference.labels:
        branch_label = branch.find_label(reference_label.name)
        if branch_label is None:
            continue

        for reference_entry in reference_label.translations:
            if reference_entry.is_blank:
                continue

            branch_entry = branch_label.find_entry(reference_entry.language_code)
            if branch_entry is None:
                continue

            if reference_entry.term != branch_entry.term:
                conflicts.append(Conflict(
                    filename=filename,
                    label=reference_label.name,
                    language=reference_entry.language_code,
                    reference_value=reference_entry.term,
                    branch_value=branch_entry.term,
                ))

    return conflicts


class ConflictDetector:
    """
    Three-way conflict detection between a working branch and a reference branch.

    Candidates are the translation files changed on the working branch
    (relative to the stable branch) that also differ between the working
    branch and the reference branch. Detection is advisory: a file that
    cannot be loaded is reported with an error placeholder instead of
    failing the whole check.
    """

    def __init__(
        self,
        client: GitHubClient,
        diff_engine: Optional[DiffEngine] = None,
        stable_branch: str = "main",
        max_workers: int = 8,
        parser: Optional[GitHubResponseParser] = None,
    ):
        self.client = client
        self.parser = parser or GitHubResponseParser()
        self.stable_branch = stable_branch
        self.diff_engine = diff_engine or DiffEngine(
            client, stable_branch=stable_branch, max_workers=max_workers, parser=self.parser
        )
        self.max_workers = max_workers

    def touched_files(self, repo: str, branch: str, reference: str) -> List[str]:
        """
        Files changed on both sides, in the working branch's order.
        """
        branch_files = [summary.filename for summary in self.diff_engine.branch_files(repo, branch)]

        # branch first: what the reference branch would inherit
        reference_files = {
            summary.filename for summary in self.diff_engine.compare_files(repo, branch, reference)
        }

        return [filename for filename in branch_files if filename in reference_files]

    def candidate_files(self, repo: str, branch: str, reference: str) -> List[str]:
        """
        Translation files changed on both sides. Files that are not
        ``.yml``/``.yaml`` are left out.
        """
        return [
            filename for filename in self.touched_files(repo, branch, reference)
            if self.parser.is_translation_file(filename)
        ]

    def _read_document(self, repo: str, path: str, ref: str) -> TranslationDocument:
        content = self.parser.parse_file_content(self.client.get_contents(repo, path, ref), path)
        return parse_document(content.text)

    def check_file(self, repo: str, filename: str, branch: str, reference: str) -> FileConflicts:
        """Compare one file between the reference branch and the working branch."""
        try:
            reference_document = self._read_document(repo, filename, reference)
            branch_document = self._read_document(repo, filename, branch)
        except Exception as e:
            logger.error(f"Error retrieving content for file {filename}: {e}")
            return FileConflicts(filename=filename, error=f"Failed to retrieve content for file: {filename}")

        return FileConflicts(
            filename=filename,
            conflicts=find_conflicts(filename, reference_document, branch_document),
        )

    def check_conflicts(self, repo: str, branch: str, reference: Optional[str] = None) -> ConflictCheck:
        """
        Detect conflicts between ``branch`` and ``reference``.

        Only ``.yml``/``.yaml`` files are compared. Other files changed on
        both sides are not checked and are listed in ``skipped_files``.

        Args:
            repo: Repository name
            branch: Working branch name
            reference: Reference branch (defaults to the stable branch)

        Returns:
            ConflictCheck whose ``files`` are the files with at least one
            conflict or load error
        """
        reference = reference or self.stable_branch
        touched = self.touched_files(repo, branch, reference)
        candidates = [filename for filename in touched if self.parser.is_translation_file(filename)]
        skipped = [filename for filename in touched if filename not in candidates]

        if skipped:
            logger.info(f"Skipping {len(skipped)} non-translation files: {', '.join(skipped)}")
        logger.info(f"Checking {len(candidates)} files for conflicts between {branch} and {reference}")

        check = ConflictCheck(reference=reference, skipped_files=skipped)
        if not candidates:
            return check

        results = fan_out(
            lambda filename: self.check_file(repo, filename, branch, reference),
            candidates,
            self.max_workers,
        )
        check.files = [result for result in results if result.has_conflicts]

        logger.info(f"{len(check.files)} of {len(candidates)} files have conflicts")
        return check

    def get_conflicts(self, repo: str, branch: str, reference: Optional[str] = None) -> List[FileConflicts]:
        """
        Files with at least one conflict or load error; empty when there is
        nothing to report. Non-translation files are never reported.
        """
        return self.check_conflicts(repo, branch, reference).files
