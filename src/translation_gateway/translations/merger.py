"""
Translation Merger

Label-scoped updates of translation files. Only the named language slots
of matching labels are changed; everything else in the file, comments
included, is written back as it was read.
"""

import copy
import logging
from typing import Dict, Optional

from ..documents.codec import parse_document, serialize_document
from ..errors import StaleFileError
from ..github.client import GitHubAPIError, GitHubClient
from ..github.parser import GitHubResponseParser
from ..models.translation import TranslationDocument


logger = logging.getLogger(__name__)


def apply_translations(document: TranslationDocument,
                       translations: Dict[str, Dict[str, str]]) -> TranslationDocument:
    """
    Apply label -> language -> term updates to a copy of ``document``.

    A language that the label does not already have is skipped with a
    warning; no new language slots are created. Only the terms of the
    targeted entries change, so serializing the result rewrites just those
    scalars of the parsed file.

    Args:
        document: Parsed translation document (left unchanged)
        translations: Terms to write, keyed by label name then language code

    Returns:
        Updated copy of the document
    """
    updated = copy.deepcopy(document)
    if not translations:
        return updated

    for label in updated.labels:
        if label.name not in translations:
            continue

        for language, term in translations[label.name].items():
            entry = label.find_entry(language)
            if entry is None:
                logger.warning(f"Language {language} not found for label {label.name}")
                continue
            entry.term = term

    return updated


class TranslationUpdater:
    """
    Read-modify-write of translation files on a working branch.

    The file is read immediately before the write and the write carries the
    blob sha that was read, so GitHub rejects it if the file changed in
    between. Rejections surface as StaleFileError and are not retried here.
    """

    def __init__(self, client: GitHubClient, parser: Optional[GitHubResponseParser] = None):
        self.client = client
        self.parser = parser or GitHubResponseParser()

    def update_file_with_translations(self, repo: str, translations: Dict[str, Dict[str, str]],
                                      branch: str, filename: str) -> Dict:
        """
        Commit translation updates to ``filename`` on ``branch``.

        Returns:
            GitHub's commit response

        Raises:
            DocumentFormatError: If the file is not a translation document
            StaleFileError: If the file changed between read and write
        """
        current = self.parser.parse_file_content(self.client.get_contents(repo, filename, branch), filename)

        document = apply_translations(parse_document(current.text), translations)
        updated_text = serialize_document(document)

        try:
            response = self.client.put_file(
                repo,
                filename,
                updated_text,
                message=f"Update translations for {filename}",
                branch=branch,
                sha=current.sha,
            )
        except GitHubAPIError as e:
            if e.status_code == 409:
                logger.warning(f"Stale write rejected for {filename} on {branch}")
                raise StaleFileError(filename, branch) from e
            raise

        logger.info(f"Committed translations for {len(translations)} labels to {filename} on {branch}")
        return response
