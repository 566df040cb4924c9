"""
Reviewer allow-list

Reads the reviewers manifest kept on the stable branch. The manifest is a
list of single-key objects whose key is a GitHub username, e.g.::

    [{"alice": {"languages": ["fr"]}}, {"bob": {}}]
"""

import json
import logging
from typing import Any, List, Optional

import yaml

from ..errors import ReviewersManifestError, ReviewersManifestNotFoundError
from ..github.client import GitHubAPIError, GitHubClient
from ..github.parser import GitHubResponseParser


logger = logging.getLogger(__name__)


def parse_reviewers_manifest(text: str, path: str = "reviewers.json") -> List[str]:
    """
    Extract reviewer usernames from manifest text.

    Args:
        text: Manifest content; JSON, falling back to YAML with the same shape
        path: Manifest path, used in error messages

    Returns:
        Usernames in manifest order

    Raises:
        ReviewersManifestError: If the manifest is unparsable, not a list, or names nobody
    """
    try:
        data: Any = json.loads(text)
    except ValueError:
        # not JSON; accept a YAML manifest of the same shape
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ReviewersManifestError(f"Reviewers file {path} could not be parsed: {e}") from e

    if not isinstance(data, list):
        raise ReviewersManifestError("Reviewers file must contain an array of objects")

    usernames = []
    for item in data:
        if not isinstance(item, dict):
            raise ReviewersManifestError("Reviewers file must contain an array of objects")
        if not item:
            continue
        usernames.append(str(next(iter(item))))

    if not usernames:
        raise ReviewersManifestError(f"No valid reviewers found in {path}")

    return usernames


def load_reviewers(client: GitHubClient, repo: str, stable_branch: str = "main",
                   path: str = "reviewers.json",
                   parser: Optional[GitHubResponseParser] = None) -> List[str]:
    """
    Fetch and parse the reviewers manifest of ``repo``.

    Raises:
        ReviewersManifestNotFoundError: If the manifest does not exist on the stable branch
        ReviewersManifestError: If the manifest cannot be used
    """
    parser = parser or GitHubResponseParser()

    try:
        data = client.get_contents(repo, path, stable_branch)
    except GitHubAPIError as e:
        if e.status_code == 404:
            raise ReviewersManifestNotFoundError(
                f"{path} file not found in the {stable_branch} branch"
            ) from e
        raise

    try:
        content = parser.parse_file_content(data, path)
    except ValueError as e:
        raise ReviewersManifestError(str(e)) from e

    reviewers = parse_reviewers_manifest(content.text, path)
    logger.debug(f"Loaded {len(reviewers)} reviewers for {repo}")
    return reviewers
