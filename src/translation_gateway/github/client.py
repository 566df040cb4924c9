"""
GitHub API Client

Handles GitHub API authentication, rate limiting, and communication.
Provides the pull request, contents and compare calls the branch
synchronisation services are built on.
"""

import base64
import time
import logging
from typing import Any, Dict, List, Optional
from datetime import datetime
from urllib.parse import quote, urlparse, urlunparse
import requests
from requests.adapters import HTTPAdapter


logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data or {}

    @property
    def api_message(self) -> str:
        """Message reported by GitHub, if any."""
        return self.response_data.get('message') or str(self)


class RateLimitExceeded(GitHubAPIError):
    """GitHub API rate limit exceeded"""
    def __init__(self, reset_time: datetime):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=429)
        self.reset_time = reset_time


class GitHubTimeoutError(Exception):
    """No response was received from GitHub"""


def _segment(value: str) -> str:
    """Percent-encode a ref or file path for use in a URL path (``/`` kept)."""
    return quote(value, safe='/')


MARK_READY_FOR_REVIEW = """
mutation($pullRequestId: ID!) {
  markPullRequestReadyForReview(input: { pullRequestId: $pullRequestId }) {
    pullRequest { id number isDraft }
  }
}
"""


class GitHubClient:
    """
    GitHub API client with authentication, rate limiting, and error handling.

    One client is built per inbound request from the caller's token and
    scoped to a single repository owner. Provides methods for:
    - pull request lookup, creation, state transitions and merging
    - pull request file lists and review comments
    - ref comparison, file contents and branch deletion
    """

    def __init__(
        self,
        token: str,
        owner: str,
        base_url: str = "https://api.github.com",
        api_version: str = "2022-11-28",
        timeout: int = 30,
        rate_limit_floor: int = 10,
        pool_size: int = 10,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub access token
            owner: Owner (user or organisation) of the translation repositories
            base_url: GitHub API base URL (default: https://api.github.com)
            api_version: Value of the X-GitHub-Api-Version header
            timeout: Per-request timeout in seconds
            rate_limit_floor: Remaining-call count under which requests are refused
            pool_size: Connection pool size, matched to the fan-out worker count
        """
        if not token:
            raise ValueError("GitHub token is required")
        if not owner:
            raise ValueError("Repository owner is required")

        self.token = token
        self.owner = owner
        self.base_url = base_url.rstrip('/')
        self.api_version = api_version
        self.timeout = timeout
        self.rate_limit_floor = rate_limit_floor
        self.session = self._create_session(pool_size)
        self.rate_limit_remaining = 5000
        self.rate_limit_reset = datetime.now()

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self.session.headers)

    def _create_session(self, pool_size: int) -> requests.Session:
        """Create requests session with connection pooling and authentication."""
        session = requests.Session()

        # Failed calls are never replayed; retrying is left to the caller.
        adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'Authorization': f'token {self.token}',
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': self.api_version,
            'User-Agent': 'Translation-Gateway/1.0'
        })

        return session

    def _check_rate_limit(self) -> None:
        """Check and handle GitHub API rate limits."""
        if self.rate_limit_remaining <= self.rate_limit_floor and datetime.now() < self.rate_limit_reset:
            logger.warning(f"Rate limit low ({self.rate_limit_remaining}), refusing until {self.rate_limit_reset}")
            raise RateLimitExceeded(self.rate_limit_reset)

    def _update_rate_limit(self, response: requests.Response) -> None:
        """Update rate limit information from response headers."""
        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if 'X-RateLimit-Reset' in response.headers:
            reset_timestamp = int(response.headers['X-RateLimit-Reset'])
            self.rate_limit_reset = datetime.fromtimestamp(reset_timestamp)

    @staticmethod
    def _error_data(response: requests.Response) -> Dict:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            return {'message': response.text}
        return data if isinstance(data, dict) else {'message': str(data)}

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API with rate limiting.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL) or absolute URL
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For API errors
            RateLimitExceeded: When rate limit is exceeded
            GitHubTimeoutError: When GitHub does not answer
        """
        self._check_rate_limit()

        if endpoint.startswith('http'):
            url = endpoint
        else:
            url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except (requests.Timeout, requests.ConnectionError) as e:
            logger.error(f"No response from GitHub for {method} {endpoint}: {e}")
            raise GitHubTimeoutError(f"No response received from GitHub API: {e}") from e
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}") from e

        self._update_rate_limit(response)

        if response.status_code == 429:
            reset_time = datetime.fromtimestamp(int(response.headers.get('X-RateLimit-Reset', time.time() + 3600)))
            raise RateLimitExceeded(reset_time)

        if not response.ok:
            error_data = self._error_data(response)
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def _paginate(self, endpoint: str, params: Optional[Dict] = None, per_page: int = 100) -> List[Dict]:
        """Collect every page of a list endpoint."""
        items = []
        page = 1

        while True:
            page_params = dict(params or {})
            page_params.update({'page': page, 'per_page': per_page})
            response = self._make_request('GET', endpoint, params=page_params)

            page_items = response.json()
            if not page_items:
                break

            items.extend(page_items)

            if len(page_items) < per_page:
                break

            page += 1

        return items

    def _repo_path(self, repo: str) -> str:
        return f'/repos/{self.owner}/{repo}'

    # Pull requests

    def list_pull_requests(self, repo: str, head_branch: str, base: str, state: str = "open") -> List[Dict]:
        """
        List pull requests from ``head_branch`` into ``base``.

        Args:
            repo: Repository name
            head_branch: Working branch name (owner prefix is added)
            base: Base branch name
            state: Pull request state filter

        Returns:
            List of pull request data
        """
        logger.debug(f"Listing pull requests {self.owner}:{head_branch} -> {base} in {repo}")

        return self._paginate(
            f'{self._repo_path(repo)}/pulls',
            params={'head': f'{self.owner}:{head_branch}', 'base': base, 'state': state}
        )

    def get_pull_request(self, repo: str, pr_number: int) -> Dict:
        """Get pull request information, including ``mergeable`` and ``draft``."""
        logger.info(f"Fetching PR {self.owner}/{repo}#{pr_number}")

        response = self._make_request('GET', f'{self._repo_path(repo)}/pulls/{pr_number}')
        return response.json()

    def create_pull_request(self, repo: str, title: str, body: str, head: str, base: str, draft: bool = True) -> Dict:
        """Open a pull request from ``head`` into ``base``."""
        logger.info(f"Creating {'draft ' if draft else ''}PR {head} -> {base} in {self.owner}/{repo}")

        response = self._make_request(
            'POST',
            f'{self._repo_path(repo)}/pulls',
            json={'title': title, 'body': body, 'head': head, 'base': base, 'draft': draft}
        )
        return response.json()

    def get_pull_request_files(self, repo: str, pr_number: int) -> List[Dict]:
        """
        Get files changed in a pull request.

        Args:
            repo: Repository name
            pr_number: Pull request number

        Returns:
            List of file change data
        """
        logger.info(f"Fetching PR files for {self.owner}/{repo}#{pr_number}")

        files = self._paginate(f'{self._repo_path(repo)}/pulls/{pr_number}/files')

        logger.info(f"Found {len(files)} changed files")
        return files

    def list_review_comments(self, repo: str, pr_number: int) -> List[Dict]:
        """Get every review comment left on a pull request."""
        logger.debug(f"Fetching review comments for {self.owner}/{repo}#{pr_number}")

        return self._paginate(f'{self._repo_path(repo)}/pulls/{pr_number}/comments')

    def create_review_comment(
        self,
        repo: str,
        pr_number: int,
        body: str,
        commit_id: str,
        path: str,
        line: int = 1,
        side: str = "RIGHT",
    ) -> Dict:
        """Leave a review comment on one line of a file in a pull request."""
        logger.info(f"Commenting on {path} in {self.owner}/{repo}#{pr_number}")

        response = self._make_request(
            'POST',
            f'{self._repo_path(repo)}/pulls/{pr_number}/comments',
            json={'body': body, 'commit_id': commit_id, 'path': path, 'line': line, 'side': side}
        )
        return response.json()

    def mark_ready_for_review(self, node_id: str) -> Dict:
        """Turn a draft pull request into one that is ready for review."""
        logger.info(f"Marking pull request {node_id} ready for review")

        return self.graphql(MARK_READY_FOR_REVIEW, {'pullRequestId': node_id})

    def merge_pull_request(self, repo: str, pr_number: int, commit_title: str, commit_message: str) -> Dict:
        """Merge a pull request; the response carries ``merged`` and ``message``."""
        logger.info(f"Merging PR {self.owner}/{repo}#{pr_number}")

        response = self._make_request(
            'PUT',
            f'{self._repo_path(repo)}/pulls/{pr_number}/merge',
            json={'commit_title': commit_title, 'commit_message': commit_message}
        )
        return response.json()

    # Refs and contents

    def compare(self, repo: str, base: str, head: str) -> Dict:
        """Compare two refs (``base...head``)."""
        logger.debug(f"Comparing {base}...{head} in {self.owner}/{repo}")

        response = self._make_request('GET', f'{self._repo_path(repo)}/compare/{_segment(base)}...{_segment(head)}')
        return response.json()

    def get_contents(self, repo: str, path: str, ref: str) -> Dict:
        """Get a file's contents (base64) and blob sha at ``ref``."""
        logger.debug(f"Fetching {path}@{ref} from {self.owner}/{repo}")

        response = self._make_request(
            'GET',
            f'{self._repo_path(repo)}/contents/{_segment(path.lstrip("/"))}',
            params={'ref': ref}
        )
        return response.json()

    def put_file(self, repo: str, path: str, text: str, message: str, branch: str, sha: str) -> Dict:
        """
        Commit new content for an existing file.

        GitHub rejects the write with 409 when ``sha`` is no longer the
        file's current blob sha on ``branch``.
        """
        logger.info(f"Committing {path} to {branch} in {self.owner}/{repo}")

        response = self._make_request(
            'PUT',
            f'{self._repo_path(repo)}/contents/{_segment(path.lstrip("/"))}',
            json={
                'message': message,
                'content': base64.b64encode(text.encode('utf-8')).decode('ascii'),
                'sha': sha,
                'branch': branch,
            }
        )
        return response.json()

    def delete_branch(self, repo: str, branch: str) -> None:
        """Delete a branch ref."""
        logger.info(f"Deleting branch {branch} from {self.owner}/{repo}")

        self._make_request('DELETE', f'{self._repo_path(repo)}/git/refs/heads/{_segment(branch)}')

    # GraphQL

    def _graphql_url(self) -> str:
        """Derive the GraphQL endpoint from the REST base URL."""
        parsed = urlparse(self.base_url)
        path = parsed.path.rstrip('/')

        if path.endswith('/api/v3'):
            path = path[:-len('/api/v3')] + '/api/graphql'
        else:
            path = path + '/graphql'

        return urlunparse(parsed._replace(path=path))

    def graphql(self, query: str, variables: Dict[str, Any]) -> Dict:
        """Run a GraphQL query or mutation."""
        response = self._make_request('POST', self._graphql_url(), json={'query': query, 'variables': variables})
        payload = response.json()

        errors = payload.get('errors')
        if errors:
            messages = [item.get('message', '') for item in errors if isinstance(item, dict)]
            message = '; '.join(m for m in messages if m) or 'Unknown GraphQL error'
            raise GitHubAPIError(f"GitHub GraphQL error: {message}", response_data={'message': message})

        return payload.get('data', {})
