"""
GitHub Integration Layer

This module provides GitHub API integration for pull request
management, branch comparison and file content access.
"""

from .client import GitHubClient, GitHubAPIError, GitHubTimeoutError, RateLimitExceeded
from .parser import GitHubResponseParser

__all__ = [
    'GitHubClient',
    'GitHubAPIError',
    'GitHubTimeoutError',
    'RateLimitExceeded',
    'GitHubResponseParser',
]
