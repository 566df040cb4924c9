"""
Review Sign-off

Reviewer allow-list and per-label approval scanning.
"""

from .approvals import ApprovalScanner, find_label_lines, approval_token
from .reviewers import load_reviewers, parse_reviewers_manifest

__all__ = [
    'ApprovalScanner',
    'find_label_lines',
    'approval_token',
    'load_reviewers',
    'parse_reviewers_manifest',
]
