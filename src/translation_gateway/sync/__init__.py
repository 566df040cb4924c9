"""
Branch Synchronisation

Pull request resolution, change computation, conflict detection and
merging for translation working branches.
"""

from .resolver import BranchResolver, ResolvedPullRequest
from .diff import DiffEngine
from .conflicts import ConflictDetector, find_conflicts
from .merge import MergeOrchestrator, MergeResult
from .lines import diff_lines
from .concurrency import fan_out

__all__ = [
    'BranchResolver',
    'ResolvedPullRequest',
    'DiffEngine',
    'ConflictDetector',
    'find_conflicts',
    'MergeOrchestrator',
    'MergeResult',
    'diff_lines',
    'fan_out',
]
