"""
Data Models

번역 게이트웨이의 핵심 데이터 모델들
"""

from .translation import TranslationDocument, Label, LanguageEntry
from .repository import PullRequest, FileContent, ChangedFileSummary, Comparison, ReviewComment
from .changes import (
    DiffSegment,
    ChangedFile,
    ChangedFilesResult,
    DetailedFile,
    Conflict,
    FileConflicts,
    ConflictCheck,
)
from .approval import ApprovalRecord, UnapprovedLabel, FileApprovalStatus

__all__ = [
    "TranslationDocument",
    "Label",
    "LanguageEntry",
    "PullRequest",
    "FileContent",
    "ChangedFileSummary",
    "Comparison",
    "ReviewComment",
    "DiffSegment",
    "ChangedFile",
    "ChangedFilesResult",
    "DetailedFile",
    "Conflict",
    "FileConflicts",
    "ConflictCheck",
    "ApprovalRecord",
    "UnapprovedLabel",
    "FileApprovalStatus",
]
