"""
Change Data Models

브랜치 변경사항 / 충돌 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .repository import ReviewComment


@dataclass
class DiffSegment:
    """라인 diff의 연속 구간"""
    value: str
    count: int
    added: bool = False
    removed: bool = False

    def __post_init__(self):
        """데이터 검증"""
        if self.added and self.removed:
            raise ValueError("A segment cannot be both added and removed")
        if self.count < 0:
            raise ValueError("Line count must be non-negative")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'value': self.value,
            'count': self.count,
            'added': self.added,
            'removed': self.removed,
        }


@dataclass
class ChangedFile:
    """변경된 파일의 이전/이후 내용과 라인 diff"""
    filename: str
    status: str
    sha: Optional[str]
    before: Optional[str]
    after: Optional[str]
    diff: List[DiffSegment] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'filename': self.filename,
            'status': self.status,
            'sha': self.sha,
            'before': self.before,
            'after': self.after,
            'diff': [segment.to_dict() for segment in self.diff],
        }


@dataclass
class ChangedFilesResult:
    """작업 브랜치의 변경 파일 목록"""
    pull_request_number: Optional[int] = None
    files: List[ChangedFile] = field(default_factory=list)
    comments: List[ReviewComment] = field(default_factory=list)
    no_changes: bool = False
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.no_changes:
            return {'noChanges': True, 'message': self.message}
        return {
            'pullRequestNumber': self.pull_request_number,
            'files': [changed.to_dict() for changed in self.files],
            'comments': [comment.to_dict() for comment in self.comments],
        }


@dataclass
class DetailedFile:
    """작업 브랜치 기준으로 파싱한 변경 파일 내용"""
    filename: str
    status: str
    content: Any

    def to_dict(self) -> Dict[str, Any]:
        return {'filename': self.filename, 'status': self.status, 'content': self.content}


@dataclass
class Conflict:
    """라벨/언어 단위 충돌"""
    filename: str
    label: str
    language: str
    reference_value: Any
    branch_value: Any

    def to_dict(self) -> Dict[str, Any]:
        return {
            'label': self.label,
            'language': self.language,
            'referenceValue': self.reference_value,
            'branchValue': self.branch_value,
        }


@dataclass
class FileConflicts:
    """파일별 충돌 목록"""
    filename: str
    conflicts: List[Conflict] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def has_conflicts(self) -> bool:
        """충돌이 있거나 내용을 확인하지 못한 경우"""
        return bool(self.conflicts) or self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'filename': self.filename,
            'conflicts': [conflict.to_dict() for conflict in self.conflicts],
        }
        if self.error is not None:
            data['error'] = self.error
        return data


@dataclass
class ConflictCheck:
    """충돌 검사 결과 (번역 파일이 아니어서 건너뛴 파일 포함)"""
    reference: str
    files: List[FileConflicts] = field(default_factory=list)
    # 양쪽에서 변경됐지만 .yml/.yaml 파일이 아니어서 검사하지 않은 파일
    skipped_files: List[str] = field(default_factory=list)
