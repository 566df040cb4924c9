"""
Repository Data Models

GitHub 응답을 정규화한 데이터 모델들
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PullRequest:
    """Pull Request 정보"""
    number: int
    node_id: Optional[str] = None
    state: str = "open"
    draft: bool = False
    mergeable: Optional[bool] = None
    head_ref: Optional[str] = None
    base_ref: Optional[str] = None
    updated_at: Optional[str] = None
    html_url: Optional[str] = None

    def __post_init__(self):
        """데이터 검증"""
        if self.number <= 0:
            raise ValueError("PR number must be positive")


@dataclass
class FileContent:
    """특정 ref 기준 파일 내용과 리비전(sha)"""
    path: str
    sha: str
    text: str


@dataclass
class ChangedFileSummary:
    """compare / PR 파일 목록의 개별 항목"""
    filename: str
    status: str
    sha: Optional[str] = None
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    patch: Optional[str] = None
    previous_filename: Optional[str] = None

    def __post_init__(self):
        """데이터 검증"""
        if not self.filename:
            raise ValueError("Filename cannot be empty")
        if self.additions < 0 or self.deletions < 0:
            raise ValueError("Addition and deletion counts must be non-negative")

    @property
    def exists_before(self) -> bool:
        """안정 브랜치에 이전 버전이 있는지"""
        return self.status not in ('added', 'copied')

    @property
    def exists_after(self) -> bool:
        """작업 브랜치에 현재 버전이 있는지"""
        return self.status != 'removed'

    @property
    def before_path(self) -> str:
        if self.status == 'renamed' and self.previous_filename:
            return self.previous_filename
        return self.filename

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'filename': self.filename,
            'status': self.status,
            'sha': self.sha,
            'additions': self.additions,
            'deletions': self.deletions,
            'changes': self.changes,
            'patch': self.patch,
        }
        if self.previous_filename:
            data['previous_filename'] = self.previous_filename
        return data


@dataclass
class Comparison:
    """두 ref 비교 결과"""
    base: str
    head: str
    status: str
    ahead_by: int
    behind_by: int
    files: List[ChangedFileSummary] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return self.ahead_by > 0


@dataclass
class ReviewComment:
    """Pull Request 리뷰 코멘트"""
    id: int
    path: str
    body: str
    user: Optional[str]
    line: Optional[int] = None
    created_at: Optional[str] = None
    html_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'path': self.path,
            'line': self.line,
            'body': self.body,
            'user': self.user,
            'created_at': self.created_at,
            'html_url': self.html_url,
        }
