"""
Approval Data Models

라벨 승인 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ApprovalRecord:
    """리뷰어 코멘트로 승인된 라벨"""
    label: str
    line_number: int
    reviewer: str
    timestamp: Optional[str]
    comment_id: int
    comment_url: Optional[str]

    def __post_init__(self):
        """데이터 검증"""
        if self.line_number <= 0:
            raise ValueError("Line numbers must be positive")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'label': self.label,
            'lineNumber': self.line_number,
            'reviewer': self.reviewer,
            'timestamp': self.timestamp,
            'commentId': self.comment_id,
            'commentUrl': self.comment_url,
        }


@dataclass
class UnapprovedLabel:
    """아직 승인되지 않은 라벨"""
    label: str
    line_number: int

    def to_dict(self) -> Dict[str, Any]:
        return {'label': self.label, 'lineNumber': self.line_number}


@dataclass
class FileApprovalStatus:
    """파일 단위 승인 상태"""
    checked_file: str
    approved_labels: List[ApprovalRecord] = field(default_factory=list)
    unapproved_labels: List[UnapprovedLabel] = field(default_factory=list)
    eligible_reviewers: List[str] = field(default_factory=list)

    @property
    def approved(self) -> bool:
        """승인된 라벨이 하나 이상이고 미승인 라벨이 없을 때만 승인"""
        return not self.unapproved_labels and bool(self.approved_labels)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'approved': self.approved,
            'approvedLabels': [record.to_dict() for record in self.approved_labels],
            'unapprovedLabels': [label.to_dict() for label in self.unapproved_labels],
            'eligibleReviewers': list(self.eligible_reviewers),
            'checkedFile': self.checked_file,
        }
