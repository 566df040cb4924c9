"""
Request Models

HTTP 요청 검증용 Pydantic 모델들
"""

from typing import Dict, Optional
from pydantic import BaseModel, field_validator


def _require_text(value: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError('must not be empty')
    return str(value).strip()


class RepositoryQuery(BaseModel):
    """저장소 단위 요청"""
    repo: str

    @field_validator('repo')
    @classmethod
    def validate_repo(cls, v):
        v = _require_text(v)
        if '/' in v:
            raise ValueError('must be a repository name without the owner')
        return v


class BranchQuery(RepositoryQuery):
    """작업 브랜치 단위 요청"""
    branch: str

    @field_validator('branch')
    @classmethod
    def validate_branch(cls, v):
        return _require_text(v)


class ConflictQuery(BranchQuery):
    """충돌 검사 요청"""
    reference: Optional[str] = None

    @field_validator('reference')
    @classmethod
    def validate_reference(cls, v):
        if v is None:
            return v
        return v.strip() or None


class UpdateTranslationsRequest(BranchQuery):
    """번역 반영 요청"""
    filename: str
    translations: Dict[str, Dict[str, str]]

    @field_validator('filename')
    @classmethod
    def validate_filename(cls, v):
        return _require_text(v)

    @field_validator('translations')
    @classmethod
    def validate_translations(cls, v):
        if not v:
            raise ValueError('must contain at least one label')
        return v


class MergeRequest(BranchQuery):
    """브랜치 병합 요청"""


class ApproveFileRequest(RepositoryQuery):
    """라벨 승인 코멘트 작성 요청"""
    sha: str
    lang: str
    label_name: str

    @field_validator('sha', 'lang', 'label_name')
    @classmethod
    def validate_fields(cls, v):
        return _require_text(v)
