"""
Translation Document Models

번역 파일(YAML) 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple


@dataclass
class LanguageEntry:
    """라벨의 언어별 번역 항목"""
    language_code: str
    term: Any
    # 같은 번역 맵에서 나온 항목들은 같은 group 값을 가진다
    group: Optional[int] = None

    def __post_init__(self):
        """데이터 검증"""
        if not isinstance(self.language_code, str) or not self.language_code.strip():
            raise ValueError("Language code must be a non-empty string")

    @property
    def is_blank(self) -> bool:
        """번역 값이 비어 있는지 확인"""
        return self.term is None or (isinstance(self.term, str) and self.term.strip() == "")


@dataclass
class Label:
    """이름과 언어별 번역 목록을 가진 용어 항목"""
    name: str
    translations: List[LanguageEntry] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)
    key_order: List[str] = field(default_factory=list)

    def __post_init__(self):
        """데이터 검증"""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Label name must be a non-empty string")

    def find_entry(self, language_code: str) -> Optional[LanguageEntry]:
        """언어 코드에 해당하는 첫 번째 항목 반환"""
        for entry in self.translations:
            if entry.language_code == language_code:
                return entry
        return None

    @property
    def languages(self) -> List[str]:
        """라벨에 존재하는 언어 코드 목록"""
        return [entry.language_code for entry in self.translations]

    def translations_to_list(self) -> List[Dict[str, Any]]:
        """원래의 번역 맵 구조로 변환"""
        maps: List[Dict[str, Any]] = []
        previous_group = object()
        for entry in self.translations:
            if entry.group is not None and entry.group == previous_group and maps:
                maps[-1][entry.language_code] = entry.term
            else:
                maps.append({entry.language_code: entry.term})
            previous_group = entry.group
        return maps

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환 (필드 순서 유지)"""
        values = dict(self.extra)
        values['name'] = self.name
        values['translations'] = self.translations_to_list()

        data: Dict[str, Any] = {}
        for key in self.key_order:
            if key in values:
                data[key] = values.pop(key)
        for key in ('name', 'translations'):
            if key in values:
                data[key] = values.pop(key)
        data.update(values)
        return data


@dataclass
class TranslationDocument:
    """번역 파일 전체"""
    labels: List[Label] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)
    key_order: List[str] = field(default_factory=list)
    # 파싱한 원본 YAML 트리 (주석과 서식 보존용)
    source: Any = field(default=None, compare=False, repr=False)

    def find_label(self, name: str) -> Optional[Label]:
        """이름이 같은 첫 번째 라벨 반환"""
        for label in self.labels:
            if label.name == name:
                return label
        return None

    @property
    def label_names(self) -> List[str]:
        return [label.name for label in self.labels]

    def iter_terms(self) -> Iterator[Tuple[str, str, Any]]:
        """(라벨, 언어, 번역) 튜플 순회"""
        for label in self.labels:
            for entry in label.translations:
                yield label.name, entry.language_code, entry.term

    def terms(self) -> Dict[str, Dict[str, Any]]:
        """라벨 -> 언어 -> 번역 매핑 (처음 나온 값 우선)"""
        result: Dict[str, Dict[str, Any]] = {}
        for label_name, language, term in self.iter_terms():
            result.setdefault(label_name, {}).setdefault(language, term)
        return result

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환 (필드 순서 유지)"""
        values = dict(self.extra)
        values['labels'] = [label.to_dict() for label in self.labels]

        data: Dict[str, Any] = {}
        for key in self.key_order:
            if key in values:
                data[key] = values.pop(key)
        data.update(values)
        return data
