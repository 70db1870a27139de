import enum
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Generic, Iterable, List, Optional, TypeVar, Union

from docshelf.core.errors import ValidationFailure

PREVIEW_LENGTH = 150
PREVIEW_SUFFIX = "..."

T = TypeVar("T")


def canonicalize(text: str) -> str:
    """Каноническая форма текста для сравнения: без пробелов по краям, в нижнем регистре"""
    return text.strip().lower()


def content_preview(content: str) -> str:
    """Превью содержимого: первые 150 символов и многоточие, если текст длиннее"""
    if len(content) > PREVIEW_LENGTH:
        return content[:PREVIEW_LENGTH] + PREVIEW_SUFFIX
    return content


class SortKey(enum.Enum):
    TITLE = "title"
    CREATED_AT = "createdat"
    UPDATED_AT = "updatedat"

    @classmethod
    def resolve(cls, sort_by: Optional[str]) -> "SortKey":
        """Ключ сортировки по имени без учета регистра; неизвестные имена дают UPDATED_AT"""
        if sort_by:
            normalized = sort_by.strip().lower()
            if normalized == cls.TITLE.value:
                return cls.TITLE
            if normalized == cls.CREATED_AT.value:
                return cls.CREATED_AT
        return cls.UPDATED_AT


class CategoryScope(enum.Enum):
    """Фильтр категории, отличный от конкретного идентификатора"""
    ANY = "any"
    UNCATEGORIZED = "none"


CategoryFilter = Union[int, CategoryScope]


@dataclass(frozen=True)
class SearchCriteria:
    query: Optional[str] = None
    category: CategoryFilter = CategoryScope.ANY
    tag_ids: FrozenSet[int] = frozenset()
    sort_by: Optional[str] = None
    sort_descending: bool = True
    page_number: int = 1
    page_size: int = 10

    def __post_init__(self):
        if self.page_number < 1:
            raise ValidationFailure("Page number must be at least 1", page_number=self.page_number)
        if self.page_size < 1:
            raise ValidationFailure("Page size must be at least 1", page_size=self.page_size)
        if not isinstance(self.tag_ids, frozenset):
            object.__setattr__(self, "tag_ids", frozenset(self.tag_ids))

    @property
    def search_term(self) -> Optional[str]:
        """Каноническая поисковая строка или None, если текстовый фильтр отключен"""
        if self.query is None or not self.query.strip():
            return None
        return canonicalize(self.query)

    @property
    def sort_key(self) -> SortKey:
        return SortKey.resolve(self.sort_by)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size


@dataclass
class Page(Generic[T]):
    items: List[T]
    total_count: int
    page_number: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1

    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages


@dataclass
class DocumentSummary:
    id: int
    title: str
    content_preview: str
    created_at: datetime
    updated_at: datetime
    user_name: str
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    tag_names: List[str] = field(default_factory=list)


@dataclass
class DocumentDetail:
    id: int
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    user_id: int
    user_name: str
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    tags: List[str] = field(default_factory=list)


def ordered_tag_names(names: Iterable[str]) -> List[str]:
    return sorted(names, key=lambda name: (name.lower(), name))
