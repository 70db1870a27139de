"""
Построение страницы документов по критериям поиска.

Фильтры применяются по порядку и объединяются через AND; каждый фильтр
включается только когда соответствующий критерий задан. Перед разбиением на
страницы всегда устанавливается полный порядок: выбранный ключ сортировки и
идентификатор по возрастанию как вторичный ключ.
"""

from typing import Callable, List, Optional

from sqlalchemy import ColumnElement, Select, String, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docshelf.core.errors import StorageFailure
from docshelf.db.models.document import Document as DocumentModel, DocumentTag as DocumentTagModel
from docshelf.db.repositories.document_repository import with_relations
from docshelf.domains.documents.entities import (
    CategoryScope, DocumentSummary, Page, SearchCriteria, SortKey,
    content_preview, ordered_tag_names
)
from docshelf.domains.identity.entities import display_name

PredicateBuilder = Callable[[SearchCriteria], Optional[ColumnElement[bool]]]


def text_predicate(criteria: SearchCriteria) -> Optional[ColumnElement[bool]]:
    """Подстрока в заголовке или содержимом без учета регистра"""
    term = criteria.search_term
    if term is None:
        return None
    return or_(
        func.lower(DocumentModel.title, type_=String).contains(term, autoescape=True),
        func.lower(DocumentModel.content, type_=String).contains(term, autoescape=True),
    )


def category_predicate(criteria: SearchCriteria) -> Optional[ColumnElement[bool]]:
    """Точное совпадение категории, включая документы без категории"""
    if criteria.category is CategoryScope.ANY:
        return None
    if criteria.category is CategoryScope.UNCATEGORIZED:
        return DocumentModel.category_id.is_(None)
    return DocumentModel.category_id == criteria.category


def tag_predicate(criteria: SearchCriteria) -> Optional[ColumnElement[bool]]:
    """Документ связан хотя бы с одним из запрошенных тегов"""
    if not criteria.tag_ids:
        return None
    return DocumentModel.document_tags.any(
        DocumentTagModel.tag_id.in_(sorted(criteria.tag_ids))
    )


PREDICATES: List[PredicateBuilder] = [text_predicate, category_predicate, tag_predicate]


def order_by_clauses(criteria: SearchCriteria) -> list:
    sort_key = criteria.sort_key
    if sort_key is SortKey.TITLE:
        column = DocumentModel.title
    elif sort_key is SortKey.CREATED_AT:
        column = DocumentModel.created_at
    else:
        # Сортировка по умолчанию не зависит от направления
        return [DocumentModel.updated_at.desc(), DocumentModel.id.asc()]

    primary = column.desc() if criteria.sort_descending else column.asc()
    return [primary, DocumentModel.id.asc()]


class QueryEngine:
    """Поиск документов с фильтрацией, сортировкой и пагинацией"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def build_filtered(self, criteria: SearchCriteria) -> Select:
        """Запрос документов с примененными фильтрами, без сортировки"""
        stmt = select(DocumentModel)
        for build in PREDICATES:
            predicate = build(criteria)
            if predicate is not None:
                stmt = stmt.where(predicate)
        return stmt

    async def search(self, criteria: SearchCriteria) -> Page[DocumentSummary]:
        """Страница кратких представлений документов, подходящих под критерии"""
        filtered = self.build_filtered(criteria)
        count_stmt = select(func.count()).select_from(filtered.subquery())
        page_stmt = (
            with_relations(filtered)
            .order_by(*order_by_clauses(criteria))
            .offset(criteria.offset)
            .limit(criteria.page_size)
        )

        try:
            total = (await self.session.execute(count_stmt)).scalar_one()
            db_documents = (await self.session.execute(page_stmt)).scalars().all()
        except SQLAlchemyError as exc:
            raise StorageFailure("Failed to query documents") from exc

        return Page(
            items=[self._to_summary(doc) for doc in db_documents],
            total_count=total,
            page_number=criteria.page_number,
            page_size=criteria.page_size
        )

    def _to_summary(self, db_document: DocumentModel) -> DocumentSummary:
        """Преобразование модели БД в краткое представление"""
        return DocumentSummary(
            id=db_document.id,
            title=db_document.title,
            content_preview=content_preview(db_document.content),
            created_at=db_document.created_at,
            updated_at=db_document.updated_at,
            user_name=display_name(db_document.user.username, db_document.user.email),
            category_id=db_document.category_id,
            category_name=db_document.category.name if db_document.category else None,
            tag_names=ordered_tag_names(dt.tag.name for dt in db_document.document_tags)
        )
