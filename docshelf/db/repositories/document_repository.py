from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from docshelf.core.errors import StorageFailure
from docshelf.db.models.document import Document as DocumentModel, DocumentTag as DocumentTagModel
from docshelf.domains.documents.entities import DocumentDetail, ordered_tag_names
from docshelf.domains.identity.entities import display_name


def with_relations(stmt):
    """Жадная загрузка автора, категории и тегов документа"""
    return stmt.options(
        selectinload(DocumentModel.user),
        selectinload(DocumentModel.category),
        selectinload(DocumentModel.document_tags).selectinload(DocumentTagModel.tag),
    ).execution_options(populate_existing=True)


class DocumentRepository:
    """Репозиторий для работы с документами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, db_document: DocumentModel) -> DocumentModel:
        """Добавление документа; идентификатор доступен сразу после вызова"""
        self.session.add(db_document)
        await self.session.flush()
        return db_document

    async def get_model(self, document_id: int) -> Optional[DocumentModel]:
        """Получение строки документа без связей"""
        result = await self.session.execute(
            select(DocumentModel).where(DocumentModel.id == document_id)
        )
        return result.scalar_one_or_none()

    async def get_detail(self, document_id: int) -> Optional[DocumentDetail]:
        """Получение документа со всеми связями"""
        try:
            result = await self.session.execute(
                with_relations(select(DocumentModel).where(DocumentModel.id == document_id))
            )
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to load document {document_id}") from exc
        db_document = result.scalar_one_or_none()
        return self._to_detail(db_document) if db_document else None

    async def delete(self, document_id: int) -> bool:
        """Удаление документа вместе со связями с тегами"""
        result = await self.session.execute(
            select(DocumentModel)
            .where(DocumentModel.id == document_id)
            .options(selectinload(DocumentModel.document_tags))
            .execution_options(populate_existing=True)
        )
        db_document = result.scalar_one_or_none()
        if db_document is None:
            return False

        await self.session.delete(db_document)
        await self.session.flush()
        return True

    def _to_detail(self, db_document: DocumentModel) -> DocumentDetail:
        """Преобразование модели БД в полное представление документа"""
        return DocumentDetail(
            id=db_document.id,
            title=db_document.title,
            content=db_document.content,
            created_at=db_document.created_at,
            updated_at=db_document.updated_at,
            user_id=db_document.user_id,
            user_name=display_name(db_document.user.username, db_document.user.email),
            category_id=db_document.category_id,
            category_name=db_document.category.name if db_document.category else None,
            tags=ordered_tag_names(dt.tag.name for dt in db_document.document_tags)
        )
