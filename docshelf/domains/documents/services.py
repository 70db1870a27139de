import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docshelf.core.errors import NotFound, StorageFailure, ValidationFailure
from docshelf.db.models.document import Document as DocumentModel
from docshelf.db.repositories.category_repository import CategoryRepository
from docshelf.db.repositories.document_repository import DocumentRepository
from docshelf.domains.documents.entities import (
    CategoryFilter, DocumentDetail, DocumentSummary, Page, SearchCriteria
)
from docshelf.domains.documents.query_engine import QueryEngine
from docshelf.domains.documents.schemas import DocumentCreate, DocumentUpdate
from docshelf.domains.documents.tag_reconciler import TagReconciler

logger = logging.getLogger(__name__)


class DocumentService:
    """Сервис для работы с документами"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.document_repository = DocumentRepository(session)
        self.category_repository = CategoryRepository(session)
        self.query_engine = QueryEngine(session)
        self.tag_reconciler = TagReconciler(session)

    async def get_documents(self, page_number: int = 1, page_size: int = 10) -> Page[DocumentSummary]:
        """Получение страницы документов, последние измененные первыми"""
        return await self.query_engine.search(
            SearchCriteria(page_number=page_number, page_size=page_size)
        )

    async def get_by_id(self, document_id: int) -> Optional[DocumentDetail]:
        """Получение документа по идентификатору"""
        return await self.document_repository.get_detail(document_id)

    async def get_by_category(
        self,
        category: CategoryFilter,
        page_number: int = 1,
        page_size: int = 10
    ) -> Page[DocumentSummary]:
        """Получение документов категории либо документов без категории"""
        return await self.query_engine.search(
            SearchCriteria(category=category, page_number=page_number, page_size=page_size)
        )

    async def get_recent(self, count: int = 5) -> List[DocumentSummary]:
        """Последние измененные документы"""
        page = await self.query_engine.search(SearchCriteria(page_size=count))
        return page.items

    async def search(self, criteria: SearchCriteria) -> Page[DocumentSummary]:
        """Поиск документов"""
        return await self.query_engine.search(criteria)

    async def create(self, document_data: DocumentCreate, user_id: int) -> DocumentDetail:
        """Создание документа вместе с тегами в одной транзакции"""
        now = datetime.now(timezone.utc)
        db_document = DocumentModel(
            title=document_data.title,
            content=document_data.content,
            user_id=user_id,
            category_id=document_data.category_id,
            created_at=now,
            updated_at=now
        )

        async with self._unit_of_work():
            await self._ensure_category_exists(document_data.category_id)
            await self.document_repository.add(db_document)
            await self.tag_reconciler.reconcile(db_document.id, document_data.tags)

        logger.info("Created document %s for user %s", db_document.id, user_id)
        return await self._reload(db_document.id)

    async def update(self, document_id: int, update_data: DocumentUpdate) -> DocumentDetail:
        """Обновление документа вместе с тегами в одной транзакции"""
        async with self._unit_of_work():
            db_document = await self.document_repository.get_model(document_id)
            if db_document is None:
                raise NotFound("Document does not exist.", entity_id=document_id)

            await self._ensure_category_exists(update_data.category_id)

            db_document.title = update_data.title
            db_document.content = update_data.content
            db_document.category_id = update_data.category_id
            db_document.updated_at = datetime.now(timezone.utc)
            await self.tag_reconciler.reconcile(document_id, update_data.tags)

        logger.info("Updated document %s", document_id)
        return await self._reload(document_id)

    async def delete(self, document_id: int) -> bool:
        """Удаление документа"""
        async with self._unit_of_work():
            deleted = await self.document_repository.delete(document_id)

        if deleted:
            logger.info("Deleted document %s", document_id)
        return deleted

    async def _ensure_category_exists(self, category_id: Optional[int]) -> None:
        if category_id is None:
            return
        if not await self.category_repository.exists(category_id):
            raise ValidationFailure("Category does not exist.", category_id=category_id)

    async def _reload(self, document_id: int) -> DocumentDetail:
        document = await self.document_repository.get_detail(document_id)
        if document is None:
            raise StorageFailure(f"Document {document_id} vanished after write")
        return document

    def _unit_of_work(self) -> "_UnitOfWork":
        return _UnitOfWork(self.session)


class _UnitOfWork:
    """Фиксация изменений при успехе и откат при любой ошибке"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self) -> AsyncSession:
        return self.session

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            await self.session.rollback()
            if isinstance(exc, SQLAlchemyError):
                raise StorageFailure("Failed to write document") from exc
            return False

        try:
            await self.session.commit()
        except SQLAlchemyError as commit_exc:
            await self.session.rollback()
            raise StorageFailure("Failed to commit document changes") from commit_exc
        return False
