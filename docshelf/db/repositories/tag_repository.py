from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from docshelf.core.errors import DuplicateTagRace
from docshelf.db.models.document import DocumentTag as DocumentTagModel, Tag as TagModel


class TagRepository:
    """Репозиторий словаря тегов и связей документ-тег"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_normalized_name(self, normalized_name: str) -> Optional[TagModel]:
        """Поиск тега по канонической форме имени"""
        result = await self.session.execute(
            select(TagModel).where(TagModel.normalized_name == normalized_name)
        )
        return result.scalar_one_or_none()

    async def create(self, name: str, normalized_name: str) -> TagModel:
        """Создание тега; запись сразу видна последующим запросам в этой транзакции"""
        db_tag = TagModel(name=name, normalized_name=normalized_name)
        self.session.add(db_tag)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise DuplicateTagRace(name) from exc
        return db_tag

    async def clear_document_tags(self, document_id: int) -> None:
        """Удаление всех связей документа с тегами"""
        await self.session.execute(
            delete(DocumentTagModel).where(DocumentTagModel.document_id == document_id)
        )

    async def add_document_tag(self, document_id: int, tag_id: int, created_at: datetime) -> None:
        """Добавление связи документа с тегом"""
        self.session.add(
            DocumentTagModel(document_id=document_id, tag_id=tag_id, created_at=created_at)
        )
