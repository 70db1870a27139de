from datetime import datetime, timezone
from typing import Iterable, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docshelf.core.errors import StorageFailure
from docshelf.db.models.document import Tag as TagModel
from docshelf.db.repositories.tag_repository import TagRepository
from docshelf.domains.documents.entities import canonicalize


class TagReconciler:
    """
    Приведение связей документа с тегами к желаемому набору.

    Все существующие связи документа удаляются, затем добавляются заново по
    одной на каждый тег. Недостающие теги создаются в словаре. Изменения не
    фиксируются: вызов должен выполняться внутри транзакции записи документа.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.tag_repository = TagRepository(session)

    async def reconcile(self, document_id: int, desired_tag_names: Iterable[str]) -> None:
        """Замена связей документа с тегами на желаемый набор"""
        try:
            tag_ids = await self._resolve_tag_ids(desired_tag_names)

            await self.tag_repository.clear_document_tags(document_id)
            now = datetime.now(timezone.utc)
            for tag_id in tag_ids:
                await self.tag_repository.add_document_tag(document_id, tag_id, now)
            await self.session.flush()
        except StorageFailure:
            raise
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to reconcile tags of document {document_id}") from exc

    async def _resolve_tag_ids(self, desired_tag_names: Iterable[str]) -> List[int]:
        tag_ids: List[int] = []
        # dict.fromkeys сохраняет порядок первого появления
        for raw_name in dict.fromkeys(desired_tag_names):
            name = raw_name.strip()
            if not name:
                continue
            tag = await self.get_or_create(name)
            if tag.id not in tag_ids:
                tag_ids.append(tag.id)
        return tag_ids

    async def get_or_create(self, name: str) -> TagModel:
        """Тег с тем же каноническим именем либо новый тег с отображаемым именем name"""
        normalized_name = canonicalize(name)
        tag = await self.tag_repository.get_by_normalized_name(normalized_name)
        if tag is None:
            tag = await self.tag_repository.create(name, normalized_name)
        return tag
