"""Вспомогательные запросы для проверок в тестах."""
from sqlalchemy import func, select

from docshelf.db.models.document import DocumentTag, Tag


async def tag_id_of(session, name: str) -> int:
    result = await session.execute(select(Tag.id).where(Tag.normalized_name == name.strip().lower()))
    return result.scalar_one()


async def count_rows(session, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


async def association_tag_names(session, document_id: int) -> list:
    result = await session.execute(
        select(Tag.name)
        .join(DocumentTag, DocumentTag.tag_id == Tag.id)
        .where(DocumentTag.document_id == document_id)
        .order_by(Tag.name)
    )
    return list(result.scalars().all())
