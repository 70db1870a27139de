from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docshelf.db.models.document import Category as CategoryModel


class CategoryRepository:
    """Репозиторий для работы с категориями"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, category_id: int) -> bool:
        """Проверка существования категории"""
        result = await self.session.execute(
            select(CategoryModel.id).where(CategoryModel.id == category_id)
        )
        return result.scalar_one_or_none() is not None
