from typing import Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from docshelf.config import settings
from docshelf.db.base import Base  # noqa: F401


def _unicode_lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None


def register_sqlite_functions(async_engine: AsyncEngine) -> None:
    """Замена встроенной lower() SQLite, которая понимает только ASCII"""
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


# Асинхронный движок
engine = create_async_engine(settings.DATABASE_URL, future=True, echo=settings.SQL_ECHO)
register_sqlite_functions(engine)

# Сессии
SessionLocal = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


# Функция для dependency injection в FastAPI
async def get_db():
    async with SessionLocal() as session:
        yield session


async def init_models() -> None:
    """Создание таблиц для всех зарегистрированных моделей"""
    import docshelf.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
