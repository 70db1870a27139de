"""
Общие фикстуры тестов.

Каждый тест получает собственную базу SQLite в памяти.
"""
import itertools
import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import docshelf.db.models  # noqa: F401
from docshelf.core.db import register_sqlite_functions
from docshelf.db.base import Base
from docshelf.db.models.document import Category as CategoryModel, Document as DocumentModel
from docshelf.db.repositories.user_repository import UserRepository
from docshelf.domains.documents.tag_reconciler import TagReconciler

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    register_sqlite_functions(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def user(session):
    """Пользователь с username"""
    user = await UserRepository(session).create("alice@example.com", "alice")
    await session.commit()
    return user


@pytest.fixture
def make_category(session):
    async def _make(name: str) -> int:
        category = CategoryModel(name=name)
        session.add(category)
        await session.flush()
        category_id = category.id
        await session.commit()
        return category_id

    return _make


@pytest.fixture
def make_document(session, user):
    """Фабрика документов; без явных отметок времени каждый следующий документ новее"""
    ticks = itertools.count()

    async def _make(
        title,
        content="",
        category_id=None,
        tags=(),
        created_at=None,
        updated_at=None,
        user_id=None,
    ) -> int:
        created_at = created_at or BASE_TIME + timedelta(minutes=next(ticks))
        db_document = DocumentModel(
            title=title,
            content=content,
            user_id=user_id or user.id,
            category_id=category_id,
            created_at=created_at,
            updated_at=updated_at or created_at,
        )
        session.add(db_document)
        await session.flush()
        document_id = db_document.id
        await TagReconciler(session).reconcile(document_id, list(tags))
        await session.commit()
        return document_id

    return _make
