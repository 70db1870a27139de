from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from docshelf.api.http.params import parse_category, parse_tag_ids
from docshelf.config import settings
from docshelf.core.auth import get_current_user
from docshelf.core.db import get_db
from docshelf.domains.documents.entities import SearchCriteria
from docshelf.domains.documents.schemas import DocumentPageResponse
from docshelf.domains.documents.services import DocumentService

router = APIRouter(prefix="/search", tags=["search"], dependencies=[Depends(get_current_user)])


@router.get("/", response_model=DocumentPageResponse)
async def search_documents(
    query: Optional[str] = Query(None, max_length=200),
    category_id: Optional[str] = Query(None, description="Category id or 'none' for uncategorized"),
    tag_ids: Optional[str] = Query(None, description="Comma-separated tag ids"),
    page_number: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort_by: Optional[str] = Query("updatedAt"),
    sort_descending: bool = Query(True),
    db: AsyncSession = Depends(get_db)
):
    """Поиск документов по тексту, категории и тегам"""
    criteria = SearchCriteria(
        query=query,
        category=parse_category(category_id),
        tag_ids=frozenset(parse_tag_ids(tag_ids)),
        sort_by=sort_by,
        sort_descending=sort_descending,
        page_number=page_number,
        page_size=page_size
    )

    document_service = DocumentService(db)
    documents = await document_service.search(criteria)
    return DocumentPageResponse.model_validate(documents)
