from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from docshelf.api.http.params import parse_category
from docshelf.config import settings
from docshelf.core.auth import get_current_user
from docshelf.core.db import get_db
from docshelf.domains.documents.schemas import (
    DocumentCreate, DocumentListItem, DocumentPageResponse, DocumentResponse, DocumentUpdate
)
from docshelf.domains.documents.services import DocumentService
from docshelf.domains.identity.entities import User

router = APIRouter(prefix="/documents", tags=["documents"], dependencies=[Depends(get_current_user)])


@router.get("/", response_model=DocumentPageResponse)
async def get_documents(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    """Получение списка документов"""
    document_service = DocumentService(db)
    documents = await document_service.get_documents(page, per_page)
    return DocumentPageResponse.model_validate(documents)


@router.get("/recent", response_model=List[DocumentListItem])
async def get_recent_documents(
    count: int = Query(settings.RECENT_DOCUMENTS_COUNT, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    """Последние измененные документы"""
    document_service = DocumentService(db)
    documents = await document_service.get_recent(count)
    return [DocumentListItem.model_validate(doc) for doc in documents]


@router.get("/category/{category}", response_model=DocumentPageResponse)
async def get_documents_by_category(
    category: str,
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    """Документы категории; 'none' выбирает документы без категории"""
    document_service = DocumentService(db)
    documents = await document_service.get_by_category(parse_category(category), page, per_page)
    return DocumentPageResponse.model_validate(documents)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Получение документа по идентификатору"""
    document_service = DocumentService(db)

    document = await document_service.get_by_id(document_id)

    if not document:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )

    return DocumentResponse.model_validate(document)


@router.post("/", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Создание нового документа"""
    document_service = DocumentService(db)
    document = await document_service.create(document_data, current_user.id)
    return DocumentResponse.model_validate(document)


@router.put("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: int,
    update_data: DocumentUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Обновление документа"""
    document_service = DocumentService(db)
    document = await document_service.update(document_id, update_data)
    return DocumentResponse.model_validate(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Удаление документа"""
    document_service = DocumentService(db)

    success = await document_service.delete(document_id)

    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found"
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
