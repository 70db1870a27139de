from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DocumentBase(BaseModel):
    """Базовая схема документа"""
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(default="", max_length=1000000)  # 1MB max content
    category_id: Optional[int] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v):
        for tag in v:
            if len(tag.strip()) > 100:
                raise ValueError('Tag name cannot be longer than 100 characters')
        return v


class DocumentCreate(DocumentBase):
    """Схема для создания документа"""
    pass


class DocumentUpdate(DocumentBase):
    """Схема для обновления документа; заменяет все поля, включая теги"""
    pass


class DocumentResponse(BaseModel):
    """Схема для ответа с данными документа"""
    id: int
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    user_id: int
    user_name: str
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    tags: List[str]

    model_config = ConfigDict(from_attributes=True)


class DocumentListItem(BaseModel):
    """Краткое представление документа в списках"""
    id: int
    title: str
    content_preview: str
    created_at: datetime
    updated_at: datetime
    user_name: str
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    tag_names: List[str]

    model_config = ConfigDict(from_attributes=True)


class DocumentPageResponse(BaseModel):
    """Страница документов"""
    items: List[DocumentListItem]
    total_count: int
    page_number: int
    page_size: int
    total_pages: int
    has_previous_page: bool
    has_next_page: bool

    model_config = ConfigDict(from_attributes=True)
