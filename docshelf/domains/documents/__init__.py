from docshelf.domains.documents.entities import (
    CategoryScope, DocumentDetail, DocumentSummary, Page, SearchCriteria, SortKey
)
from docshelf.domains.documents.schemas import (
    DocumentBase, DocumentCreate, DocumentUpdate, DocumentResponse,
    DocumentListItem, DocumentPageResponse
)

__all__ = [
    "CategoryScope", "DocumentDetail", "DocumentSummary", "Page", "SearchCriteria", "SortKey",
    "DocumentBase", "DocumentCreate", "DocumentUpdate", "DocumentResponse",
    "DocumentListItem", "DocumentPageResponse"
]
