from docshelf.api.http.documents import router as documents_router
from docshelf.api.http.search import router as search_router

__all__ = [
    "documents_router",
    "search_router"
]
