from docshelf.db.models.user import User
from docshelf.db.models.document import Category, Document, DocumentTag, Tag

__all__ = [
    "User",
    "Category",
    "Document",
    "DocumentTag",
    "Tag"
]
