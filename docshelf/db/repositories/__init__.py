from docshelf.db.repositories.user_repository import UserRepository
from docshelf.db.repositories.category_repository import CategoryRepository
from docshelf.db.repositories.document_repository import DocumentRepository
from docshelf.db.repositories.tag_repository import TagRepository

__all__ = [
    "UserRepository",
    "CategoryRepository",
    "DocumentRepository",
    "TagRepository"
]
