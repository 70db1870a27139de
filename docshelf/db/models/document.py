from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from docshelf.db.base import Base, BaseModel, utcnow


class Category(BaseModel):
    __tablename__ = "categories"

    name = Column(String(100), unique=True, nullable=False)

    # Relationships
    documents = relationship("Document", back_populates="category")


class Document(BaseModel):
    __tablename__ = "documents"

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)

    # Relationships
    user = relationship("User", back_populates="documents")
    category = relationship("Category", back_populates="documents")
    document_tags = relationship("DocumentTag", back_populates="document", cascade="all, delete-orphan")


class Tag(BaseModel):
    __tablename__ = "tags"

    name = Column(String(100), nullable=False)
    # Каноническая форма имени (trim + lower), уникальна без учета регистра
    normalized_name = Column(String(100), unique=True, index=True, nullable=False)

    # Relationships
    document_tags = relationship("DocumentTag", back_populates="tag")


class DocumentTag(Base):
    __tablename__ = "document_tags"

    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    document = relationship("Document", back_populates="document_tags")
    tag = relationship("Tag", back_populates="document_tags")
