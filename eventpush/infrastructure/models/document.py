"""SQLAlchemy model for schemaless documents grouped by collection."""

from sqlalchemy import JSON, Column, DateTime, String, func

from eventpush.infrastructure.database import Base


class DocumentModel(Base):
    """Database representation of one document of a collection."""

    __tablename__ = "document"

    collection = Column(String(120), primary_key=True)
    document_id = Column(String(120), primary_key=True)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())


__all__ = ["DocumentModel"]
