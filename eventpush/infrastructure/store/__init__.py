"""Document store adapters."""

from .base import Document, DocumentStore, FieldFilter, WriteBatch, generate_document_id
from .sql import SqlDocumentStore

__all__ = [
    "Document",
    "DocumentStore",
    "FieldFilter",
    "WriteBatch",
    "generate_document_id",
    "SqlDocumentStore",
]
