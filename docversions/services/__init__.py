"""
Service layer.

Services:
- document_table: whole-item key-value access
- document_service: documents, nicknames, versions and nodes
- file_service: object store pass-through for version files
"""

from .document_service import DocumentService, document_service
from .file_service import FileService, file_service

__all__ = [
    "DocumentService",
    "document_service",
    "FileService",
    "file_service",
]
