"""Shared configuration, errors, numeric coercion and call logging."""

from .errors import (
    CatalogLoadError,
    CollaboratorError,
    IngestionError,
    KnowledgeBaseError,
    KnowledgeBaseTimeoutError,
    PdfConversionError,
    SowEngineError,
    TemplateError,
)

__all__ = [
    "SowEngineError",
    "CatalogLoadError",
    "CollaboratorError",
    "KnowledgeBaseError",
    "KnowledgeBaseTimeoutError",
    "IngestionError",
    "PdfConversionError",
    "TemplateError",
]
