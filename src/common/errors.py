"""
Error hierarchy for the SOW document engine.

Invalid numeric input is never an error (it is repaired to zero where it is
read); these exceptions cover failed collaborators and programming errors.
"""

from typing import Optional


class SowEngineError(Exception):
    """Base exception for SOW engine errors."""

    user_message = "Something went wrong while preparing the Statement of Work."

    def __init__(
        self,
        message: str,
        collaborator: str = "unknown",
        original_error: Optional[Exception] = None,
    ):
        self.collaborator = collaborator
        self.original_error = original_error
        super().__init__(message)


class CatalogLoadError(SowEngineError):
    """Raised when the rate card cannot be read or parsed."""

    user_message = "Rate card unavailable. Rates can still be entered manually."


class TemplateError(SowEngineError):
    """Raised when a template placeholder has no value."""

    pass


class CollaboratorError(SowEngineError):
    """Base exception for external collaborator failures."""

    pass


class KnowledgeBaseError(CollaboratorError):
    """Raised when the knowledge base cannot answer a request."""

    user_message = "Failed to consult knowledge base"


class KnowledgeBaseTimeoutError(KnowledgeBaseError):
    """Raised when a knowledge base request times out."""

    def __init__(
        self,
        message: str,
        collaborator: str = "knowledge_base",
        timeout_seconds: float = 0,
        original_error: Optional[Exception] = None,
    ):
        self.timeout_seconds = timeout_seconds
        super().__init__(message, collaborator, original_error)


class IngestionError(CollaboratorError):
    """Raised when a document cannot be uploaded to the knowledge base."""

    user_message = "Failed to ingest document"


class PdfConversionError(CollaboratorError):
    """Raised when HTML cannot be converted to PDF."""

    user_message = "Failed to generate PDF"
