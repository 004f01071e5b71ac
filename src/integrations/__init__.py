"""Adapters for the collaborators around the SOW engine."""

from .brief_store import BriefStore
from .editor import EditorSurface, insert_sow
from .knowledge_base import IngestedDocument, KnowledgeBaseAnswer, KnowledgeBaseClient

__all__ = [
    "BriefStore",
    "EditorSurface",
    "insert_sow",
    "IngestedDocument",
    "KnowledgeBaseAnswer",
    "KnowledgeBaseClient",
]
