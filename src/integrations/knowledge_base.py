"""Knowledge base (AnythingLLM) client for RAG queries and brief ingestion."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from src.common.call_log import log_call
from src.common.config import KNOWLEDGE_BASE_TIMEOUT_SECONDS
from src.common.errors import IngestionError, KnowledgeBaseError, KnowledgeBaseTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_WORKSPACE_SLUG = "sow-generator"


@dataclass
class KnowledgeBaseAnswer:
    """Answer returned by a knowledge base query."""

    text: str
    sources: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class IngestedDocument:
    """A brief uploaded to the knowledge base."""

    location: Optional[str]
    file_name: str
    file_size: int
    uploaded_at: str
    pinned: bool = False


class KnowledgeBaseClient:
    """Talks to an AnythingLLM server over its developer API."""

    collaborator_name = "knowledge_base"

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        workspace_slug: str = DEFAULT_WORKSPACE_SLUG,
        timeout: float = KNOWLEDGE_BASE_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root, e.g. ``https://llm.example.com/api``
            api_key: Bearer token for the API
            workspace_slug: Default workspace for queries and pinning
            timeout: Seconds before a query is abandoned
            session: Optional requests session (for testing)
        """
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key or ""
        self.workspace_slug = workspace_slug or DEFAULT_WORKSPACE_SLUG
        self.timeout = timeout
        self.session = session or requests.Session()

        if not self.configured:
            logger.warning("Knowledge base credentials missing. RAG features will be disabled.")

    @classmethod
    def from_config(cls, config: Dict[str, Any], session: Optional[requests.Session] = None) -> "KnowledgeBaseClient":
        kb = (config or {}).get("knowledge_base") or {}
        return cls(
            base_url=kb.get("url"),
            api_key=kb.get("api_key"),
            workspace_slug=kb.get("workspace_slug") or DEFAULT_WORKSPACE_SLUG,
            timeout=float(kb.get("timeout_seconds") or KNOWLEDGE_BASE_TIMEOUT_SECONDS),
            session=session,
        )

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.api_key)

    def _headers(self, json_body: bool = True) -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _require_configured(self) -> None:
        if not self.configured:
            raise KnowledgeBaseError(
                "Knowledge base is not configured: set ANYTHING_LLM_URL and ANYTHING_LLM_API_KEY",
                collaborator=self.collaborator_name,
            )

    def _request(self, method: str, path: str, error_cls=KnowledgeBaseError, **kwargs) -> Dict[str, Any]:
        self._require_configured()
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.Timeout as e:
            raise KnowledgeBaseTimeoutError(
                f"Knowledge base request to {path} timed out after {kwargs.get('timeout')}s",
                timeout_seconds=kwargs.get("timeout") or 0,
                original_error=e,
            ) from e
        except requests.RequestException as e:
            raise error_cls(
                f"Could not connect to knowledge base at {self.base_url}: {e}",
                collaborator=self.collaborator_name,
                original_error=e,
            ) from e

        if not response.ok:
            try:
                message = (response.json() or {}).get("message")
            except ValueError:
                message = None
            raise error_cls(
                f"Knowledge base returned {response.status_code} for {path}: {message or response.text}",
                collaborator=self.collaborator_name,
            )

        try:
            return response.json()
        except ValueError as e:
            raise error_cls(
                f"Invalid JSON from knowledge base for {path}: {e}", collaborator=self.collaborator_name
            ) from e

    @log_call
    def upload_document(self, content: bytes, file_name: str) -> Dict[str, Any]:
        """Upload a file; the response lists the stored ``documents``."""
        return self._request(
            "POST",
            "/v1/document/upload",
            error_cls=IngestionError,
            headers=self._headers(json_body=False),
            files={"file": (file_name, content)},
            timeout=self.timeout,
        )

    @log_call
    def update_embeddings(
        self, workspace: str, adds: Optional[List[str]] = None, removes: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """Pin or unpin documents in a workspace."""
        return self._request(
            "POST",
            f"/v1/workspace/{workspace}/update-embeddings",
            headers=self._headers(),
            json={"adds": adds or [], "removes": removes or []},
            timeout=self.timeout,
        )

    @log_call
    def chat(self, workspace: str, message: str) -> Dict[str, Any]:
        """Run a RAG query ("query" mode answers only from workspace documents)."""
        return self._request(
            "POST",
            f"/v1/workspace/{workspace}/chat",
            headers=self._headers(),
            json={"message": message, "mode": "query"},
            timeout=self.timeout,
        )

    @log_call
    def get_workspace(self, slug: str) -> Dict[str, Any]:
        return self._request(
            "GET", f"/v1/workspace/{slug}", headers=self._headers(json_body=False), timeout=self.timeout
        )

    def consult(self, query: str, workspace: Optional[str] = None) -> KnowledgeBaseAnswer:
        """
        Ask the knowledge base a question.

        Args:
            query: Question text
            workspace: Workspace slug (client default if omitted)

        Returns:
            KnowledgeBaseAnswer with the response text and cited sources

        Raises:
            ValueError: If the query is empty
            KnowledgeBaseError: If the knowledge base cannot answer
        """
        if not query or not query.strip():
            raise ValueError("Knowledge base query must not be empty")

        slug = workspace or self.workspace_slug
        logger.info(f"Consulting knowledge base workspace {slug}")
        data = self._require_dict(self.chat(slug, query.strip()))
        sources = [source for source in (data.get("sources") or []) if isinstance(source, dict)]
        return KnowledgeBaseAnswer(text=str(data.get("textResponse") or ""), sources=sources)

    def ingest_brief(self, content: bytes, file_name: str) -> IngestedDocument:
        """
        Upload a client brief and pin it to the default workspace.

        A failed pin is logged and reported through ``pinned``; only a failed
        upload raises.

        Raises:
            IngestionError: If the upload fails
        """
        if not file_name:
            raise IngestionError("No file provided", collaborator=self.collaborator_name)

        logger.info(f"Uploading {file_name} ({len(content)} bytes) to knowledge base")
        data = self._require_dict(self.upload_document(content, file_name), IngestionError)

        documents = data.get("documents") or []
        location = None
        if documents and isinstance(documents[0], dict):
            location = documents[0].get("location")

        pinned = False
        if location:
            try:
                self.update_embeddings(self.workspace_slug, adds=[location])
                pinned = True
            except KnowledgeBaseError as e:
                logger.warning(f"Failed to pin {location} to {self.workspace_slug}: {e}")
        else:
            logger.warning(f"Upload of {file_name} succeeded but no document location was returned")

        return IngestedDocument(
            location=location,
            file_name=file_name,
            file_size=len(content),
            uploaded_at=datetime.now(timezone.utc).isoformat(),
            pinned=pinned,
        )

    def _require_dict(self, data: Any, error_cls=KnowledgeBaseError) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise error_cls(
                f"Unexpected knowledge base response: {type(data).__name__}", collaborator=self.collaborator_name
            )
        return data
