"""
Pydantic models for SOW payloads produced by the AI assistant.

The assistant streams partial tool output, so these models never reject a
payload for its shape: missing arrays become empty, strings given where a
list is expected are split into lines, non-object entries are dropped and
missing numbers read as zero. ``parse_sow_payload`` is the only way such a
payload becomes a SOWDocument.
"""

import json
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.common.numbers import ZERO, clamp_percent, safe_number

from .models import LineItem, Scope, SOWDocument

logger = logging.getLogger(__name__)


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return ""
    return str(value)


def _coerce_string_list(value: Any) -> List[str]:
    """Normalize string or list inputs into a clean list of strings."""
    if isinstance(value, str):
        return [line.strip() for line in value.splitlines() if line.strip()]
    if isinstance(value, (list, tuple)):
        items = []
        for item in value:
            if item is None or isinstance(item, (dict, list)):
                continue
            text = str(item).strip()
            if text:
                items.append(text)
        return items
    return []


def _coerce_objects(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, dict)]


class RolePayload(BaseModel):
    """One pricing row (``roles[]`` in the assistant's output)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    task: str = Field("", description="Task or description of the work")
    role: str = Field("", description="Role name from the rate card, or free text")
    hours: Decimal = Field(ZERO, description="Hours, invalid input reads as 0")
    rate: Decimal = Field(ZERO, description="Hourly rate, invalid input reads as 0")

    @field_validator("id", "task", "role", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _coerce_text(value)

    @field_validator("hours", "rate", mode="before")
    @classmethod
    def _number(cls, value: Any) -> Decimal:
        return safe_number(value)


class ScopePayload(BaseModel):
    """A scope of work with its pricing rows, deliverables and assumptions."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    title: str = ""
    description: str = ""
    roles: List[RolePayload] = Field(default_factory=list)
    deliverables: List[str] = Field(default_factory=list)
    assumptions: List[str] = Field(default_factory=list)

    @field_validator("id", "title", "description", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _coerce_text(value)

    @field_validator("roles", mode="before")
    @classmethod
    def _roles(cls, value: Any) -> List[Dict[str, Any]]:
        return _coerce_objects(value)

    @field_validator("deliverables", "assumptions", mode="before")
    @classmethod
    def _strings(cls, value: Any) -> List[str]:
        return _coerce_string_list(value)


class SowPayload(BaseModel):
    """Complete SOW tool output from the AI assistant."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    client_name: str = Field("", alias="clientName")
    project_title: str = Field("", alias="projectTitle")
    scopes: List[ScopePayload] = Field(default_factory=list)
    project_overview: str = Field("", alias="projectOverview")
    budget_notes: str = Field("", alias="budgetNotes")
    discount: Decimal = Field(ZERO, description="Discount percentage, clamped to [0, 100]")

    @field_validator("client_name", "project_title", "project_overview", "budget_notes", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _coerce_text(value)

    @field_validator("scopes", mode="before")
    @classmethod
    def _scopes(cls, value: Any) -> List[Dict[str, Any]]:
        return _coerce_objects(value)

    @field_validator("discount", mode="before")
    @classmethod
    def _discount(cls, value: Any) -> Decimal:
        return clamp_percent(value)

    def to_document(self) -> SOWDocument:
        """Convert to a SOWDocument, generating any missing identifiers."""
        scopes = []
        for scope_index, scope in enumerate(self.scopes, start=1):
            items = [
                LineItem(
                    id=role.id or f"row-{scope_index}-{row_index}",
                    task=role.task,
                    role_name=role.role,
                    hours=role.hours,
                    rate=role.rate,
                )
                for row_index, role in enumerate(scope.roles, start=1)
            ]
            scopes.append(
                Scope(
                    id=scope.id or f"scope-{scope_index}",
                    title=scope.title,
                    description=scope.description,
                    line_items=items,
                    deliverables=list(scope.deliverables),
                    assumptions=list(scope.assumptions),
                )
            )
        return SOWDocument(
            client_name=self.client_name,
            project_title=self.project_title,
            scopes=scopes,
            project_overview=self.project_overview,
            budget_notes=self.budget_notes,
            discount_percent=self.discount,
        )


def _normalize_keys(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Accept snake_case top-level keys alongside the assistant's camelCase."""
    normalized = dict(payload)
    if "discount" not in normalized and "discount_percent" in normalized:
        normalized["discount"] = normalized.pop("discount_percent")
    if "discount" not in normalized and "discountPercent" in normalized:
        normalized["discount"] = normalized.pop("discountPercent")
    return normalized


def parse_sow_payload(payload: Optional[Union[Dict[str, Any], str]]) -> SOWDocument:
    """
    Validate an assistant payload into a SOWDocument.

    Args:
        payload: Dict or JSON text; partial and malformed payloads are accepted

    Returns:
        SOWDocument; an empty one when nothing usable was supplied
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            logger.warning(f"SOW payload is not valid JSON, using empty document: {e}")
            return SOWDocument()

    if not isinstance(payload, dict):
        if payload is not None:
            logger.warning(f"SOW payload is a {type(payload).__name__}, expected an object")
        return SOWDocument()

    try:
        model = SowPayload.model_validate(_normalize_keys(payload))
    except ValidationError as e:
        # Every field has a coercing validator, so this means a bug in the schema
        logger.error(f"SOW payload failed validation: {e}")
        return SOWDocument()

    document = model.to_document()
    logger.debug(
        f"Parsed SOW payload: {len(document.scopes)} scopes, "
        f"{sum(len(s.line_items) for s in document.scopes)} line items"
    )
    return document
