#!/usr/bin/env python3
"""
Shared test configuration and fixtures for the SOW document engine.
"""

import sys
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.documents.models import LineItem, Scope, SOWDocument  # noqa: E402

ENGINE_ENV_VARS = [
    "ANYTHING_LLM_URL",
    "ANYTHING_LLM_API_KEY",
    "ANYTHING_LLM_WORKSPACE_SLUG",
    "PDF_LAMBDA_ARN",
    "SOW_PDF_CONVERTER",
    "SOW_LOGO_PATH",
    "SOW_RATE_CARD_PATH",
    "SOW_CONFIG_PATH",
]


@pytest.fixture(autouse=True)
def _no_network(monkeypatch, tmp_path):
    """Mock all network calls to prevent actual API calls during testing."""
    monkeypatch.setenv("NO_NETWORK", "1")
    monkeypatch.setenv("SOW_CALL_LOG_DIR", str(tmp_path / "logs"))
    for name in ENGINE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    # Mock boto3 client for the PDF Lambda
    def mock_boto3_client(*args, **kwargs):
        mock_client = MagicMock()
        mock_client.invoke.side_effect = RuntimeError("boto3 client used without a test stub")
        return mock_client

    monkeypatch.setattr("boto3.client", mock_boto3_client)

    def blocked_request(*args, **kwargs):
        raise RuntimeError("Network access is disabled in tests")

    monkeypatch.setattr("requests.sessions.Session.request", blocked_request)


@pytest.fixture
def single_item_document():
    """One scope, one line item: 10 hours at $100."""
    return SOWDocument(
        client_name="Acme Pty Ltd",
        project_title="Website Rebuild",
        scopes=[
            Scope(
                id="scope-1",
                title="Discovery",
                description="Workshops and current state review",
                line_items=[LineItem(id="row-1", task="Workshops", role_name="Consultant", hours=10, rate=100)],
                deliverables=["Current state report"],
                assumptions=["Client provides access to stakeholders"],
            )
        ],
    )


@pytest.fixture
def two_scope_document():
    """Scope totals of $1,100 and $550 including GST."""
    return SOWDocument(
        client_name="Acme Pty Ltd",
        project_title="Platform Uplift",
        scopes=[
            Scope(
                id="scope-1",
                title="Build",
                description="Implementation",
                line_items=[LineItem(id="row-1", task="Development", role_name="Developer", hours=10, rate=100)],
            ),
            Scope(
                id="scope-2",
                title="Support",
                description="Hypercare",
                line_items=[LineItem(id="row-2", task="Support", role_name="Analyst", hours=5, rate=100)],
            ),
        ],
        project_overview="Uplift of the customer platform.",
        budget_notes="Rates valid for 90 days.",
    )


@pytest.fixture
def sow_payload():
    """Assistant payload in the camelCase shape it streams."""
    return {
        "clientName": "Acme Pty Ltd",
        "projectTitle": "Website Rebuild",
        "scopes": [
            {
                "title": "Discovery",
                "description": "Workshops",
                "roles": [
                    {"task": "Workshops", "role": "Consultant", "hours": 10, "rate": 100},
                    {"task": "Report", "role": "Analyst", "hours": "5", "rate": "120.50"},
                ],
                "deliverables": ["Current state report"],
                "assumptions": "Stakeholders available\nRemote delivery",
            }
        ],
        "projectOverview": "Rebuild the marketing website.",
        "budgetNotes": "",
        "discount": 10,
    }


@pytest.fixture
def tax_rate():
    return Decimal("0.10")
