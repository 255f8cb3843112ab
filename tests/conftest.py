# tests/conftest.py
import os

# The handler modules build their AWS clients at import time, so the
# environment has to be in place before any test module imports them.
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("SALES_TABLE_NAME", "SalesTable-test")
os.environ.setdefault("BEDROCK_MODEL_ID", "amazon.nova-micro-v1:0")
os.environ.setdefault("SENDER_EMAIL", "audits@example.com")
os.environ["DASHBOARD_SECRET_KEY"] = "test-dashboard-key"

import pytest
from unittest.mock import MagicMock

from lambdas.common.settings import AppSettings, get_settings


@pytest.fixture
def settings() -> AppSettings:
    return get_settings()


@pytest.fixture
def sales_table_mock() -> MagicMock:
    """A stand-in for lambdas.common.sales_table.SalesTable."""
    return MagicMock()


def make_api_event(method: str = "POST", body: str = "", query: dict | None = None) -> dict:
    """Builds a minimal HTTP API (payload v2) event."""
    return {
        "requestContext": {"http": {"method": method}},
        "body": body,
        "isBase64Encoded": False,
        "queryStringParameters": query,
    }
