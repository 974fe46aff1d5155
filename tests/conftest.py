"""Shared pytest fixtures for service_common test suites."""

from collections.abc import Generator
from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

DEPLOYMENT_ENV_VARS = (
    "CLOUD_APP",
    "CLOUD_APP_VERSION",
    "CLOUD_DATACENTER",
    "CLOUD_ENVIRONMENT",
    "EC2_REGION",
    "SERVICE_NAME",
    "SERVICE_VERSION",
    "DEPLOYMENT_DATACENTER",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Start every test from a clean deployment environment and empty caches."""
    from service_common.core.config import get_service_settings
    from service_common.metadata.deployment import get_deployment_context

    for name in DEPLOYMENT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_service_settings.cache_clear()
    get_deployment_context.cache_clear()
    yield
    get_service_settings.cache_clear()
    get_deployment_context.cache_clear()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Provide an API test client for the example application."""
    from service_common.main import app

    with TestClient(app) as test_client:
        yield test_client
