"""Pytest configuration and shared fixtures for cleanup tool tests."""

import json
import logging
from pathlib import Path
from typing import Any, Dict
from unittest.mock import Mock

import pytest


# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
TESTING_DIR = Path(__file__).parent

REQUIRED_ENV = {
    "AZURE_CLIENT_ID": "00000000-0000-0000-0000-00000000c1d0",
    "AZURE_TENANT_ID": "11111111-1111-1111-1111-111111111111",
    "AZURE_CLIENT_SECRET": "not-a-real-secret-value",
    "AZURE_SUBSCRIPTION_ID": "22222222-2222-2222-2222-222222222222",
    "ARM_ENDPOINT": "https://management.local.azurestack.external/",
}


def make_metadata_payload(login_endpoint: str, audiences=None) -> Dict[str, Any]:
    """Build a metadata document shaped like the one Azure Stack Hub returns.

    Args:
        login_endpoint: Value for authentication.loginEndpoint
        audiences: Value for authentication.audiences

    Returns:
        Metadata dictionary
    """
    if audiences is None:
        audiences = ["https://management.azurestackci.onmicrosoft.com/81b8b6b9-3a18-4a8a-b54f-0d0f1a9e0f11"]
    return {
        "galleryEndpoint": "https://providers.local.azurestack.external:30016/",
        "graphEndpoint": "https://graph.windows.net/",
        "portalEndpoint": "https://portal.local.azurestack.external/",
        "authentication": {
            "loginEndpoint": login_endpoint,
            "audiences": audiences,
        },
    }


def make_response(payload: Any = None, status_code: int = 200, text: str = None) -> Mock:
    """Fake requests.Response with the attributes the fetcher reads."""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.text = text if text is not None else json.dumps(payload)
    return response


@pytest.fixture
def required_env() -> Dict[str, str]:
    """The five required variables, all set."""
    return dict(REQUIRED_ENV)


@pytest.fixture
def isolated_env(monkeypatch, tmp_path, required_env):
    """Process environment with only the required variables, run from an empty directory."""
    for name in list(REQUIRED_ENV) + ["ARM_SKIP_TLS_VERIFY", "AZS_CLEANUP_VERBOSE", "AZS_CLEANUP_ENV_FILE"]:
        monkeypatch.delenv(name, raising=False)
    for name, value in required_env.items():
        monkeypatch.setenv(name, value)
    monkeypatch.chdir(tmp_path)
    return required_env


@pytest.fixture
def aad_metadata() -> Dict[str, Any]:
    return make_metadata_payload("https://login.microsoftonline.com/azurestackci.onmicrosoft.com")


@pytest.fixture
def adfs_metadata() -> Dict[str, Any]:
    return make_metadata_payload(
        "https://adfs.local.azurestack.external/adfs",
        audiences=["https://management.adfs.azurestack.local/6dcd0d7b-1d50-4b66-a4c0-0b2c7b0d2f1e"],
    )


@pytest.fixture
def storage_client() -> Mock:
    return Mock(name="storage_client")


@pytest.fixture
def resource_client() -> Mock:
    return Mock(name="resource_client")


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Get project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def restore_log_levels():
    """Put the root and Azure SDK logger levels back after the test."""
    from azs_cleanup.common.logging_utils import AZURE_SDK_LOGGERS

    names = [None] + list(AZURE_SDK_LOGGERS)
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)
