"""
Pytest configuration and fixtures for content service tests.

Core tests run against the in-memory backends; SQL index tests use an
in-memory aiosqlite database; API tests build the FastAPI app around
prebuilt in-memory services.
"""
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from content_service.config import Settings, StorageProvider
from content_service.core.assets import AssetPipeline
from content_service.core.coordinator import EnvelopeCoordinator
from content_service.dependencies import assemble_services
from content_service.index.memory import MemoryAssetDirectory, MemorySearchIndex
from content_service.main import create_app
from content_service.storage.backends.memory import MemoryBlobStore


# ============================================
# Backends
# ============================================

@pytest.fixture
def content_store() -> MemoryBlobStore:
    """Blob store holding envelopes."""
    return MemoryBlobStore("content")


@pytest.fixture
def asset_store() -> MemoryBlobStore:
    """Blob store holding published assets."""
    return MemoryBlobStore("assets", public_base_url="https://cdn.example.com/assets")


@pytest.fixture
def index() -> MemorySearchIndex:
    return MemorySearchIndex()


@pytest.fixture
def asset_directory() -> MemoryAssetDirectory:
    return MemoryAssetDirectory({"logo": "https://cdn.example.com/assets/logo-abc.png"})


# ============================================
# Core
# ============================================

@pytest.fixture
def coordinator(content_store, index, asset_directory) -> EnvelopeCoordinator:
    return EnvelopeCoordinator(content_store, index, asset_directory=asset_directory, timeout=5.0)


@pytest.fixture
def pipeline(asset_store, asset_directory) -> AssetPipeline:
    # Small chunks so multi-chunk paths are exercised
    return AssetPipeline(asset_store, asset_directory=asset_directory, timeout=5.0, chunk_size=4)


# ============================================
# Application
# ============================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests: memory provider, auth on with one known key."""
    return Settings(
        _env_file=None,
        STORAGE_PROVIDER=StorageProvider.MEMORY,
        API_KEYS="admin:test-key",
        BACKEND_TIMEOUT_SECONDS=5.0,
    )


@pytest.fixture
def services(content_store, asset_store, index, asset_directory):
    return assemble_services(content_store, asset_store, index, asset_directory, timeout=5.0)


@pytest.fixture
def client(test_settings, services):
    """TestClient around an app that uses the in-memory services."""
    app = create_app(settings=test_settings, services=services)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": 'deconst apikey="test-key"'}
