"""Pytest configuration and fixtures."""

import json
from collections.abc import AsyncGenerator, Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from storysky.config import Settings
from storysky.infrastructure.activity_log import MemoryActivityLog
from storysky.infrastructure.document_store import MemoryDocumentStore
from storysky.main import create_app
from storysky.repositories.entity_store import EntityStore


@pytest.fixture(autouse=True)
def mock_webpush() -> Iterator[MagicMock]:
    """Never reach a real push service from tests."""
    with patch("storysky.infrastructure.push_client.webpush") as mocked:
        yield mocked


@pytest.fixture
def vapid_file(tmp_path: Path) -> Path:
    path = tmp_path / "vapid.json"
    path.write_text(json.dumps({"publicKey": "test-public-key", "privateKey": "test-private-key"}))
    return path


@pytest.fixture
def settings(tmp_path: Path, vapid_file: Path) -> Settings:
    """File-backed settings rooted in a temporary directory."""
    return Settings(
        _env_file=None,
        storage_backend="file",
        data_file=str(tmp_path / "data.json"),
        activity_file=str(tmp_path / "userActivity.json"),
        vapid_file=str(vapid_file),
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def gateway() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def store(gateway: MemoryDocumentStore) -> EntityStore:
    """Entity store seeded with the sample dataset, persisted in memory."""
    return EntityStore(gateway)


@pytest.fixture
def activity_log() -> MemoryActivityLog:
    return MemoryActivityLog()
