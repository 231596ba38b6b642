"""Shared fixtures: test config and in-memory storage collaborators."""

from datetime import datetime

import pytest

from common.config import Config, SourceConfig, StorageConfig, reset_config, set_config
from common.errors import NotFound


class InMemoryBlobStore:
    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.puts: list[str] = []
        self.gets: list[str] = []

    def put(self, path: str, body: bytes) -> None:
        self.puts.append(path)
        self.objects[path] = body

    def get(self, path: str) -> bytes:
        self.gets.append(path)
        if path not in self.objects:
            raise NotFound(path)
        return self.objects[path]

    def describe(self, path: str) -> str:
        return f"memory://{path}"

    def __len__(self) -> int:
        return len(self.objects)


class InMemoryKeyedStore:
    def __init__(self):
        self.items: dict[str, tuple[str, datetime]] = {}

    def put(self, key: str, payload: str, expires_at: datetime) -> None:
        self.items[key] = (payload, expires_at)

    def get(self, key: str) -> str:
        if key not in self.items:
            raise NotFound(key)
        return self.items[key][0]

    def __len__(self) -> int:
        return len(self.items)


@pytest.fixture(autouse=True)
def test_config():
    config = Config(
        timezone="Asia/Tokyo",
        source=SourceConfig(call_budget=10, page_size=100, request_delay_seconds=1.0),
        storage=StorageConfig(backend="s3", bucket="test-bucket"),
    )
    set_config(config)
    yield config
    reset_config()


@pytest.fixture
def blob_store():
    return InMemoryBlobStore()


@pytest.fixture
def keyed_store():
    return InMemoryKeyedStore()
