"""
Shared fixtures: an in-memory stand-in for the Azure blob service.
"""

import io
import threading

import pytest
import structlog
from azure.core import MatchConditions
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError

from src.config import get_settings
from src.storage import get_streamer


class FakeAccount:
    """Blob contents keyed by (container, name)."""

    def __init__(self):
        self.blobs: dict[tuple[str, str], bytes] = {}
        self.staged: dict[tuple[str, str], dict[str, bytes]] = {}
        self.calls: list[str] = []
        self.fail_with: Exception | None = None
        self.lock = threading.Lock()

    def record(self, call: str) -> None:
        with self.lock:
            self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with


class FakeDownloader:
    def __init__(self, account: FakeAccount, data: bytes):
        self._account = account
        self._data = io.BytesIO(data)
        self.size = len(data)

    def read(self, size: int = -1) -> bytes:
        self._account.record("read")
        return self._data.read(size)


class FakeBlobClient:
    def __init__(self, account: FakeAccount, container: str, blob_name: str):
        self._account = account
        self._key = (container, blob_name)
        self.container_name = container
        self.blob_name = blob_name

    def exists(self) -> bool:
        self._account.record("exists")
        return self._key in self._account.blobs

    def download_blob(self) -> FakeDownloader:
        self._account.record("download_blob")
        if self._key not in self._account.blobs:
            raise ResourceNotFoundError(message="The specified blob does not exist.")
        return FakeDownloader(self._account, self._account.blobs[self._key])

    def stage_block(self, block_id: str, data: bytes, length: int | None = None) -> None:
        self._account.record("stage_block")
        self._account.staged.setdefault(self._key, {})[block_id] = bytes(data)

    def commit_block_list(self, block_list, etag=None, match_condition=None) -> None:
        self._account.record("commit_block_list")
        if match_condition == MatchConditions.IfMissing and self._key in self._account.blobs:
            raise ResourceExistsError(message="The specified blob already exists.")
        staged = self._account.staged.pop(self._key, {})
        self._account.blobs[self._key] = b"".join(staged[block.id] for block in block_list)


class FakeContainerClient:
    def __init__(self, account: FakeAccount, container: str):
        self._account = account
        self.container_name = container

    def get_blob_client(self, blob: str) -> FakeBlobClient:
        return FakeBlobClient(self._account, self.container_name, blob)


class FakeBlobServiceClient:
    account_name = "devstoreaccount1"

    def __init__(self, account: FakeAccount):
        self._account = account
        self.closed = False

    def get_container_client(self, container: str) -> FakeContainerClient:
        return FakeContainerClient(self._account, container)

    def close(self) -> None:
        self.closed = True


class FakeServiceFactory:
    """Replaces the BlobServiceClient class and counts constructions."""

    def __init__(self, account: FakeAccount):
        self.account = account
        self.constructed = 0
        self.clients: list[FakeBlobServiceClient] = []
        self.on_construct = None

    def from_connection_string(self, conn_str: str) -> FakeBlobServiceClient:
        if "AccountName=" not in conn_str:
            raise ValueError("Connection string is either blank or malformed.")
        return self._build()

    def __call__(self, account_url: str, credential=None) -> FakeBlobServiceClient:
        return self._build()

    def _build(self) -> FakeBlobServiceClient:
        if self.on_construct is not None:
            self.on_construct()
        self.constructed += 1
        client = FakeBlobServiceClient(self.account)
        self.clients.append(client)
        return client


CONNECTION_STRING = (
    "DefaultEndpointsProtocol=https;AccountName=devstoreaccount1;"
    "AccountKey=a2V5;EndpointSuffix=core.windows.net"
)


@pytest.fixture
def connection_string() -> str:
    return CONNECTION_STRING


@pytest.fixture
def account() -> FakeAccount:
    return FakeAccount()


@pytest.fixture
def service_factory(account, monkeypatch) -> FakeServiceFactory:
    factory = FakeServiceFactory(account)
    monkeypatch.setattr("src.storage.blob.BlobServiceClient", factory)
    return factory


@pytest.fixture(autouse=True)
def reset_caches():
    """Drop cached settings, streamers and logging config between tests."""
    get_settings.cache_clear()
    get_streamer.cache_clear()
    yield
    get_settings.cache_clear()
    get_streamer.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def blob_client(account) -> FakeBlobClient:
    return FakeBlobClient(account, "docs", "big.bin")


@pytest.fixture
def make_downloader(account):
    return lambda data: FakeDownloader(account, data)
