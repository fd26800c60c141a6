"""Test fixtures for blob-upload unit tests."""

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from blob_upload.core.lifespan import State
from blob_upload.models.core import UploadedFileDescriptor, UploadError


# -----------------------------------------------------------------------------
# Mock classes for Robyn Request
# -----------------------------------------------------------------------------


@dataclass
class MockHeaders:
    """Mock Headers object for Robyn Request."""

    _data: dict = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = value


@dataclass
class MockRequest:
    """Mock Request object for Robyn."""

    body: bytes | str = b""
    headers: MockHeaders = field(default_factory=MockHeaders)
    method: str = "GET"
    path: str = "/"


# -----------------------------------------------------------------------------
# State fixture
# -----------------------------------------------------------------------------


@pytest.fixture(scope="session")
def test_state() -> State:
    """Create a test state container."""
    return State()


@pytest.fixture
def global_dependencies(test_state: State) -> dict:
    """Setup global dependencies for tests."""
    yield {"state": test_state}
    test_state.clear()


# -----------------------------------------------------------------------------
# Request / upload factories
# -----------------------------------------------------------------------------


@pytest.fixture
def make_mock_request():
    """Factory fixture to create mock requests."""

    def _make(
        method: str = "GET",
        body: bytes | str = b"",
        content_type: str | None = None,
    ) -> MockRequest:
        headers = MockHeaders()
        if content_type is not None:
            headers["content-type"] = content_type
        return MockRequest(body=body, headers=headers, method=method, path="/upload")

    return _make


@pytest.fixture
def make_descriptor(tmp_path: Path):
    """Factory fixture to create upload descriptors, staging ``content`` when given."""

    def _make(
        content: bytes | None = None,
        error: UploadError = UploadError.OK,
        name: str = "hello.txt",
    ) -> UploadedFileDescriptor:
        tmp_name = None
        if content is not None:
            tmp_name = tmp_path / f"upload-{name}"
            tmp_name.write_bytes(content)
        return UploadedFileDescriptor(
            name=name,
            type="text/plain",
            size=len(content or b""),
            error=error,
            tmp_name=tmp_name,
        )

    return _make


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    """Empty staging directory."""
    path = tmp_path / "staging"
    path.mkdir()
    return path
