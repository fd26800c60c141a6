"""Core models for request/response handling."""

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path


class UploadError(IntEnum):
    """Upload-error codes attached to every staged file field."""

    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8


@dataclass(slots=True)
class UploadedFileDescriptor:
    """Transient record of one uploaded file, valid for a single request.

    Only descriptors with ``error == UploadError.OK`` carry a ``tmp_name``.
    """

    name: str
    type: str
    size: int
    error: UploadError
    tmp_name: Path | None = None

    @property
    def ok(self) -> bool:
        return self.error == UploadError.OK


class UploadFile:
    """Container for uploaded files from multipart/form-data requests, keyed by field name."""

    __slots__ = ("files",)

    def __init__(self, files: dict[str, UploadedFileDescriptor] | None = None) -> None:
        self.files = files or {}

    def __bool__(self) -> bool:
        return bool(self.files)

    def __iter__(self):
        return iter(self.files.items())

    def __len__(self) -> int:
        return len(self.files)

    def get(self, name: str) -> UploadedFileDescriptor | None:
        """Get file descriptor by field name."""
        return self.files.get(name)

    def keys(self) -> list[str]:
        """Get all file field names."""
        return list(self.files.keys())


@dataclass(frozen=True, slots=True)
class UploadOutcome:
    """Result of handling one upload request. ``content`` never leaves the server."""

    status_code: int
    message: str
    content: bytes | None = None
