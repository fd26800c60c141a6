class BlobUploadError(Exception):
    """Base exception for all blob-upload errors."""


class UploadReadError(BlobUploadError):
    """Raised when a staged upload cannot be read back from disk."""


class DataURLError(BlobUploadError, ValueError):
    """Raised when a data URL cannot be decoded into a blob."""
