"""Client-side helpers: data URL to Blob conversion and the (unsent) multipart submission."""

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Protocol

import httpx

from blob_upload.core.logger import LogIcon, logger
from blob_upload.core.settings import settings as st
from blob_upload.models.exceptions import DataURLError

MIME_PATTERN = re.compile(r":(.*?);")


class HasSrc(Protocol):
    """Anything shaped like an ``<img>`` element."""

    src: str


@dataclass(frozen=True, slots=True)
class Blob:
    """Immutable binary object tagged with a MIME type."""

    data: bytes
    type: str

    @property
    def size(self) -> int:
        return len(self.data)


def decode_data_url(data_url: str) -> Blob:
    """Split at the first comma, read the MIME type between ':' and ';' and base64-decode the payload.

    Raises:
        DataURLError: if the separator or MIME type is missing, or the payload is not valid base64.
    """
    metadata, sep, payload = data_url.partition(",")
    if not sep:
        raise DataURLError("Data URL has no ',' separator between metadata and payload")

    match = MIME_PATTERN.search(metadata)
    if match is None:
        raise DataURLError(f"Data URL metadata has no MIME type: {metadata[:40]!r}")

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as ex:
        raise DataURLError(f"Data URL payload is not valid base64: {ex}") from ex

    return Blob(data=data, type=match.group(1))


async def data_url_to_blob(data_url: str) -> Blob:
    """Resolve with the decoded Blob, or raise DataURLError."""
    try:
        blob = decode_data_url(data_url)
    except DataURLError as ex:
        logger.error("Data URL conversion failed", icon=LogIcon.IMAGE, error=str(ex))
        raise
    logger.info("Data URL converted", icon=LogIcon.IMAGE, mime=blob.type, size=blob.size)
    return blob


async def image_to_blob(image: HasSrc) -> Blob:
    """Convert an image element whose ``src`` is a data URL."""
    return await data_url_to_blob(image.src)


def build_upload_request(
    blob: Blob,
    url: str | None = None,
    field: str | None = None,
    filename: str | None = None,
) -> httpx.Request:
    """Append the blob to a multipart payload and return the prepared request."""
    return httpx.Request(
        "POST",
        url or st.BLOB_UPLOAD_URL,
        files={(field or st.BLOB_FIELD): (filename or st.BLOB_FILENAME, blob.data, blob.type)},
    )


def submit_blob(blob: Blob, url: str | None = None) -> httpx.Request:
    """Build the upload request for ``blob``. The request is never sent."""
    request = build_upload_request(blob, url=url)
    logger.info(
        "Upload request prepared, dispatch skipped",
        icon=LogIcon.NETWORK,
        url=str(request.url),
        size=blob.size,
    )
    return request
