"""Single-file upload endpoint."""

import asyncio

from robyn import Request

from blob_upload.core.logger import LogIcon, logger
from blob_upload.core.router import Router
from blob_upload.core.settings import settings as st
from blob_upload.models.core import UploadFile
from blob_upload.uploads.handler import process_upload

router = Router(__file__)

# Non-POST methods are routed too so they get the "no file uploaded" answer
UPLOAD_METHODS = ("get", "post", "put", "patch", "delete", "head", "options")


async def upload(request: Request, files: UploadFile):
    """Check the upload-error code of the file field and read the file into memory."""
    logger.info("Upload requested", icon=LogIcon.UPLOAD, method=request.method, fields=files.keys())
    return await asyncio.to_thread(process_upload, request.method, files)


def register_upload_routes(target: Router, endpoint: str | None = None) -> None:
    """Bind ``upload`` to ``endpoint`` for every method in UPLOAD_METHODS."""
    for method in UPLOAD_METHODS:
        getattr(target, method)(endpoint or st.UPLOAD_ENDPOINT)(upload)


register_upload_routes(router)
