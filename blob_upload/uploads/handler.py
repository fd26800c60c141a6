"""Upload handling: error-code check, then read the staged file into memory."""

from collections.abc import Callable
from pathlib import Path

from robyn import status_codes

from blob_upload.core.logger import LogIcon, logger
from blob_upload.core.settings import settings as st
from blob_upload.models.core import UploadedFileDescriptor, UploadError, UploadFile, UploadOutcome
from blob_upload.models.exceptions import UploadReadError

NO_FILE_MESSAGE = "No file uploaded or invalid request method."
UPLOAD_ERROR_MESSAGE = "Error uploading file: {code}"
SUCCESS_MESSAGE = "File uploaded and processed successfully."
READ_ERROR_MESSAGE = "Error reading uploaded file."

Reader = Callable[[UploadedFileDescriptor], bytes]


def read_upload(descriptor: UploadedFileDescriptor) -> bytes:
    """Read the whole staged file.

    Raises:
        UploadReadError: if there is no staged path or the file cannot be read.
    """
    if descriptor.tmp_name is None:
        raise UploadReadError(f"No staged file for upload '{descriptor.name}'")
    try:
        return Path(descriptor.tmp_name).read_bytes()
    except OSError as ex:
        raise UploadReadError(f"Cannot read staged file {descriptor.tmp_name}: {ex}") from ex


def process_upload(
    method: str,
    files: UploadFile,
    field: str | None = None,
    reader: Reader = read_upload,
) -> UploadOutcome:
    """Apply the single-file upload contract to one request."""
    field = field or st.UPLOAD_FIELD
    descriptor = files.get(field) if str(method).upper() == "POST" else None

    if descriptor is None:
        return UploadOutcome(status_code=status_codes.HTTP_200_OK, message=NO_FILE_MESSAGE)

    if descriptor.error != UploadError.OK:
        logger.warning("Upload rejected", icon=LogIcon.WARNING, field=field, error=int(descriptor.error))
        return UploadOutcome(
            status_code=status_codes.HTTP_400_BAD_REQUEST,
            message=UPLOAD_ERROR_MESSAGE.format(code=int(descriptor.error)),
        )

    try:
        content = reader(descriptor)
    except UploadReadError as ex:
        logger.error("Upload read failed", icon=LogIcon.ERROR, field=field, error=str(ex))
        return UploadOutcome(status_code=status_codes.HTTP_500_INTERNAL_SERVER_ERROR, message=READ_ERROR_MESSAGE)

    logger.info("Upload processed", icon=LogIcon.SUCCESS, field=field, size=len(content))
    return UploadOutcome(status_code=status_codes.HTTP_200_OK, message=SUCCESS_MESSAGE, content=content)
