"""Lifespan event owning the temporary upload directory."""

from pathlib import Path

from blob_upload.core.lifespan import BaseEvent
from blob_upload.core.logger import LogIcon, logger
from blob_upload.core.settings import settings as st

STAGED_FILE_GLOB = "upload-*"


def prepare_upload_dir(path: Path) -> Path:
    """Create the staging directory if needed."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def clear_upload_dir(path: Path) -> int:
    """Remove staged files left behind in ``path``. Returns how many were removed."""
    if not path.is_dir():
        return 0
    removed = 0
    for leftover in path.glob(STAGED_FILE_GLOB):
        if leftover.is_file():
            leftover.unlink(missing_ok=True)
            removed += 1
    return removed


class UploadDirEvent(BaseEvent[Path]):
    """Creates the staging directory on startup and clears leftovers on shutdown."""

    name = "upload_dir"

    async def startup(self) -> Path:
        path = prepare_upload_dir(st.UPLOAD_TMP_DIR)
        logger.info("Upload directory ready", icon=LogIcon.FILE, path=str(path))
        return path

    async def shutdown(self, instance: Path) -> None:
        removed = clear_upload_dir(instance)
        logger.info("Upload directory cleared", icon=LogIcon.FILE, path=str(instance), removed=removed)
