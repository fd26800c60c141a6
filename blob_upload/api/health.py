"""Health check endpoint."""

from pydantic import BaseModel

from blob_upload.core.logger import LogIcon, logger
from blob_upload.core.router import Router
from blob_upload.core.settings import settings as st

router = Router(__file__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    version: str
    upload_dir_ready: bool


async def health_check() -> HealthResponse:
    logger.info("Health check requested", icon=LogIcon.HEALTHCHECK)
    return HealthResponse(
        status="healthy",
        service=st.API_NAME,
        version=st.API_VERSION,
        upload_dir_ready=st.UPLOAD_TMP_DIR.is_dir(),
    )


router.get("/health")(health_check)
