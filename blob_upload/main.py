"""blob-upload - single-file upload service powered by Robyn."""

from robyn import Robyn

from blob_upload.api.form import router as form_router
from blob_upload.api.health import router as health_router
from blob_upload.api.upload import router as upload_router
from blob_upload.core.lifespan import create_lifespan
from blob_upload.core.logger import LogIcon, logger
from blob_upload.core.settings import settings as st
from blob_upload.events.upload_dir import UploadDirEvent
from blob_upload.middlewares.base import MiddlewareHandler
from blob_upload.middlewares.files import FileUploadOpenAPIMiddleware

app = Robyn(__file__)

# Lifespan events
lifespan = create_lifespan(app)
lifespan.register(UploadDirEvent)

app.startup_handler(lifespan.startup)
app.shutdown_handler(lifespan.shutdown)

# Routers
app.include_router(health_router)
app.include_router(form_router)
app.include_router(upload_router)

# Middlewares
middlewares = MiddlewareHandler(app)
middlewares.register(FileUploadOpenAPIMiddleware)


def main() -> None:
    logger.info("Starting server", icon=LogIcon.START, service=st.API_NAME, host=st.API_HOST, port=st.API_PORT)
    app.start(host=st.API_HOST, port=st.API_PORT)


if __name__ == "__main__":
    main()
