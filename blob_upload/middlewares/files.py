"""File upload middleware for OpenAPI multipart/form-data patching."""

import orjson
from robyn import Response

from blob_upload.core.logger import LogIcon, logger
from blob_upload.core.router import FILE_UPLOAD_ENDPOINTS
from blob_upload.core.settings import settings as st
from blob_upload.middlewares.base import BaseMiddleware


def multipart_request_body(field: str) -> dict:
    """OpenAPI requestBody for a single binary file field."""
    return {
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {
                        field: {
                            "type": "string",
                            "format": "binary",
                            "description": "File to upload",
                        }
                    },
                    "required": [field],
                }
            }
        },
        "required": True,
    }


def patch_openapi_spec(spec: dict, endpoints: set[str], field: str) -> dict:
    """Attach a multipart requestBody to the POST operation of every upload endpoint."""
    paths = spec.get("paths", {})
    for endpoint in endpoints:
        operation = paths.get(endpoint, {}).get("post")
        if operation is not None:
            operation["requestBody"] = multipart_request_body(field)
    return spec


class FileUploadOpenAPIMiddleware(BaseMiddleware):
    """Patches OpenAPI responses to use multipart/form-data for file upload endpoints."""

    endpoints = frozenset(["/openapi.json"])

    def after(self, response: Response) -> Response:
        if not FILE_UPLOAD_ENDPOINTS:
            return response

        try:
            spec = orjson.loads(response.description)
        except orjson.JSONDecodeError as ex:
            logger.warning("OpenAPI document is not JSON, left unpatched", icon=LogIcon.WARNING, error=str(ex))
            return response

        response.description = orjson.dumps(patch_openapi_spec(spec, FILE_UPLOAD_ENDPOINTS, st.UPLOAD_FIELD)).decode()
        return response
