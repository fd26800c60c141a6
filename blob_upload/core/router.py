"""Router with automatic multipart staging and response handling."""

import asyncio
import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

import orjson
from pydantic import BaseModel
from robyn import Request, Response, SubRouter, status_codes
from robyn.robyn import HttpMethod

from blob_upload.models.core import UploadFile, UploadOutcome
from blob_upload.uploads.staging import discard_staged_files, stage_request_files

FILE_UPLOAD_ENDPOINTS: set[str] = set()

TEXT_PLAIN = "text/plain; charset=utf-8"


def parse_endpoint_signature(sig: inspect.Signature) -> set[str]:
    """Find parameters annotated as UploadFile."""
    return {name for name, param in sig.parameters.items() if param.annotation is UploadFile}


def parse_request_files(file_params: set[str], request: Request, kwargs: dict[str, Any]) -> UploadFile:
    """Stage request files once and hand the same UploadFile to every file parameter."""
    files = stage_request_files(request)
    for param_name in file_params:
        kwargs[param_name] = files
    return files


def parse_response(result: Any) -> Response:
    """Convert handler result to Response."""
    match result:
        case Response():
            return result
        case UploadOutcome():
            return Response(
                status_code=result.status_code,
                headers={"content-type": TEXT_PLAIN},
                description=result.message,
            )
        case BaseModel():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": "application/json"},
                description=result.model_dump_json(indent=4),
            )
        case dict():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": "application/json"},
                description=orjson.dumps(result).decode(),
            )
        case _:
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": TEXT_PLAIN},
                description=str(result),
            )


HTTP_METHODS = (
    HttpMethod.GET,
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.DELETE,
    HttpMethod.PATCH,
    HttpMethod.HEAD,
    HttpMethod.OPTIONS,
    HttpMethod.TRACE,
    HttpMethod.CONNECT,
)


def _create_method_wrapper(original_method: Callable, router_prefix: str = "") -> Callable:
    @wraps(original_method)
    def method_wrapper(*args, **kwargs) -> Callable:
        endpoint = args[0] if args else kwargs.get("endpoint", "")
        decorator = original_method(*args, **kwargs)

        def handler_decorator(handler: Callable) -> Callable:
            sig = inspect.signature(handler)
            file_params = parse_endpoint_signature(sig)
            has_request_param = "request" in sig.parameters

            if file_params:
                full_path = f"{router_prefix}{endpoint}".replace("//", "/")
                FILE_UPLOAD_ENDPOINTS.add(full_path)

            @wraps(handler)
            async def wrapped_handler(request: Request, **h_kwargs):
                files = None
                if file_params:
                    # Multipart parsing and temp-file writes run off the event loop
                    files = await asyncio.to_thread(parse_request_files, file_params, request, h_kwargs)

                # Pass request to handler only if it declared it
                if has_request_param:
                    h_kwargs["request"] = request

                try:
                    result = await handler(**h_kwargs)
                finally:
                    # Staged files live only as long as the request
                    if files is not None:
                        await asyncio.to_thread(discard_staged_files, files)
                return parse_response(result)

            # Build signature: always include request for Robyn injection
            new_params = [inspect.Parameter("request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request)]
            for name, param in sig.parameters.items():
                if name == "request" or name in file_params:
                    continue
                new_params.append(param)

            wrapped_handler.__signature__ = sig.replace(parameters=new_params)  # type: ignore[attr-defined]
            return decorator(wrapped_handler)

        return handler_decorator

    return method_wrapper


class Router(SubRouter):
    """Enhanced SubRouter with automatic file staging and response handling."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._prefix = kwargs.get("prefix", "")
        self._wrap_methods()

    def _wrap_methods(self) -> None:
        """Wrap HTTP methods with parsing logic."""
        for method in HTTP_METHODS:
            method_name = str(method).split(".")[-1].lower()
            if hasattr(self, method_name):
                original_method = getattr(self, method_name)
                wrapped_method = _create_method_wrapper(original_method, self._prefix)
                setattr(self, method_name, wrapped_method)
