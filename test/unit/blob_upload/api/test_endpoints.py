"""Tests for the form, upload and health endpoints."""

import threading
from pathlib import Path

import pytest

from blob_upload.api.form import render_upload_form, upload_form
from blob_upload.api.health import HealthResponse, health_check
from blob_upload.api.upload import UPLOAD_METHODS, register_upload_routes, upload
from blob_upload.core.settings import settings as st
from blob_upload.models.core import UploadError, UploadFile
from blob_upload.uploads.handler import NO_FILE_MESSAGE, SUCCESS_MESSAGE, process_upload


class TestUploadForm:
    """Tests for the upload form page."""

    def test_form_posts_multipart_to_upload_endpoint(self) -> None:
        html = render_upload_form()

        assert '<form action="/upload" method="post" enctype="multipart/form-data">' in html
        assert '<input type="file" name="myFile">' in html
        assert '<input type="submit" value="Upload File">' in html

    def test_form_escapes_values(self) -> None:
        html = render_upload_form(action='/up"load', field="<f>")

        assert 'action="/up&quot;load"' in html
        assert 'name="&lt;f&gt;"' in html

    async def test_form_route_returns_html(self) -> None:
        response = await upload_form()

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/html; charset=utf-8"
        assert 'name="myFile"' in response.description


class TestUploadEndpoint:
    """Tests for the upload endpoint function."""

    async def test_get_reports_no_file(self, make_mock_request) -> None:
        outcome = await upload(make_mock_request("GET"), UploadFile())
        assert outcome.message == NO_FILE_MESSAGE

    async def test_post_with_error_code(self, make_mock_request, make_descriptor) -> None:
        files = UploadFile(files={"myFile": make_descriptor(error=UploadError.INI_SIZE)})

        outcome = await upload(make_mock_request("POST"), files)

        assert outcome.message == "Error uploading file: 1"

    async def test_post_with_file(self, make_mock_request, make_descriptor) -> None:
        files = UploadFile(files={"myFile": make_descriptor(b"hello")})

        outcome = await upload(make_mock_request("POST"), files)

        assert outcome.message == SUCCESS_MESSAGE
        assert outcome.content == b"hello"

    @pytest.mark.parametrize("method", ["HEAD", "OPTIONS"])
    async def test_head_and_options_report_no_file(self, method: str, make_mock_request, make_descriptor) -> None:
        files = UploadFile(files={"myFile": make_descriptor(b"hello")})

        outcome = await upload(make_mock_request(method), files)

        assert outcome.message == NO_FILE_MESSAGE
        assert outcome.content is None

    async def test_file_io_runs_off_event_loop(self, make_mock_request, make_descriptor, monkeypatch) -> None:
        loop_thread = threading.get_ident()
        seen: list[int] = []

        def recording_process_upload(method: str, files: UploadFile):
            seen.append(threading.get_ident())
            return process_upload(method, files)

        monkeypatch.setattr("blob_upload.api.upload.process_upload", recording_process_upload)
        files = UploadFile(files={"myFile": make_descriptor(b"hello")})

        outcome = await upload(make_mock_request("POST"), files)

        assert outcome.message == SUCCESS_MESSAGE
        assert seen and seen[0] != loop_thread


class RecordingRouter:
    """Stand-in router recording (method, endpoint, handler) for every route bound on it."""

    def __init__(self) -> None:
        self.routes: list[tuple[str, str, object]] = []

    def __getattr__(self, method: str):
        def route(endpoint: str):
            def bind(handler):
                self.routes.append((method, endpoint, handler))
                return handler

            return bind

        return route


class TestUploadRoutes:
    """Tests for register_upload_routes."""

    def test_every_method_bound_to_upload(self) -> None:
        target = RecordingRouter()

        register_upload_routes(target)

        assert {method for method, _, _ in target.routes} == set(UPLOAD_METHODS)
        assert all(endpoint == st.UPLOAD_ENDPOINT for _, endpoint, _ in target.routes)
        assert all(handler is upload for _, _, handler in target.routes)

    @pytest.mark.parametrize("method", ["get", "put", "patch", "delete", "head", "options"])
    def test_non_post_methods_routed(self, method: str) -> None:
        target = RecordingRouter()

        register_upload_routes(target)

        assert (method, st.UPLOAD_ENDPOINT, upload) in target.routes

    def test_custom_endpoint(self) -> None:
        target = RecordingRouter()

        register_upload_routes(target, endpoint="/files/upload")

        assert {endpoint for _, endpoint, _ in target.routes} == {"/files/upload"}


async def test_health_check(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr("blob_upload.api.health.st.UPLOAD_TMP_DIR", tmp_path)

    result = await health_check()

    assert isinstance(result, HealthResponse)
    assert result.status == "healthy"
    assert result.upload_dir_ready
