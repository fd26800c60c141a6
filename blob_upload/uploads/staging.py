"""Multipart staging: turns a POST body into per-field upload descriptors backed by temp files."""

import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header
from robyn import Request

from blob_upload.core.logger import LogIcon, logger
from blob_upload.core.settings import settings as st
from blob_upload.models.core import UploadedFileDescriptor, UploadError, UploadFile

MULTIPART_CONTENT_TYPE = "multipart/form-data"
FORM_MAX_FILE_SIZE_FIELD = "MAX_FILE_SIZE"


@dataclass
class _Part:
    """Part being parsed; ``filename`` is None for plain form fields."""

    field_name: str = ""
    filename: str | None = None
    content_type: str = "application/octet-stream"
    data: bytearray = field(default_factory=bytearray)
    size: int = 0
    limit: int | None = None
    form_limit: int | None = None
    complete: bool = False


def _header(request: Request, name: str) -> str | None:
    return request.headers.get(name) or request.headers.get(name.title())


def _body_bytes(request: Request) -> bytes:
    body = request.body
    if isinstance(body, str):
        return body.encode("utf-8", errors="surrogateescape")
    return bytes(body or b"")


class MultipartStager:
    """Parses one multipart body and stages each file part to ``tmp_dir``.

    Error codes follow the standard upload-error taxonomy:
    oversized parts get INI_SIZE or FORM_SIZE, unfinished parts PARTIAL,
    empty file inputs NO_FILE, and filesystem failures NO_TMP_DIR or CANT_WRITE.
    """

    def __init__(self, boundary: bytes, tmp_dir: Path, max_size: int | None = None) -> None:
        self._tmp_dir = tmp_dir
        self._max_size = max_size
        self._form_max_size: int | None = None
        self._parts: list[_Part] = []
        self._current: _Part | None = None
        self._header_field = b""
        self._header_value = b""
        self._headers: dict[bytes, bytes] = {}
        self._parser = MultipartParser(
            boundary,
            callbacks={
                "on_part_begin": self.on_part_begin,
                "on_part_data": self.on_part_data,
                "on_part_end": self.on_part_end,
                "on_header_field": self.on_header_field,
                "on_header_value": self.on_header_value,
                "on_header_end": self.on_header_end,
                "on_headers_finished": self.on_headers_finished,
            },
        )

    # Parser callbacks

    def on_part_begin(self) -> None:
        self._current = _Part()
        self._headers = {}

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self._headers[self._header_field.lower()] = self._header_value
        self._header_field = b""
        self._header_value = b""

    def on_headers_finished(self) -> None:
        part = self._current
        if part is None:
            return
        _, options = parse_options_header(self._headers.get(b"content-disposition", b""))
        part.field_name = options.get(b"name", b"").decode("utf-8", errors="replace")
        if b"filename" in options:
            part.filename = options[b"filename"].decode("utf-8", errors="replace")
            part.form_limit = self._form_max_size
            part.limit = min(
                (limit for limit in (self._max_size, part.form_limit) if limit is not None), default=None
            )
        if content_type := self._headers.get(b"content-type"):
            part.content_type = content_type.decode("latin-1")
        self._parts.append(part)

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        part = self._current
        if part is None:
            return
        chunk = data[start:end]
        part.size += len(chunk)
        # Keep counting past the limit but stop buffering
        if part.limit is None or part.size <= part.limit:
            part.data += chunk

    def on_part_end(self) -> None:
        if self._current is None:
            return
        self._current.complete = True
        if self._current.filename is None and self._current.field_name == FORM_MAX_FILE_SIZE_FIELD:
            try:
                self._form_max_size = int(bytes(self._current.data).decode().strip())
            except ValueError:
                self._form_max_size = None
        self._current = None

    # Staging

    def feed(self, body: bytes) -> None:
        """Feed the whole body; malformed input leaves the current part unfinished."""
        try:
            self._parser.write(body)
            self._parser.finalize()
        except MultipartParseError as ex:
            logger.warning("Malformed multipart body", icon=LogIcon.WARNING, error=str(ex))

    def _classify(self, part: _Part) -> UploadError:
        if not part.complete:
            return UploadError.PARTIAL
        if not part.filename:
            return UploadError.NO_FILE
        if self._max_size is not None and part.size > self._max_size:
            return UploadError.INI_SIZE
        if part.form_limit is not None and part.size > part.form_limit:
            return UploadError.FORM_SIZE
        if not self._tmp_dir.is_dir():
            return UploadError.NO_TMP_DIR
        return UploadError.OK

    def _write(self, part: _Part) -> Path:
        with tempfile.NamedTemporaryFile(dir=self._tmp_dir, prefix="upload-", delete=False) as handle:
            handle.write(part.data)
            return Path(handle.name)

    def stage(self) -> UploadFile:
        """Build descriptors for every file part. Later fields with the same name win."""
        staged = UploadFile()
        for part in self._parts:
            if part.filename is None:
                continue

            error = self._classify(part)
            tmp_name = None
            if error == UploadError.OK:
                try:
                    tmp_name = self._write(part)
                except OSError as ex:
                    logger.error("Could not stage upload", icon=LogIcon.ERROR, field=part.field_name, error=str(ex))
                    error = UploadError.CANT_WRITE

            if (previous := staged.files.get(part.field_name)) is not None:
                discard_descriptor(previous)

            staged.files[part.field_name] = UploadedFileDescriptor(
                name=part.filename,
                type=part.content_type if error == UploadError.OK else "",
                size=part.size if error == UploadError.OK else 0,
                error=error,
                tmp_name=tmp_name,
            )
            logger.info(
                "Staged upload field",
                icon=LogIcon.UPLOAD,
                field=part.field_name,
                error=int(error),
                size=part.size,
            )
        return staged


def stage_request_files(request: Request, tmp_dir: Path | None = None, max_size: int | None = None) -> UploadFile:
    """Stage file fields of a multipart POST request. Anything else yields an empty UploadFile."""
    if str(request.method).upper() != "POST":
        return UploadFile()

    content_type = _header(request, "content-type")
    if not content_type:
        return UploadFile()

    mime, options = parse_options_header(content_type)
    boundary = options.get(b"boundary")
    if mime.decode("latin-1").lower() != MULTIPART_CONTENT_TYPE or not boundary:
        return UploadFile()

    stager = MultipartStager(
        boundary,
        tmp_dir=tmp_dir if tmp_dir is not None else st.UPLOAD_TMP_DIR,
        max_size=max_size if max_size is not None else st.MAX_UPLOAD_SIZE,
    )
    stager.feed(_body_bytes(request))
    return stager.stage()


def discard_descriptor(descriptor: UploadedFileDescriptor) -> None:
    if descriptor.tmp_name is None:
        return
    try:
        descriptor.tmp_name.unlink(missing_ok=True)
    except OSError as ex:
        logger.warning("Could not remove staged upload", icon=LogIcon.WARNING, path=str(descriptor.tmp_name), error=str(ex))
    descriptor.tmp_name = None


def discard_staged_files(files: UploadFile) -> None:
    """Remove every staged temporary file of a request."""
    for _, descriptor in files:
        discard_descriptor(descriptor)
