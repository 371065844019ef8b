"""Request body encoding.

Two wire modes:
- JSON: ``{"query": ..., "variables": ...}`` followed by a newline
- multipart/form-data: ``query`` and ``variables`` text parts, then one file part per attachment

Multipart bodies are either materialized up front (buffered) or produced lazily while the
transport sends them (streamed). File contents are read once in both cases and never closed.
Blocking file reads are done in a worker thread; objects with an async ``read`` are awaited.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import os
from dataclasses import dataclass
from typing import Any, AsyncIterator, Iterable

from .errors import encode_error
from .request import FileAttachment, FileContent, Request

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
FILE_CONTENT_TYPE = "application/octet-stream"

CRLF = b"\r\n"
CHUNK_SIZE = 64 * 1024

# Same escaping browsers apply to form-data parameter values.
_PARAM_REPLACEMENTS = {
    '"': "%22",
    "\\": "\\\\",
    "\r": "%0D",
    "\n": "%0A",
}


@dataclass(frozen=True, slots=True)
class EncodedBody:
    """An encoded request body and its Content-Type."""

    content_type: str
    content: bytes | AsyncIterator[bytes]

    @property
    def buffered(self) -> bool:
        return isinstance(self.content, bytes)


def _dump_json(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise encode_error(f"variables are not JSON serializable ({exc})") from exc


def _utf8(text: str, what: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise encode_error(f"{what} is not valid UTF-8 text") from exc


def encode_variables(variables: dict[str, Any]) -> str:
    """Encode variables as a JSON object, or ``null`` when there are none."""
    return _dump_json(variables or None)


def encode_json(request: Request) -> EncodedBody:
    """Encode a request as a single JSON object with ``query`` before ``variables``."""
    body = '{"query":' + _dump_json(request.query) + ',"variables":' + encode_variables(request.vars()) + "}\n"
    return EncodedBody(content_type=JSON_CONTENT_TYPE, content=_utf8(body, "request body"))


def new_boundary() -> str:
    return os.urandom(16).hex()


def _format_param(name: str, value: str) -> str:
    escaped = "".join(_PARAM_REPLACEMENTS.get(ch, ch) for ch in value)
    return f'{name}="{escaped}"'


def _part_header(boundary: str, disposition: str, content_type: str | None = None) -> bytes:
    lines = [f"--{boundary}", f"Content-Disposition: form-data; {disposition}"]
    if content_type is not None:
        lines.append(f"Content-Type: {content_type}")
    return _utf8("\r\n".join(lines) + "\r\n\r\n", "form part header")


def _field_part(boundary: str, name: str, value: str) -> bytes:
    return _part_header(boundary, _format_param("name", name)) + _utf8(value, f"form field {name!r}") + CRLF


def _file_part_header(boundary: str, attachment: FileAttachment) -> bytes:
    disposition = f"{_format_param('name', attachment.field_name)}; {_format_param('filename', attachment.filename)}"
    return _part_header(boundary, disposition, FILE_CONTENT_TYPE)


def _as_bytes(chunk: Any, filename: str) -> bytes:
    if isinstance(chunk, str):
        return _utf8(chunk, f"file {filename!r}")
    if isinstance(chunk, (bytes, bytearray, memoryview)):
        return bytes(chunk)
    raise encode_error(f"file {filename!r} produced {type(chunk).__name__}, expected bytes")


async def _read_chunk(content: Any) -> Any:
    # Synchronous reads run in a worker thread.
    if inspect.iscoroutinefunction(content.read):
        return await content.read(CHUNK_SIZE)
    chunk = await asyncio.to_thread(content.read, CHUNK_SIZE)
    if inspect.isawaitable(chunk):
        chunk = await chunk
    return chunk


async def _read_content(content: FileContent, filename: str) -> AsyncIterator[bytes]:
    if isinstance(content, (bytes, bytearray, memoryview)):
        yield bytes(content)
        return

    if hasattr(content, "read"):
        while True:
            try:
                chunk = await _read_chunk(content)
            except (OSError, ValueError) as exc:
                raise encode_error(f"reading file {filename!r} failed") from exc
            if not chunk:
                return
            yield _as_bytes(chunk, filename)

    if hasattr(content, "__aiter__"):
        try:
            async for chunk in content:
                yield _as_bytes(chunk, filename)
        except (OSError, ValueError) as exc:
            raise encode_error(f"reading file {filename!r} failed") from exc
        return

    raise encode_error(f"unsupported content type for file {filename!r}: {type(content).__name__}")


async def _iter_multipart(head: bytes, files: Iterable[FileAttachment], boundary: str) -> AsyncIterator[bytes]:
    yield head
    for attachment in files:
        yield _file_part_header(boundary, attachment)
        async for chunk in _read_content(attachment.content, attachment.filename):
            yield chunk
        yield CRLF
    yield f"--{boundary}--".encode("ascii") + CRLF


async def encode_multipart(request: Request, *, buffered: bool, boundary: str | None = None) -> EncodedBody:
    """Encode a request as multipart/form-data.

    The ``query`` and ``variables`` parts are encoded eagerly so serialization errors
    surface before any network traffic. Empty variables are sent as ``null``.
    """
    boundary = boundary or new_boundary()
    head = _field_part(boundary, "query", request.query) + _field_part(
        boundary, "variables", encode_variables(request.vars()) + "\n"
    )
    stream = _iter_multipart(head, request.files, boundary)
    content_type = f"multipart/form-data; boundary={boundary}"

    if not buffered:
        return EncodedBody(content_type=content_type, content=stream)

    chunks = [chunk async for chunk in stream]
    return EncodedBody(content_type=content_type, content=b"".join(chunks))


async def encode_request(request: Request, *, multipart: bool, buffered: bool) -> EncodedBody:
    """Encode ``request`` in the selected mode. JSON bodies are always buffered."""
    if multipart:
        return await encode_multipart(request, buffered=buffered)
    return encode_json(request)
