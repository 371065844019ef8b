"""GraphQL request value."""

from __future__ import annotations

from dataclasses import dataclass
from typing import IO, Any, AsyncIterable, Union

import httpx

from .errors import user_input_error

FileContent = Union[bytes, IO[bytes], AsyncIterable[bytes]]


@dataclass(frozen=True, slots=True)
class FileAttachment:
    """A file sent as its own form-file part in multipart mode."""

    field_name: str
    filename: str
    content: FileContent


def _require_name(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise user_input_error(f"{what} must be a non-empty string")
    return value


class Request:
    """A GraphQL request: query text, variables, file attachments and headers.

    A request is consumed by the run it is passed to. File contents are streams and may
    be drained by that run, so a request should not be shared between concurrent runs.
    """

    def __init__(self, query: str) -> None:
        if not isinstance(query, str):
            raise user_input_error("query must be a string")
        self._query = query
        self._vars: dict[str, Any] = {}
        self._files: list[FileAttachment] = []
        self.header = httpx.Headers()

    @property
    def query(self) -> str:
        return self._query

    @property
    def files(self) -> tuple[FileAttachment, ...]:
        return tuple(self._files)

    def vars(self) -> dict[str, Any]:
        """Return a copy of the variables in insertion order."""
        return dict(self._vars)

    def var(self, name: str, value: Any) -> Request:
        """Bind or rebind a variable.

        Rebinding keeps the variable's original position in the encoded object.
        """
        self._vars[_require_name(name, "variable name")] = value
        return self

    def file(self, field_name: str, filename: str, content: FileContent) -> Request:
        """Attach a file. Only multipart mode sends attachments."""
        _require_name(field_name, "field name")
        if not isinstance(filename, str):
            raise user_input_error("filename must be a string")
        if content is None:
            raise user_input_error("file content is required")
        self._files.append(FileAttachment(field_name=field_name, filename=filename, content=content))
        return self

    def set_header(self, name: str, value: str) -> Request:
        self.header[_require_name(name, "header name")] = value
        return self

    def add_header(self, name: str, value: str) -> Request:
        """Append a value without replacing earlier values for the same header."""
        _require_name(name, "header name")
        self.header = httpx.Headers([*self.header.multi_items(), (name, value)])
        return self

    def __repr__(self) -> str:
        return f"Request(query={self._query!r}, vars={list(self._vars)}, files={len(self._files)})"
