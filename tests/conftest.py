"""Shared test helpers."""

from __future__ import annotations

from email.parser import BytesParser
from email.policy import HTTP
from typing import Callable

import httpx
import pytest

FormParts = dict[str, list[tuple[str | None, bytes]]]


def _parse_form(request: httpx.Request) -> FormParts:
    """Parse a multipart/form-data request the way a server would.

    Returns field name -> list of (filename, body) in body order.
    """
    content_type = request.headers["content-type"]
    assert content_type.startswith("multipart/form-data; boundary=")
    raw = b"Content-Type: " + content_type.encode("ascii") + b"\r\n\r\n" + request.content
    message = BytesParser(policy=HTTP).parsebytes(raw)
    assert message.is_multipart()

    parts: FormParts = {}
    for part in message.iter_parts():
        name = part.get_param("name", header="content-disposition")
        parts.setdefault(name, []).append((part.get_filename(), part.get_payload(decode=True)))
    return parts


@pytest.fixture
def parse_form() -> Callable[[httpx.Request], FormParts]:
    return _parse_form
