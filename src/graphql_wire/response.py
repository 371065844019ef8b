"""Response classification and envelope decoding."""

from __future__ import annotations

import json
from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import Any

from .errors import GraphQLClientError, decode_error, status_error


@dataclass(slots=True)
class GraphQLResponse:
    """The ``{data, errors}`` envelope returned by a GraphQL server."""

    data: Any = None
    errors: list[Any] = field(default_factory=list)


def decode_envelope(body: bytes) -> GraphQLResponse:
    """Parse a response body into an envelope.

    Either member may be absent. ``errors`` must be a list when present.

    Raises:
        GraphQLClientError: ``Decode`` if the body is not a JSON object envelope.
    """
    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise decode_error("body is not valid JSON") from exc

    if not isinstance(payload, dict):
        raise decode_error("body is not a JSON object")

    errors = payload.get("errors")
    if errors is None:
        errors = []
    elif not isinstance(errors, list):
        raise decode_error("errors is not a list")

    return GraphQLResponse(data=payload.get("data"), errors=errors)


def classify_response(status_code: int, body: bytes) -> GraphQLResponse:
    """Turn an HTTP status and body into an envelope or an error.

    - 2xx: the body must decode
    - 400: accepted only when the body decodes and carries at least one GraphQL error
    - anything else: a status error, body discarded

    GraphQL errors in an accepted envelope are returned, not raised.
    """
    envelope: GraphQLResponse | None = None
    deferred: GraphQLClientError | None = None
    try:
        envelope = decode_envelope(body)
    except GraphQLClientError as exc:
        deferred = exc

    if 200 <= status_code <= 299:
        if deferred is not None:
            raise deferred
        return envelope

    if status_code == 400 and envelope is not None and envelope.errors:
        return envelope

    raise status_error(status_code=status_code)


def populate_destination(destination: Any, envelope: GraphQLResponse) -> Any:
    """Copy ``data`` and ``errors`` into the caller's destination and return it.

    Mappings receive both keys. Other objects always receive ``data`` and receive
    ``errors`` only if they already have that attribute. ``None`` yields the envelope.
    """
    if destination is None:
        return envelope

    if isinstance(destination, MutableMapping):
        destination["data"] = envelope.data
        destination["errors"] = envelope.errors
        return destination

    destination.data = envelope.data
    if hasattr(destination, "errors"):
        destination.errors = envelope.errors
    return destination
