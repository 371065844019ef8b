"""HTTP exchange over an httpx.AsyncClient.

Provides:
- a single POST per call, no retries
- the response body read fully and released on every exit path
- an optional whole-exchange deadline
- transport failure translation
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from .encoding import EncodedBody
from .errors import GraphQLClientError, timeout_error, transport_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RequestBudget:
    """Deadline for a single run, covering send and response read."""

    total_timeout_s: float


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Status and fully read body of an HTTP response."""

    status_code: int
    body: bytes


async def _exchange(
    http_client: httpx.AsyncClient,
    url: str,
    body: EncodedBody,
    headers: httpx.Headers,
) -> RawResponse:
    async with http_client.stream("POST", url, content=body.content, headers=headers) as resp:
        payload = await resp.aread()
    return RawResponse(status_code=resp.status_code, body=payload)


async def post(
    http_client: httpx.AsyncClient,
    url: str,
    body: EncodedBody,
    *,
    headers: httpx.Headers | None = None,
    budget: RequestBudget | None = None,
    log: logging.Logger | None = None,
) -> RawResponse:
    """POST an encoded body and return the status and complete response body.

    Caller headers are sent as given; Content-Type always comes from the encoder.
    Task cancellation propagates unchanged and aborts the in-flight request.

    Raises:
        GraphQLClientError: ``Timeout`` when the budget or an httpx timeout expires,
            ``Transport`` for any other httpx failure.
    """
    log = log or logger
    merged = httpx.Headers(headers)
    merged["Content-Type"] = body.content_type

    try:
        if budget is None:
            return await _exchange(http_client, url, body, merged)
        return await asyncio.wait_for(_exchange(http_client, url, body, merged), timeout=budget.total_timeout_s)
    except GraphQLClientError:
        raise
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        log.warning("GraphQL request to %s timed out", url)
        raise timeout_error() from exc
    except httpx.HTTPError as exc:
        log.warning("GraphQL request to %s failed: %s", url, exc)
        raise transport_error(f"request failed: {exc}") from exc
    finally:
        # A streamed body may be left unconsumed when the exchange fails early.
        aclose = getattr(body.content, "aclose", None)
        if aclose is not None:
            await aclose()
