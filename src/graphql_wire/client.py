"""GraphQL client.

Binds an endpoint, a wire mode, an HTTP client and a body policy, and exposes a single
``run`` operation. GraphQL errors returned by the server are delivered through the
destination; only transport, status, encoding and decoding failures raise.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from .config import ClientConfig, LimitsConfig, build_client_config
from .encoding import encode_request
from .request import Request
from .response import classify_response, populate_destination
from .transport import RequestBudget, post


class GraphQLClient:
    """Async client for a single GraphQL endpoint."""

    def __init__(
        self,
        endpoint: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        use_multipart_form: bool = False,
        immediately_close_request_body: bool = False,
        logger: logging.Logger | None = None,
        limits: LimitsConfig | None = None,
    ) -> None:
        """Create a client.

        Args:
            endpoint: Absolute http(s) URL every request is POSTed to. May be empty when
                ``http_client`` is given, in which case that client's base_url is used.
            http_client: Optional caller-owned httpx client. When omitted, a pooled client
                is created and closed by ``aclose``.
            use_multipart_form: Send multipart/form-data instead of a JSON body.
            immediately_close_request_body: Materialize the whole body before sending
                instead of streaming it.
            logger: Diagnostic logger; defaults to this module's logger.
            limits: Timeouts for the default pooled client.
        """
        self._config: ClientConfig = build_client_config(
            endpoint,
            use_multipart_form=use_multipart_form,
            immediately_close_request_body=immediately_close_request_body,
            limits=limits,
            allow_empty_endpoint=http_client is not None,
        )
        self._log = logger or logging.getLogger(__name__)
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            follow_redirects=False,
            timeout=self._config.limits.to_httpx_timeout(),
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def run(
        self,
        request: Request,
        destination: Any = None,
        *,
        budget: RequestBudget | None = None,
    ) -> Any:
        """Send ``request`` and decode the response into ``destination``.

        Exactly one POST is issued per call. The destination is left untouched on
        every error path.

        Returns:
            The populated destination, or a GraphQLResponse when none was given.

        Raises:
            GraphQLClientError: On encoding, transport, timeout, status or decode failure.
        """
        cfg = self._config
        start = time.monotonic()

        self._log.debug(">> query: %s", request.query)
        self._log.debug(">> variables: %s", request.vars())
        if request.files:
            if cfg.use_multipart_form:
                self._log.debug(">> files: %s", [f.filename for f in request.files])
            else:
                self._log.debug(">> files ignored in JSON mode: %s", [f.filename for f in request.files])
        self._log.debug(">> headers: %s", list(request.header.keys()))

        body = await encode_request(
            request,
            multipart=cfg.use_multipart_form,
            buffered=cfg.immediately_close_request_body,
        )
        raw = await post(
            self._http_client,
            cfg.endpoint,
            body,
            headers=request.header,
            budget=budget,
            log=self._log,
        )

        self._log.debug("<< status: %s", raw.status_code)
        self._log.debug("<< %s", raw.body.decode("utf-8", errors="replace"))

        envelope = classify_response(raw.status_code, raw.body)
        self._log.debug(
            "GraphQL run finished status=%s errors=%s duration_ms=%s",
            raw.status_code,
            len(envelope.errors),
            int((time.monotonic() - start) * 1000),
        )
        return populate_destination(destination, envelope)

    async def aclose(self) -> None:
        """Close the pooled HTTP client if this client created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> GraphQLClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
