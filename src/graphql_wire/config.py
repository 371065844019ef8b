"""Client configuration.

Configuration is supplied by the caller at construction time. Nothing is read from the
environment.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from .errors import CONFIG, GraphQLClientError


@dataclass(frozen=True, slots=True)
class LimitsConfig:
    """Timeouts applied to the default pooled HTTP client."""

    total_timeout_s: float = 60.0
    connect_timeout_s: float = 5.0
    read_timeout_s: float = 30.0

    def to_httpx_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            timeout=self.total_timeout_s,
            connect=self.connect_timeout_s,
            read=self.read_timeout_s,
        )


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Endpoint binding and wire-mode selection for a GraphQLClient."""

    endpoint: str
    use_multipart_form: bool = False
    immediately_close_request_body: bool = False
    limits: LimitsConfig = field(default_factory=LimitsConfig)


def _validate_limits(limits: LimitsConfig) -> None:
    for name in ("total_timeout_s", "connect_timeout_s", "read_timeout_s"):
        value = getattr(limits, name)
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            raise GraphQLClientError(code=CONFIG, message=f"{name} must be a positive number")


def build_client_config(
    endpoint: str,
    *,
    use_multipart_form: bool = False,
    immediately_close_request_body: bool = False,
    limits: LimitsConfig | None = None,
    allow_empty_endpoint: bool = False,
) -> ClientConfig:
    """Validate constructor arguments and return a ClientConfig.

    An empty endpoint is only acceptable when the caller brings its own HTTP client,
    which is then free to route the request wherever it likes.

    Raises:
        GraphQLClientError: If the endpoint or limits are invalid.
    """
    if not isinstance(endpoint, str):
        raise GraphQLClientError(code=CONFIG, message="endpoint must be a string")

    endpoint = endpoint.strip()
    if endpoint:
        try:
            url = httpx.URL(endpoint)
        except httpx.InvalidURL as exc:
            raise GraphQLClientError(code=CONFIG, message="endpoint is not a valid URL") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise GraphQLClientError(code=CONFIG, message="endpoint must be an absolute http(s) URL")
    elif not allow_empty_endpoint:
        raise GraphQLClientError(code=CONFIG, message="endpoint is required")

    limits = limits or LimitsConfig()
    _validate_limits(limits)

    return ClientConfig(
        endpoint=endpoint,
        use_multipart_form=bool(use_multipart_form),
        immediately_close_request_body=bool(immediately_close_request_body),
        limits=limits,
    )
