"""Error type and constructors.

Every failure surfaced by the client is a GraphQLClientError with a stable code.
GraphQL-level errors returned by the server are not errors here; they are
delivered through the destination.
"""

from __future__ import annotations

from dataclasses import dataclass

CONFIG = "Config"
USER_INPUT = "UserInput"
ENCODE = "Encode"
TRANSPORT = "Transport"
TIMEOUT = "Timeout"
STATUS = "Status"
DECODE = "Decode"


@dataclass(eq=False, slots=True)
class GraphQLClientError(Exception):
    """A client failure with a stable code.

    ``status_code`` is set only for ``Status`` errors.
    """

    code: str
    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        return self.message


def status_error(*, status_code: int) -> GraphQLClientError:
    """Return the error for a non-2xx response that carries no usable GraphQL errors."""
    return GraphQLClientError(
        code=STATUS,
        message=f"graphql: server returned a non-200 status code: {status_code}",
        status_code=status_code,
    )


def encode_error(message: str) -> GraphQLClientError:
    """Error for a variable or attachment that cannot be serialized."""
    return GraphQLClientError(code=ENCODE, message=f"graphql: encoding request: {message}")


def decode_error(message: str) -> GraphQLClientError:
    """Error for a 2xx response whose body is not a GraphQL envelope."""
    return GraphQLClientError(code=DECODE, message=f"graphql: decoding response: {message}")


def transport_error(message: str) -> GraphQLClientError:
    """Error for a failed HTTP exchange."""
    return GraphQLClientError(code=TRANSPORT, message=f"graphql: {message}")


def timeout_error() -> GraphQLClientError:
    """Error for an exchange that ran past its deadline."""
    return GraphQLClientError(code=TIMEOUT, message="graphql: request deadline exceeded")


def user_input_error(message: str) -> GraphQLClientError:
    """Error for invalid request-building arguments."""
    return GraphQLClientError(code=USER_INPUT, message=message)
