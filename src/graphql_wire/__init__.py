"""graphql-wire.

A minimal async GraphQL client over httpx.

Features:
- JSON or multipart/form-data request bodies, with file attachments in multipart mode
- streamed or fully buffered request bodies
- one POST per run, no retries
- GraphQL errors delivered through the destination, transport failures raised
"""

from .client import GraphQLClient
from .config import ClientConfig, LimitsConfig
from .errors import GraphQLClientError
from .request import FileAttachment, Request
from .response import GraphQLResponse
from .transport import RequestBudget

__version__ = "1.0.0"

__all__ = [
    "ClientConfig",
    "FileAttachment",
    "GraphQLClient",
    "GraphQLClientError",
    "GraphQLResponse",
    "LimitsConfig",
    "Request",
    "RequestBudget",
]
