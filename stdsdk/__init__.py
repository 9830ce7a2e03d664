"""Generic HTTP and WebSocket API client toolkit."""

__version__ = "0.1.0"

from .client import SdkClient, decode_json, parse_endpoint, response_error
from .encoding import encode_query, encode_value, encode_values, format_duration
from .errors import (
    ConflictingBodyError,
    SdkClientError,
    SdkConnectionError,
    SdkEncodingError,
    SdkHandshakeError,
    SdkResponseError,
    SdkTimeout,
    UnencodableTypeError,
)
from .options import RequestOptions, marshal_options, option
from .request import SdkRequest, build_request
from .stream import WebsocketStream, iter_chunks
from .ws import connect_websocket

__all__ = [
    "ConflictingBodyError",
    "RequestOptions",
    "SdkClient",
    "SdkClientError",
    "SdkConnectionError",
    "SdkEncodingError",
    "SdkHandshakeError",
    "SdkRequest",
    "SdkResponseError",
    "SdkTimeout",
    "UnencodableTypeError",
    "WebsocketStream",
    "__version__",
    "build_request",
    "connect_websocket",
    "decode_json",
    "encode_query",
    "encode_value",
    "encode_values",
    "format_duration",
    "iter_chunks",
    "marshal_options",
    "option",
    "parse_endpoint",
    "response_error",
]
