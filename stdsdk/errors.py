"""Error types raised by the stdsdk API client."""

from __future__ import annotations


class SdkClientError(Exception):
    """Base error for API client failures."""


class SdkTimeout(SdkClientError):
    """Timeout while communicating with the API."""


class SdkConnectionError(SdkClientError):
    """Network connection to the API failed."""


class SdkHandshakeError(SdkClientError):
    """WebSocket handshake failed."""


class SdkResponseError(SdkClientError):
    """HTTP error response from the API."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status


class SdkEncodingError(SdkClientError):
    """Request options could not be encoded."""


class UnencodableTypeError(SdkEncodingError, TypeError):
    """Value is not one of the supported parameter types."""

    def __init__(self, value: object, name: str | None = None) -> None:
        type_name = type(value).__name__
        if name:
            message = f"unencodable type for {name!r}: {type_name}"
        else:
            message = f"unencodable type: {type_name}"
        super().__init__(message)
        self.value_type = type(value)
        self.name = name


class ConflictingBodyError(SdkEncodingError):
    """Both a raw body and form params were supplied."""

    def __init__(self) -> None:
        super().__init__("cannot specify both body and params")
