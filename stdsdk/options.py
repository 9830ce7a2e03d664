"""Request options and the marshaler that builds them from annotated dataclasses."""

from __future__ import annotations

import dataclasses
from collections.abc import AsyncIterable
from dataclasses import dataclass, field
from typing import IO, Any, TypeAlias

from .encoding import TypedValue, encode_query, encode_value
from .errors import ConflictingBodyError

Body: TypeAlias = bytes | bytearray | IO[bytes] | AsyncIterable[bytes]

CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"
CONTENT_TYPE_OCTET_STREAM = "application/octet-stream"

_BUCKETS = ("header", "param", "query")


@dataclass(frozen=True)
class RequestOptions:
    """Encoding-agnostic description of what a single call sends.

    ``body`` and ``params`` are mutually exclusive; ``query`` always applies.
    """

    body: Body | None = None
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, TypedValue] = field(default_factory=dict)
    query: dict[str, TypedValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.body is not None and self.params:
            raise ConflictingBodyError()

    def querystring(self) -> str:
        """Serialize ``query`` sorted by key.

        Raises:
            UnencodableTypeError: If a query value has an unsupported type.
        """
        return encode_query(self.query)

    def content_type(self) -> str:
        if self.body is None:
            return CONTENT_TYPE_FORM
        return CONTENT_TYPE_OCTET_STREAM

    def reader(self) -> Body:
        """Return the request body source.

        The raw body is returned as-is; otherwise ``params`` are form-encoded.
        An empty ``b""`` is returned when neither is set.
        """
        if self.body is not None and self.params:
            raise ConflictingBodyError()
        if self.body is not None:
            return self.body
        if not self.params:
            return b""
        return encode_query(self.params).encode()


def option(
    *,
    header: str | None = None,
    param: str | None = None,
    query: str | None = None,
    default: Any = None,
) -> Any:
    """Declare a dataclass field routed into one or more request buckets.

    Example:
        @dataclass
        class ListApps:
            limit: int | None = option(query="limit")
            token: str | None = option(header="X-Token", query="token")
    """
    metadata = {
        bucket: name
        for bucket, name in zip(_BUCKETS, (header, param, query))
        if name
    }
    return field(default=default, metadata=metadata)


def marshal_options(obj: Any) -> RequestOptions:
    """Build RequestOptions from a dataclass declared with ``option`` fields.

    Fields are visited in declaration order. A field whose value is None is
    left out of every bucket. When two fields name the same key in one bucket
    the later field wins. Fields without bucket metadata are ignored.

    Raises:
        TypeError: If ``obj`` is not a dataclass instance.
        UnencodableTypeError: If an annotated field holds an unsupported type.
    """
    if not dataclasses.is_dataclass(obj) or isinstance(obj, type):
        raise TypeError(f"expected a dataclass instance, got {type(obj).__name__}")

    headers: dict[str, str] = {}
    params: dict[str, TypedValue] = {}
    query: dict[str, TypedValue] = {}

    for f in dataclasses.fields(obj):
        names = {b: f.metadata.get(b) for b in _BUCKETS if f.metadata.get(b)}
        if not names:
            continue

        value = getattr(obj, f.name)
        encoded = encode_value(value, f.name)
        if encoded is None:
            continue

        if "header" in names:
            headers[names["header"]] = encoded
        if "param" in names:
            params[names["param"]] = value
        if "query" in names:
            query[names["query"]] = value

    return RequestOptions(headers=headers, params=params, query=query)
