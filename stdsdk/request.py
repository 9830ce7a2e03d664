"""Outbound request construction."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import aiohttp
from multidict import CIMultiDict
from yarl import URL

from .options import Body, RequestOptions


@dataclass(slots=True)
class SdkRequest:
    """Fully formed request, ready to hand to the HTTP transport."""

    method: str
    url: str
    headers: CIMultiDict[str]
    body: Body


PrepareFunc = Callable[[SdkRequest], None]


def base_url(endpoint: URL) -> str:
    """Return ``scheme://host[:port]/base`` without credentials or trailing slash."""
    return f"{endpoint.origin()}{endpoint.raw_path.rstrip('/')}"


def basic_auth_header(endpoint: URL) -> str | None:
    """Return a Basic ``Authorization`` value for credentials embedded in the URL."""
    if endpoint.user is None:
        return None
    return aiohttp.BasicAuth(endpoint.user, endpoint.password or "").encode()


def build_request(
    endpoint: URL,
    method: str,
    path: str,
    opts: RequestOptions,
    *,
    prepare: PrepareFunc | None = None,
) -> SdkRequest:
    """Combine endpoint, method, path and options into an SdkRequest.

    Header precedence, lowest first: defaults, option headers, basic auth
    from the endpoint, then the ``prepare`` hook.

    Raises:
        UnencodableTypeError: If a query or param value cannot be encoded.
        ConflictingBodyError: If both body and params are set.
    """
    qs = opts.querystring()
    body = opts.reader()

    url = base_url(endpoint) + path
    if qs:
        url = f"{url}?{qs}"

    headers: CIMultiDict[str] = CIMultiDict()
    headers.add("Accept", "*/*")
    headers["Content-Type"] = opts.content_type()

    for key, value in opts.headers.items():
        headers[key] = value

    auth = basic_auth_header(endpoint)
    if auth is not None:
        headers["Authorization"] = auth

    request = SdkRequest(method=method.upper(), url=url, headers=headers, body=body)

    if prepare is not None:
        prepare(request)

    return request
