# SPDX-License-Identifier: MIT

from __future__ import annotations

import datetime
from typing import Any, Iterable, List, Mapping, Optional
from urllib.parse import urlencode

import aiohttp

__all__ = (
    "utcnow",
    "build_url",
    "to_form_urlencoded",
    "encode_basic_auth",
    "parse_scopes",
    "scopes_to_string",
)


def utcnow() -> datetime.datetime:
    """A helper function to return an aware UTC datetime representing the current time."""
    return datetime.datetime.now(datetime.timezone.utc)


# aiohttp 3.14 deprecates BasicAuth in favour of encode_basic_auth
_encode_basic_auth = getattr(aiohttp, "encode_basic_auth", None)


def _format_value(value: Any) -> str:
    # URLSearchParams stringifies booleans in lower case
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _clean(params: Mapping[str, Any]) -> List[tuple]:
    return [
        (key, _format_value(value))
        for key, value in params.items()
        if value is not None
    ]


def build_url(base_url: str, params: Mapping[str, Any]) -> str:
    """Appends ``params`` to ``base_url`` as a query string.

    Parameters whose value is ``None`` are left out.
    """
    query = urlencode(_clean(params))
    if not query:
        return base_url
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{query}"


def to_form_urlencoded(data: Mapping[str, Any]) -> str:
    """Encodes ``data`` as an ``application/x-www-form-urlencoded`` body, skipping ``None`` values."""
    return urlencode(_clean(data))


def encode_basic_auth(client_id: str, client_secret: str) -> str:
    """Returns the ``Authorization`` header value for HTTP Basic auth."""
    if _encode_basic_auth is not None:
        return _encode_basic_auth(client_id, client_secret, "utf-8")
    return aiohttp.BasicAuth(client_id, client_secret, encoding="utf-8").encode()


def scopes_to_string(scopes: Iterable[str]) -> str:
    return " ".join(scopes)


def parse_scopes(scope_string: Optional[str]) -> List[str]:
    """Splits a space separated scope string, dropping empty tokens.

    .. code-block:: python3

        >>> parse_scopes("identify email")
        ['identify', 'email']
        >>> parse_scopes("")
        []
    """
    if not scope_string:
        return []
    return [scope for scope in scope_string.split(" ") if scope]
