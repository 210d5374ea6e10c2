# SPDX-License-Identifier: MIT

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    ClassVar,
    Dict,
    Mapping,
    Optional,
    Union,
)
from urllib.parse import quote as _uriquote

import aiohttp

from . import __version__
from .errors import DiscordAPIRequestError
from .utils import to_form_urlencoded

if TYPE_CHECKING:
    from .types.oauth2 import APIError

__all__ = (
    "Route",
    "TransportResponse",
    "Transport",
    "HTTPClient",
    "DISCORD_API_URL",
    "DISCORD_OAUTH2_URLS",
)

_log = logging.getLogger(__name__)

DISCORD_API_URL = "https://discord.com/api/v10"
DISCORD_OAUTH2_URLS: Dict[str, str] = {
    "AUTHORIZE": "https://discord.com/oauth2/authorize",
    "TOKEN": "https://discord.com/api/oauth2/token",
    "TOKEN_REVOKE": "https://discord.com/api/oauth2/token/revoke",
}


@dataclass
class TransportResponse:
    """What a transport hands back for a single request."""

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Union[bytes, str, None] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def get_header(self, name: str) -> Optional[str]:
        name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return None

    @property
    def text(self) -> str:
        if self.body is None:
            return ""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    @property
    def is_json(self) -> bool:
        content_type = self.get_header("Content-Type")
        return content_type is not None and "application/json" in content_type


Transport = Callable[[str, str, Dict[str, str], Optional[str]], Awaitable[TransportResponse]]


class Route:
    """An endpoint to request.

    ``path`` may contain ``{placeholders}`` that are filled in from
    ``parameters``, quoted for use in a URL path.
    """

    BASE: ClassVar[str] = DISCORD_API_URL

    def __init__(self, method: str, path: str, *, base: Optional[str] = None, **parameters: Any) -> None:
        self.method: str = method
        self.path: str = path
        url = (base or self.BASE) + path
        if parameters:
            url = url.format_map(
                {k: _uriquote(v, safe="") if isinstance(v, str) else v for k, v in parameters.items()}
            )
        self.url: str = url

    @classmethod
    def absolute(cls, method: str, url: str) -> Route:
        return cls(method, "", base=url)

    def __repr__(self) -> str:
        return f"<Route method={self.method!r} url={self.url!r}>"


def _to_json(obj: Any) -> str:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=True)


def _json_or_empty(response: TransportResponse) -> Any:
    if not response.is_json:
        return {}
    text = response.text
    if not text:
        return {}
    return json.loads(text)


def _error_payload(response: TransportResponse) -> Optional[APIError]:
    if not response.is_json:
        return None
    try:
        data = json.loads(response.text)
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    return data  # type: ignore


class HTTPClient:
    """Issues requests to Discord and maps the responses.

    Parameters
    -----------
    connector: Optional[:class:`aiohttp.BaseConnector`]
        The connector to use for the client session.
    proxy: Optional[:class:`str`]
        Optional proxy URL to use for requests.
    proxy_auth: Optional[:class:`aiohttp.BasicAuth`]
        Optional proxy authentication. Deprecated by aiohttp 3.14, prefer ``proxy_headers``.
    proxy_headers: Optional[:class:`dict`]
        Headers sent to the proxy, e.g. ``Proxy-Authorization``.
    transport: Optional[Callable]
        A coroutine function ``(method, url, headers, body)`` returning a
        :class:`TransportResponse`. Replaces the aiohttp transport entirely.
    """

    def __init__(
        self,
        *,
        connector: Optional[aiohttp.BaseConnector] = None,
        proxy: Optional[str] = None,
        proxy_auth: Optional[aiohttp.BasicAuth] = None,
        proxy_headers: Optional[Dict[str, str]] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        self.connector: Optional[aiohttp.BaseConnector] = connector
        self.proxy: Optional[str] = proxy
        self.proxy_auth: Optional[aiohttp.BasicAuth] = proxy_auth
        self.proxy_headers: Optional[Dict[str, str]] = proxy_headers
        self.__session: Optional[aiohttp.ClientSession] = None
        self._transport: Transport = transport or self._aiohttp_transport

        user_agent = "DiscordOAuth2 (discord-oauth2 {0}) Python/{1[0]}.{1[1]} aiohttp/{2}"
        self.user_agent: str = user_agent.format(__version__, sys.version_info, aiohttp.__version__)

    def _get_session(self) -> aiohttp.ClientSession:
        if self.__session is None or self.__session.closed:
            # a connector passed in by the caller outlives this session
            self.__session = aiohttp.ClientSession(
                connector=self.connector,
                connector_owner=self.connector is None,
            )
        return self.__session

    async def _aiohttp_transport(
        self, method: str, url: str, headers: Dict[str, str], body: Optional[str]
    ) -> TransportResponse:
        async with self._get_session().request(
            method,
            url,
            headers=headers,
            data=body,
            proxy=self.proxy,
            proxy_auth=self.proxy_auth,
            proxy_headers=self.proxy_headers,
        ) as response:
            data = await response.read()
            return TransportResponse(
                status=response.status,
                headers=dict(response.headers),
                body=data,
                reason=response.reason or "",
            )

    async def request(
        self,
        route: Route,
        *,
        headers: Optional[Dict[str, str]] = None,
        form: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """Sends ``route`` and returns the parsed body.

        A form body is sent urlencoded, a ``json`` body as JSON. A success
        response without a JSON body yields an empty dict.

        Raises
        ------
        DiscordAPIRequestError
            Discord answered with a non-success status.
        aiohttp.ClientError
            The request could not be completed.
        """
        request_headers: Dict[str, str] = {"User-Agent": self.user_agent}
        if headers:
            request_headers.update(headers)

        body: Optional[str] = None
        if form is not None:
            request_headers["Content-Type"] = "application/x-www-form-urlencoded"
            body = to_form_urlencoded(form)
        elif json is not None:
            request_headers["Content-Type"] = "application/json"
            body = _to_json(json)

        response = await self._transport(route.method, route.url, request_headers, body)
        _log.debug("%s %s has returned %s", route.method, route.url, response.status)

        if response.ok:
            return _json_or_empty(response)

        data = _error_payload(response)
        message = (data.get("message") if data else None) or response.reason or "Unknown error"
        _log.debug("%s %s failed: %s", route.method, route.url, message)
        raise DiscordAPIRequestError(message, response.status, data, response=response)

    async def close(self) -> None:
        if self.__session is not None:
            await self.__session.close()
            self.__session = None
