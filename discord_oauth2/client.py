# SPDX-License-Identifier: MIT

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Type, Union

from aiohttp import BaseConnector, BasicAuth

from .config import load_config
from .errors import ConfigurationError, ValidationError
from .http import DISCORD_API_URL, DISCORD_OAUTH2_URLS, HTTPClient, Route, Transport
from .permissions import PermissionValue, format_permissions
from .token import OAuth2Token
from .types.oauth2 import (
    AuthorizationInformation,
    Connection,
    GuildMember,
    IntegrationType,
    PartialApplication,
    PartialGuild,
    PromptType,
    ResponseType,
    TokenTypeHint,
    User,
)
from .types.snowflake import Snowflake
from .utils import build_url, encode_basic_auth, parse_scopes, scopes_to_string

if TYPE_CHECKING:
    from types import TracebackType

    from typing_extensions import Self

__all__ = ("OAuth2Client",)

_log = logging.getLogger(__name__)

Permissionish = Optional[Union[PermissionValue, Iterable[PermissionValue]]]


def _bearer(access_token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}


def _scope_list(scopes: Optional[Iterable[str]]) -> List[str]:
    # a bare string would otherwise be split into characters
    if isinstance(scopes, str):
        raise ValidationError("scopes must be a list of scope strings")
    return list(scopes or ())


class OAuth2Client:
    """Handles the OAuth2 flows and the user-scoped API requests.

    Every method validates its arguments before any request is sent, and
    nothing is cached or retried: each call is exactly one round trip.

    Parameters
    -----------
    client_id: :class:`str`
        The client ID provided by Discord
    client_secret: :class:`str`
        The client secret provided by Discord
    redirect_uri: :class:`str`
        The redirect URI for the OAuth2 flow
    api_endpoint: Optional[:class:`str`]
        The versioned REST root. Defaults to ``https://discord.com/api/v10``.
    bot_token: Optional[:class:`str`]
        Bot token used by :meth:`add_user_to_guild`. Can be set later
        with :meth:`set_bot_token`.
    connector: Optional[:class:`aiohttp.BaseConnector`]
        The connector to use for the client session.
    proxy: Optional[:class:`str`]
        Optional proxy URL to use for requests.
    proxy_auth: Optional[:class:`aiohttp.BasicAuth`]
        Optional proxy authentication. Deprecated by aiohttp 3.14, prefer ``proxy_headers``.
    proxy_headers: Optional[:class:`dict`]
        Headers sent to the proxy, e.g. ``Proxy-Authorization``.
    transport: Optional[Callable]
        Replaces the aiohttp transport, see :class:`HTTPClient`.

    Raises
    -------
    ConfigurationError
        ``client_id``, ``client_secret`` or ``redirect_uri`` is missing.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        *,
        api_endpoint: Optional[str] = None,
        bot_token: Optional[str] = None,
        connector: Optional[BaseConnector] = None,
        proxy: Optional[str] = None,
        proxy_auth: Optional[BasicAuth] = None,
        proxy_headers: Optional[Dict[str, str]] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        missing = [
            name
            for name, value in (
                ("client_id", client_id),
                ("client_secret", client_secret),
                ("redirect_uri", redirect_uri),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")

        self._client_id: str = client_id
        self._client_secret: str = client_secret
        self._redirect_uri: str = redirect_uri
        self._api_endpoint: str = (api_endpoint or DISCORD_API_URL).rstrip("/")
        self._bot_token: Optional[str] = None

        if bot_token is not None:
            self.set_bot_token(bot_token)

        self.http = HTTPClient(
            connector=connector,
            proxy=proxy,
            proxy_auth=proxy_auth,
            proxy_headers=proxy_headers,
            transport=transport,
        )

    @classmethod
    def from_env(cls, prefix: str = "DISCORD_", **kwargs: Any) -> Self:
        """Builds a client from environment variables, see :func:`load_config`."""
        config = load_config(prefix)
        return cls(
            config.client_id,
            config.client_secret,
            config.redirect_uri,
            api_endpoint=config.api_endpoint,
            bot_token=config.bot_token,
            **kwargs,
        )

    def __repr__(self) -> str:
        return f"<OAuth2Client client_id={self._client_id!r} redirect_uri={self._redirect_uri!r}>"

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Closes the underlying HTTP session."""
        await self.http.close()

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def redirect_uri(self) -> str:
        return self._redirect_uri

    @property
    def api_endpoint(self) -> str:
        return self._api_endpoint

    @property
    def bot_token(self) -> Optional[str]:
        return self._bot_token

    def set_bot_token(self, token: str) -> None:
        """Sets the bot token used for privileged requests.

        Swapping the token while a privileged request is in flight is the
        caller's problem; nothing here serialises it.

        Raises
        -------
        ConfigurationError
            ``token`` is empty.
        """
        if not token:
            raise ConfigurationError("Bot token cannot be empty")
        self._bot_token = token

    def _basic_auth(self) -> Dict[str, str]:
        return {"Authorization": encode_basic_auth(self._client_id, self._client_secret)}

    def get_authorize_url(
        self,
        scopes: Iterable[str],
        *,
        state: Optional[str] = None,
        response_type: ResponseType = "code",
        prompt: Optional[PromptType] = None,
        integration_type: Optional[IntegrationType] = None,
        guild_id: Optional[Snowflake] = None,
        disable_guild_select: Optional[bool] = None,
        permissions: Permissionish = None,
    ) -> str:
        """Gets the OAuth2 authorization URL

        Parameters
        -----------
        scopes: Iterable[:class:`str`]
            The scopes to request. At least one is required.
        state: Optional[:class:`str`]
            The state to include in the auth request
        response_type: :class:`str`
            ``"code"`` or ``"token"``.
        prompt: Optional[:class:`str`]
            ``"consent"`` or ``"none"``.
        integration_type: Optional[:class:`int`]
            ``0`` for a guild install, ``1`` for a user install.
        guild_id: Optional[:class:`Snowflake`]
            The guild to pre-select.
        disable_guild_select: Optional[:class:`bool`]
            Whether the user can change the pre-selected guild.
        permissions: Optional[Union[:class:`int`, :class:`str`, Iterable[:class:`Permissions`]]]
            Bot permissions, sent as a decimal string.

        Raises
        -------
        ValidationError
            No scopes were given, or ``scopes`` is a plain string.
        """
        scopes = _scope_list(scopes)
        if not scopes:
            raise ValidationError("At least one scope is required")

        params = {
            "client_id": self._client_id,
            "redirect_uri": self._redirect_uri,
            "response_type": response_type or "code",
            "scope": scopes_to_string(scopes),
            "state": state,
            "prompt": prompt,
            "integration_type": integration_type,
            "guild_id": guild_id,
            "disable_guild_select": disable_guild_select,
            "permissions": format_permissions(permissions),
        }
        return build_url(DISCORD_OAUTH2_URLS["AUTHORIZE"], params)

    def get_bot_install_url(
        self,
        *,
        permissions: Permissionish = None,
        scopes: Optional[Iterable[str]] = None,
        guild_id: Optional[Snowflake] = None,
        disable_guild_select: Optional[bool] = None,
        state: Optional[str] = None,
    ) -> str:
        """Gets the URL that adds the bot to a guild.

        The ``bot`` scope is always requested first. When extra ``scopes``
        are given the flow becomes a code grant, so ``redirect_uri`` and
        ``response_type=code`` are added.
        """
        extra = _scope_list(scopes)

        params: Dict[str, Any] = {
            "client_id": self._client_id,
            "scope": scopes_to_string(["bot", *extra]),
            "permissions": format_permissions(permissions),
            "guild_id": guild_id,
            "disable_guild_select": disable_guild_select,
            "state": state,
        }
        if extra:
            params["redirect_uri"] = self._redirect_uri
            params["response_type"] = "code"

        return build_url(DISCORD_OAUTH2_URLS["AUTHORIZE"], params)

    async def exchange_code(self, code: str) -> OAuth2Token:
        """Gets an access token using an authorization code

        Parameters
        -----------
        code: :class:`str`
            The authorization code from OAuth2 redirect
        """
        if not code:
            raise ValidationError("Authorization code is required")

        payload = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self._redirect_uri,
        }
        route = Route.absolute("POST", DISCORD_OAUTH2_URLS["TOKEN"])
        data = await self.http.request(route, headers=self._basic_auth(), form=payload)
        return OAuth2Token(data)

    async def refresh_token(self, refresh_token: str) -> OAuth2Token:
        """Refreshes an access token using a refresh token

        Parameters
        -----------
        refresh_token: :class:`str`
            The refresh token to use
        """
        if not refresh_token:
            raise ValidationError("Refresh token is required")

        payload = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        route = Route.absolute("POST", DISCORD_OAUTH2_URLS["TOKEN"])
        data = await self.http.request(route, headers=self._basic_auth(), form=payload)
        return OAuth2Token(data)

    async def get_client_credentials(self, scopes: Optional[Iterable[str]] = None) -> OAuth2Token:
        """Gets an app-only token for the application owner.

        Parameters
        -----------
        scopes: Optional[Iterable[:class:`str`]]
            The scopes to request. Left to Discord's default when omitted.
        """
        payload = {
            "grant_type": "client_credentials",
            "scope": scopes_to_string(_scope_list(scopes)) if scopes is not None else None,
        }
        route = Route.absolute("POST", DISCORD_OAUTH2_URLS["TOKEN"])
        data = await self.http.request(route, headers=self._basic_auth(), form=payload)
        return OAuth2Token(data)

    async def revoke_token(self, token: str, token_type_hint: Optional[TokenTypeHint] = None) -> None:
        """Revokes an access token or refresh token

        Parameters
        -----------
        token: :class:`str`
            The token to revoke
        token_type_hint: Optional[:class:`str`]
            ``"access_token"`` or ``"refresh_token"``.
        """
        if not token:
            raise ValidationError("Token is required")

        payload = {
            "token": token,
            "token_type_hint": token_type_hint,
        }
        route = Route.absolute("POST", DISCORD_OAUTH2_URLS["TOKEN_REVOKE"])
        await self.http.request(route, headers=self._basic_auth(), form=payload)

    async def add_user_to_guild(
        self,
        guild_id: Snowflake,
        user_id: Snowflake,
        access_token: str,
        *,
        nick: Optional[str] = None,
        roles: Optional[List[Snowflake]] = None,
        mute: Optional[bool] = None,
        deaf: Optional[bool] = None,
    ) -> Optional[GuildMember]:
        """Adds the user to a guild using the bot token.

        The access token must carry the ``guilds.join`` scope and the bot
        must already be in the guild.

        Parameters
        -----------
        guild_id: :class:`Snowflake`
            The ID of the guild to join
        user_id: :class:`Snowflake`
            The ID of the user to add
        access_token: :class:`str`
            The user's access token
        nick: Optional[:class:`str`]
            Nickname to give the member.
        roles: Optional[List[:class:`Snowflake`]]
            Role IDs to grant.
        mute: Optional[:class:`bool`]
            Whether the member is muted in voice channels.
        deaf: Optional[:class:`bool`]
            Whether the member is deafened in voice channels.

        Returns
        --------
        Optional[:class:`dict`]
            The new member, or ``None`` if the user was already a member.

        Raises
        -------
        ValidationError
            An argument is missing or no bot token is set.
        """
        if not guild_id or not user_id or not access_token:
            raise ValidationError("guild_id, user_id and access_token are required")
        if not self._bot_token:
            raise ValidationError("A bot token is required to add members to a guild")

        payload: Dict[str, Any] = {"access_token": access_token}
        if nick is not None:
            payload["nick"] = nick
        if roles is not None:
            payload["roles"] = [str(role) for role in roles]
        if mute is not None:
            payload["mute"] = mute
        if deaf is not None:
            payload["deaf"] = deaf

        route = Route(
            "PUT",
            "/guilds/{guild_id}/members/{user_id}",
            base=self._api_endpoint,
            guild_id=str(guild_id),
            user_id=str(user_id),
        )
        data = await self.http.request(
            route,
            headers={"Authorization": f"Bot {self._bot_token}"},
            json=payload,
        )
        if not data:
            _log.debug("User %s is already a member of guild %s", user_id, guild_id)
            return None
        return data

    async def get_current_bot_application(self) -> PartialApplication:
        """Fetches the application the credentials belong to."""
        route = Route("GET", "/oauth2/applications/@me", base=self._api_endpoint)
        return await self.http.request(route, headers=self._basic_auth())

    async def get_current_authorization_info(self, access_token: str) -> AuthorizationInformation:
        """Fetches what an access token is authorized for.

        Parameters
        -----------
        access_token: :class:`str`
            The user's access token
        """
        if not access_token:
            raise ValidationError("Access token is required")

        route = Route("GET", "/oauth2/@me", base=self._api_endpoint)
        return await self.http.request(route, headers=_bearer(access_token))

    async def get_user(self, access_token: str) -> User:
        """Fetches the authenticated user's info. Needs the ``identify`` scope."""
        if not access_token:
            raise ValidationError("Access token is required")

        route = Route("GET", "/users/@me", base=self._api_endpoint)
        return await self.http.request(route, headers=_bearer(access_token))

    async def get_user_guilds(self, access_token: str) -> List[PartialGuild]:
        """Fetches the authenticated user's guilds. Needs the ``guilds`` scope."""
        if not access_token:
            raise ValidationError("Access token is required")

        route = Route("GET", "/users/@me/guilds", base=self._api_endpoint)
        return await self.http.request(route, headers=_bearer(access_token))

    async def get_user_connections(self, access_token: str) -> List[Connection]:
        """Fetches the authenticated user's connections. Needs the ``connections`` scope."""
        if not access_token:
            raise ValidationError("Access token is required")

        route = Route("GET", "/users/@me/connections", base=self._api_endpoint)
        return await self.http.request(route, headers=_bearer(access_token))

    @staticmethod
    def parse_scopes(scope_string: str) -> List[str]:
        """Splits a space separated scope string into a list."""
        return parse_scopes(scope_string)
