# SPDX-License-Identifier: MIT

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, List, Optional

from . import utils
from .types.oauth2 import Guild, Token, Webhook

__all__ = ("OAuth2Token",)


class OAuth2Token:
    """Represents an access token response.

    Which optional fields are present depends on what Discord granted, so
    :attr:`refresh_token`, :attr:`webhook` and :attr:`guild` can be ``None``
    regardless of the scopes that were requested.

    Attributes
    -----------
    expires_at: Optional[:class:`datetime.datetime`]
        When the token expires, counted from the moment the response was received.
    """

    __slots__ = ("_token_data", "expires_at")

    def __init__(self, token_data: Token) -> None:
        self._token_data: Token = token_data
        self.expires_at: Optional[datetime] = None

        expires_in = token_data.get("expires_in")
        if expires_in is not None:
            self.expires_at = utils.utcnow() + timedelta(seconds=expires_in)

    def __repr__(self) -> str:
        return f"<OAuth2Token token_type={self.token_type!r} scope={self.scope!r} expires_at={self.expires_at!r}>"

    @property
    def access_token(self) -> str:
        return self._token_data["access_token"]

    @property
    def token_type(self) -> str:
        return self._token_data.get("token_type") or "Bearer"

    @property
    def expires_in(self) -> Optional[int]:
        return self._token_data.get("expires_in")

    @property
    def scope(self) -> str:
        return self._token_data.get("scope", "")

    @property
    def scopes(self) -> List[str]:
        """List[:class:`str`]: The granted scopes, parsed from :attr:`scope`."""
        return utils.parse_scopes(self.scope)

    @property
    def refresh_token(self) -> Optional[str]:
        return self._token_data.get("refresh_token")

    @property
    def webhook(self) -> Optional[Webhook]:
        """Optional[:class:`dict`]: The created webhook, sent when ``webhook.incoming`` was granted."""
        return self._token_data.get("webhook")

    @property
    def guild(self) -> Optional[Guild]:
        """Optional[:class:`dict`]: The guild the bot joined, sent when ``bot`` was granted with other scopes."""
        return self._token_data.get("guild")

    @property
    def expired(self) -> bool:
        if self.expires_at is None:
            return False
        return utils.utcnow() >= self.expires_at

    def get_auth_header(self) -> Dict[str, str]:
        return {"Authorization": f"{self.token_type} {self.access_token}"}

    def to_dict(self) -> Token:
        return self._token_data
