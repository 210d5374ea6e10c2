# SPDX-License-Identifier: MIT

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .http import TransportResponse
    from .types.oauth2 import APIError

__all__ = (
    "OAuth2Error",
    "ConfigurationError",
    "ValidationError",
    "DiscordAPIRequestError",
)


class OAuth2Error(Exception):
    """Base exception class for discord_oauth2.

    Ideally speaking, this could be caught to handle any exceptions raised from this library.
    """

    pass


class ConfigurationError(OAuth2Error):
    """Exception that's raised when the client is constructed, or a credential
    is set, with a missing or empty value.

    Raised before any request is made.
    """

    pass


class ValidationError(OAuth2Error):
    """Exception that's raised when an operation is called with a missing
    required argument, or a privileged operation is called without a bot token.

    Raised before any request is made.
    """

    pass


class DiscordAPIRequestError(OAuth2Error):
    """Exception that's raised when Discord answers with a non-success status.

    Attributes
    ----------
    response: Optional[:class:`TransportResponse`]
        The raw response that failed.
    status: :class:`int`
        The HTTP status code of the response.
    message: :class:`str`
        The error message from Discord, falling back to the status reason.
    code: Optional[:class:`int`]
        The Discord specific error code, if any.
    errors: Optional[:class:`dict`]
        The field-level error map, if any.
    """

    def __init__(
        self,
        message: str,
        status: int,
        data: Optional[APIError] = None,
        *,
        response: Optional[TransportResponse] = None,
    ) -> None:
        self.message: str = message
        self.status: int = status
        self.response: Optional[TransportResponse] = response
        self.code: Optional[int] = None
        self.errors: Optional[Dict[str, Any]] = None

        if data is not None:
            self.code = data.get("code")
            self.errors = data.get("errors")

        fmt = "{0} (status code: {1})"
        if self.code is not None:
            fmt += " (error code: {2})"

        super().__init__(fmt.format(self.message, self.status, self.code))
