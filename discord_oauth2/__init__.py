"""
Discord OAuth2 API Wrapper
~~~~~~~~~~~~~~~~~~~~~~~~~~

A typed async client for Discord's OAuth2 flows, with helpers for
permission bitmasks.

:copyright: (c) 2025 Mahirox36
:license: MIT, see LICENSE for more details.
"""

__title__ = "discord_oauth2"
__author__ = "Mahirox36"
__license__ = "MIT"
__copyright__ = "Copyright 2025-present Mahirox36"
__version__ = "1.0.0"

import logging

from .client import OAuth2Client
from .config import ClientConfig, load_config
from .errors import ConfigurationError, DiscordAPIRequestError, OAuth2Error, ValidationError
from .http import DISCORD_API_URL, DISCORD_OAUTH2_URLS, HTTPClient, Route, TransportResponse
from .permissions import (
    PermissionPresets,
    Permissions,
    calculate_permissions,
    combine,
    decompose,
    format_permissions,
    get_permission_flags,
    has_permission,
)
from .token import OAuth2Token
from .types.oauth2 import OAuth2Scope
from .utils import parse_scopes

__all__ = (
    "OAuth2Client",
    "OAuth2Token",
    "ClientConfig",
    "load_config",
    "OAuth2Error",
    "ConfigurationError",
    "ValidationError",
    "DiscordAPIRequestError",
    "HTTPClient",
    "Route",
    "TransportResponse",
    "DISCORD_API_URL",
    "DISCORD_OAUTH2_URLS",
    "Permissions",
    "PermissionPresets",
    "combine",
    "calculate_permissions",
    "has_permission",
    "decompose",
    "get_permission_flags",
    "format_permissions",
    "OAuth2Scope",
    "parse_scopes",
)

logging.getLogger(__name__).addHandler(logging.NullHandler())
