# SPDX-License-Identifier: MIT

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

__all__ = (
    "ClientConfig",
    "load_config",
)


@dataclass(frozen=True)
class ClientConfig:
    client_id: str
    client_secret: str
    redirect_uri: str
    api_endpoint: Optional[str] = None
    bot_token: Optional[str] = None


def load_config(prefix: str = "DISCORD_", *, dotenv_path: Optional[str] = None) -> ClientConfig:
    """Reads application credentials from the environment.

    A ``.env`` file is loaded first without overriding variables that are
    already set. Missing values come back as empty strings and are rejected
    by :class:`OAuth2Client`, not here.

    Variables read: ``{prefix}CLIENT_ID``, ``{prefix}CLIENT_SECRET``,
    ``{prefix}REDIRECT_URI``, ``{prefix}API_ENDPOINT``, ``{prefix}BOT_TOKEN``.
    """
    load_dotenv(dotenv_path)

    return ClientConfig(
        client_id=os.environ.get(f"{prefix}CLIENT_ID", ""),
        client_secret=os.environ.get(f"{prefix}CLIENT_SECRET", ""),
        redirect_uri=os.environ.get(f"{prefix}REDIRECT_URI", ""),
        api_endpoint=os.environ.get(f"{prefix}API_ENDPOINT") or None,
        bot_token=os.environ.get(f"{prefix}BOT_TOKEN") or None,
    )
