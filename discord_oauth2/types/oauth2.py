# SPDX-License-Identifier: MIT

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, TypedDict
from typing_extensions import NotRequired

from .snowflake import Snowflake

ResponseType = Literal["code", "token"]
TokenTypeHint = Literal["access_token", "refresh_token"]
PromptType = Literal["consent", "none"]
# 0 = guild install, 1 = user install
IntegrationType = Literal[0, 1]


class Webhook(TypedDict):
    id: Snowflake
    application_id: Snowflake
    name: str
    url: str
    channel_id: Snowflake
    guild_id: Snowflake
    token: str
    type: int
    avatar: Optional[str]


class Role(TypedDict):
    id: Snowflake
    name: str
    color: int
    hoist: bool
    position: int
    permissions: str
    managed: bool
    mentionable: bool


class User(TypedDict):
    id: Snowflake
    username: str
    discriminator: str
    global_name: Optional[str]
    avatar: Optional[str]
    bot: NotRequired[bool]
    system: NotRequired[bool]
    mfa_enabled: NotRequired[bool]
    banner: NotRequired[Optional[str]]
    accent_color: NotRequired[Optional[int]]
    locale: NotRequired[str]
    verified: NotRequired[bool]
    email: NotRequired[Optional[str]]
    flags: NotRequired[int]
    premium_type: NotRequired[int]
    public_flags: NotRequired[int]


class Emoji(TypedDict):
    id: Optional[Snowflake]
    name: Optional[str]
    roles: NotRequired[List[Snowflake]]
    user: NotRequired[User]
    require_colons: NotRequired[bool]
    managed: NotRequired[bool]
    animated: NotRequired[bool]
    available: NotRequired[bool]


class PartialGuild(TypedDict):
    """Guild as returned by ``/users/@me/guilds``."""
    id: Snowflake
    name: str
    icon: Optional[str]
    owner: NotRequired[bool]
    permissions: NotRequired[str]
    features: List[str]
    banner: NotRequired[Optional[str]]
    approximate_member_count: NotRequired[int]
    approximate_presence_count: NotRequired[int]


class Guild(PartialGuild, total=False):
    """Guild as embedded in a bot authorization token response."""
    description: Optional[str]
    splash: Optional[str]
    discovery_splash: Optional[str]
    owner_id: Snowflake
    afk_channel_id: Optional[Snowflake]
    afk_timeout: int
    verification_level: int
    default_message_notifications: int
    explicit_content_filter: int
    roles: List[Role]
    emojis: List[Emoji]
    mfa_level: int
    application_id: Optional[Snowflake]
    system_channel_id: Optional[Snowflake]
    system_channel_flags: int
    rules_channel_id: Optional[Snowflake]
    max_members: int
    vanity_url_code: Optional[str]
    premium_tier: int
    preferred_locale: str
    public_updates_channel_id: Optional[Snowflake]
    safety_alerts_channel_id: Optional[Snowflake]


class GuildMember(TypedDict):
    user: NotRequired[User]
    roles: List[Snowflake]
    joined_at: str
    deaf: bool
    mute: bool
    flags: int
    pending: NotRequired[bool]
    nick: NotRequired[Optional[str]]


class Connection(TypedDict):
    id: str
    name: str
    type: str
    revoked: NotRequired[bool]
    integrations: NotRequired[List[Any]]
    verified: bool
    friend_sync: bool
    show_activity: bool
    two_way_link: bool
    visibility: int


class PartialApplication(TypedDict):
    id: Snowflake
    name: str
    icon: Optional[str]
    description: str
    hook: NotRequired[bool]
    bot_public: NotRequired[bool]
    bot_require_code_grant: NotRequired[bool]
    verify_key: str


class AuthorizationInformation(TypedDict):
    application: PartialApplication
    scopes: List[str]
    expires: str
    user: NotRequired[User]


class Token(TypedDict):
    access_token: str
    token_type: str
    expires_in: int
    scope: str
    refresh_token: NotRequired[str]
    # present only when ``webhook.incoming`` was granted
    webhook: NotRequired[Webhook]
    # present only when ``bot`` was granted alongside other scopes
    guild: NotRequired[Guild]


class AddGuildMember(TypedDict):
    access_token: str
    nick: NotRequired[str]
    roles: NotRequired[List[Snowflake]]
    mute: NotRequired[bool]
    deaf: NotRequired[bool]


class APIError(TypedDict):
    message: str
    code: NotRequired[int]
    errors: NotRequired[Dict[str, Any]]


# OAuth2 Scopes
class OAuth2Scope:
    """OAuth2 scopes that can be requested"""
    ACTIVITIES_READ = "activities.read"
    ACTIVITIES_WRITE = "activities.write"
    APPLICATIONS_BUILDS_READ = "applications.builds.read"
    APPLICATIONS_BUILDS_UPLOAD = "applications.builds.upload"
    APPLICATIONS_COMMANDS = "applications.commands"
    APPLICATIONS_COMMANDS_UPDATE = "applications.commands.update"
    APPLICATIONS_COMMANDS_PERMISSIONS_UPDATE = "applications.commands.permissions.update"
    APPLICATIONS_ENTITLEMENTS = "applications.entitlements"
    APPLICATIONS_STORE_UPDATE = "applications.store.update"
    BOT = "bot"
    CONNECTIONS = "connections"
    DM_CHANNELS_READ = "dm_channels.read"
    EMAIL = "email"
    GDM_JOIN = "gdm.join"
    GUILDS = "guilds"
    GUILDS_JOIN = "guilds.join"
    GUILDS_MEMBERS_READ = "guilds.members.read"
    IDENTIFY = "identify"
    MESSAGES_READ = "messages.read"
    RELATIONSHIPS_READ = "relationships.read"
    ROLE_CONNECTIONS_WRITE = "role_connections.write"
    RPC = "rpc"
    RPC_ACTIVITIES_WRITE = "rpc.activities.write"
    RPC_NOTIFICATIONS_READ = "rpc.notifications.read"
    RPC_VOICE_READ = "rpc.voice.read"
    RPC_VOICE_WRITE = "rpc.voice.write"
    VOICE = "voice"
    WEBHOOK_INCOMING = "webhook.incoming"
