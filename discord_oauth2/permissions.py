# SPDX-License-Identifier: MIT

"""
discord_oauth2.permissions
~~~~~~~~~~~~~~~~~~~~~~~~~~

Bitwise permission flags used by bot authorization URLs and guild payloads.

Permission values cross the wire as decimal strings since they do not fit in
a 53 bit float. Python integers are arbitrary precision so everything here
works on plain :class:`int` and only formats to a string at the edge.

:copyright: (c) 2025 Mahirox36
:license: MIT, see LICENSE for more details.
"""

from __future__ import annotations

from enum import IntFlag
from typing import Iterable, List, Optional, Union

from .errors import ValidationError

__all__ = (
    "Permissions",
    "PermissionPresets",
    "PermissionValue",
    "combine",
    "calculate_permissions",
    "has_permission",
    "decompose",
    "get_permission_flags",
    "format_permissions",
)

PermissionValue = Union["Permissions", int, str]


class Permissions(IntFlag):
    """The closed set of permission bits.

    Bits 47 and 48 are unassigned. Members are declared in bit order and
    :func:`decompose` reports names in this declaration order.
    """

    CREATE_INSTANT_INVITE = 1 << 0
    KICK_MEMBERS = 1 << 1
    BAN_MEMBERS = 1 << 2
    ADMINISTRATOR = 1 << 3
    MANAGE_CHANNELS = 1 << 4
    MANAGE_GUILD = 1 << 5
    ADD_REACTIONS = 1 << 6
    VIEW_AUDIT_LOG = 1 << 7
    PRIORITY_SPEAKER = 1 << 8
    STREAM = 1 << 9
    VIEW_CHANNEL = 1 << 10
    SEND_MESSAGES = 1 << 11
    SEND_TTS_MESSAGES = 1 << 12
    MANAGE_MESSAGES = 1 << 13
    EMBED_LINKS = 1 << 14
    ATTACH_FILES = 1 << 15
    READ_MESSAGE_HISTORY = 1 << 16
    MENTION_EVERYONE = 1 << 17
    USE_EXTERNAL_EMOJIS = 1 << 18
    VIEW_GUILD_INSIGHTS = 1 << 19
    CONNECT = 1 << 20
    SPEAK = 1 << 21
    MUTE_MEMBERS = 1 << 22
    DEAFEN_MEMBERS = 1 << 23
    MOVE_MEMBERS = 1 << 24
    USE_VAD = 1 << 25
    CHANGE_NICKNAME = 1 << 26
    MANAGE_NICKNAMES = 1 << 27
    MANAGE_ROLES = 1 << 28
    MANAGE_WEBHOOKS = 1 << 29
    MANAGE_GUILD_EXPRESSIONS = 1 << 30
    USE_APPLICATION_COMMANDS = 1 << 31
    REQUEST_TO_SPEAK = 1 << 32
    MANAGE_EVENTS = 1 << 33
    MANAGE_THREADS = 1 << 34
    CREATE_PUBLIC_THREADS = 1 << 35
    CREATE_PRIVATE_THREADS = 1 << 36
    USE_EXTERNAL_STICKERS = 1 << 37
    SEND_MESSAGES_IN_THREADS = 1 << 38
    USE_EMBEDDED_ACTIVITIES = 1 << 39
    MODERATE_MEMBERS = 1 << 40
    VIEW_CREATOR_MONETIZATION_ANALYTICS = 1 << 41
    USE_SOUNDBOARD = 1 << 42
    CREATE_GUILD_EXPRESSIONS = 1 << 43
    CREATE_EVENTS = 1 << 44
    USE_EXTERNAL_SOUNDS = 1 << 45
    SEND_VOICE_MESSAGES = 1 << 46
    SEND_POLLS = 1 << 49
    USE_EXTERNAL_APPS = 1 << 50


def _to_int(value: PermissionValue) -> int:
    if isinstance(value, str):
        # plain ASCII digits only: int() would also take "_", whitespace and non-ASCII digits
        if not (value.isascii() and value.isdigit()):
            raise ValidationError(f"Invalid permission value: {value!r}")
        result = int(value, 10)
    elif isinstance(value, int):
        result = int(value)
    else:
        raise ValidationError(
            f"Permission value must be an int or a decimal string, not {value.__class__.__name__}"
        )

    if result < 0:
        raise ValidationError(f"Permission value cannot be negative: {result}")
    return result


def combine(flags: Iterable[PermissionValue]) -> int:
    """Returns the bitwise OR of ``flags``.

    An empty iterable combines to ``0``, which means no permissions.

    Parameters
    ----------
    flags: Iterable[Union[:class:`Permissions`, :class:`int`, :class:`str`]]
        The flags or raw permission values to merge.

    Raises
    ------
    ValidationError
        A value was negative or not a decimal integer.
    """
    combined = 0
    for flag in flags:
        combined |= _to_int(flag)
    return combined


def calculate_permissions(flags: Iterable[PermissionValue]) -> str:
    """Like :func:`combine` but returns the decimal string Discord expects.

    .. code-block:: python3

        perms = calculate_permissions([
            Permissions.SEND_MESSAGES,
            Permissions.EMBED_LINKS,
        ])
        # '18432'
    """
    return str(combine(flags))


def has_permission(permissions: PermissionValue, flag: PermissionValue) -> bool:
    """Checks whether every bit of ``flag`` is set in ``permissions``.

    This is a conjunction test: ``(permissions & flag) == flag``. Passing a
    combined value as ``flag`` requires *all* of its bits, not any of them.
    A ``flag`` of ``0`` is therefore always satisfied.
    """
    flag_value = _to_int(flag)
    return (_to_int(permissions) & flag_value) == flag_value


def decompose(permissions: PermissionValue) -> List[str]:
    """Returns the name of every defined flag fully present in ``permissions``.

    Names come back in declaration order. Bits with no defined flag are ignored.
    """
    value = _to_int(permissions)
    return [
        name
        for name, member in Permissions.__members__.items()
        if (value & member.value) == member.value
    ]


get_permission_flags = decompose


def format_permissions(
    permissions: Optional[Union[PermissionValue, Iterable[PermissionValue]]],
) -> Optional[str]:
    """Normalises a permissions argument into its query string form.

    Accepts a single value or an iterable of values. ``None`` passes through
    so the parameter can be left out of the URL.
    """
    if permissions is None:
        return None
    if isinstance(permissions, (int, str)):
        return str(_to_int(permissions))
    return calculate_permissions(permissions)


class PermissionPresets:
    """Common permission combinations, built from :class:`Permissions`."""

    NONE: int = combine(())
    ADMINISTRATOR: int = combine((Permissions.ADMINISTRATOR,))
    BASIC_TEXT: int = combine((
        Permissions.VIEW_CHANNEL,
        Permissions.SEND_MESSAGES,
        Permissions.READ_MESSAGE_HISTORY,
    ))
    BASIC_VOICE: int = combine((
        Permissions.VIEW_CHANNEL,
        Permissions.CONNECT,
        Permissions.SPEAK,
    ))
    MODERATOR: int = combine((
        Permissions.KICK_MEMBERS,
        Permissions.BAN_MEMBERS,
        Permissions.MANAGE_MESSAGES,
        Permissions.MODERATE_MEMBERS,
    ))
    TEXT_AND_EMBEDS: int = combine((
        Permissions.VIEW_CHANNEL,
        Permissions.SEND_MESSAGES,
        Permissions.EMBED_LINKS,
        Permissions.ATTACH_FILES,
        Permissions.READ_MESSAGE_HISTORY,
    ))
