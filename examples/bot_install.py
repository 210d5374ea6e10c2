import discord_oauth2
from discord_oauth2 import Permissions, PermissionPresets

client = discord_oauth2.OAuth2Client(
    "123456789012345678",
    "client-secret",
    "https://example.com/callback",
)

permissions = discord_oauth2.combine([PermissionPresets.TEXT_AND_EMBEDS, Permissions.USE_EXTERNAL_APPS])
print(client.get_bot_install_url(permissions=permissions))
print(discord_oauth2.decompose(permissions))
