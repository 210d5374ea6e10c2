import asyncio
import sys

import discord_oauth2


async def main(guild_id: str, user_access_token: str) -> None:
    async with discord_oauth2.OAuth2Client.from_env() as client:
        # needs DISCORD_BOT_TOKEN; the access token must carry guilds.join
        user = await client.get_user(user_access_token)
        member = await client.add_user_to_guild(guild_id, user["id"], user_access_token, nick="Newcomer")
        if member is None:
            print(f"{user['username']} is already a member")
        else:
            print(f"Added {user['username']}")


asyncio.run(main(sys.argv[1], sys.argv[2]))
