import logging
import secrets

from aiohttp import web

import discord_oauth2
from discord_oauth2 import OAuth2Scope

logging.basicConfig(level=logging.DEBUG)

# reads DISCORD_CLIENT_ID, DISCORD_CLIENT_SECRET and DISCORD_REDIRECT_URI
# (redirect to http://localhost:8080/callback)
client = discord_oauth2.OAuth2Client.from_env()
states = set()


async def login(request: web.Request) -> web.Response:
    state = secrets.token_urlsafe(16)
    states.add(state)
    url = client.get_authorize_url([OAuth2Scope.IDENTIFY, OAuth2Scope.GUILDS], state=state)
    raise web.HTTPFound(url)


async def callback(request: web.Request) -> web.Response:
    state = request.query.get("state", "")
    if state not in states:
        raise web.HTTPBadRequest(text="Unknown state")
    states.discard(state)

    token = await client.exchange_code(request.query.get("code", ""))
    user = await client.get_user(token.access_token)
    guilds = await client.get_user_guilds(token.access_token)

    admin_of = [
        guild["name"]
        for guild in guilds
        if discord_oauth2.has_permission(guild.get("permissions", "0"), discord_oauth2.Permissions.ADMINISTRATOR)
    ]
    return web.json_response({"user": user["username"], "admin_of": admin_of, "scopes": token.scopes})


async def on_cleanup(app: web.Application) -> None:
    await client.close()


app = web.Application()
app.add_routes([web.get("/", login), web.get("/callback", callback)])
app.on_cleanup.append(on_cleanup)

web.run_app(app, port=8080)
