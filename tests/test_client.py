# SPDX-License-Identifier: MIT

import base64
import unittest
from urllib.parse import parse_qs, urlsplit

import aiohttp
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from discord_oauth2 import (
    DISCORD_OAUTH2_URLS,
    ConfigurationError,
    DiscordAPIRequestError,
    OAuth2Client,
    OAuth2Token,
    Permissions,
    TransportResponse,
    ValidationError,
)

from .transport import ForbiddenTransport, RecordingTransport, empty_response, json_response

console = Console()

CLIENT_ID = "123456789012345678"
CLIENT_SECRET = "s3cr3t"
REDIRECT_URI = "https://example.com/callback"

TOKEN_PAYLOAD = {
    "access_token": "6qrZcUqja7812RVdnEKjpzOL4CvHBFG",
    "token_type": "Bearer",
    "expires_in": 604800,
    "refresh_token": "D43f5y0ahjqew82jZ4NViEr2YafMKhue",
    "scope": "identify email",
}


def query_of(url):
    return {key: values[0] for key, values in parse_qs(urlsplit(url).query).items()}


def make_client(transport=None, **kwargs):
    return OAuth2Client(
        CLIENT_ID,
        CLIENT_SECRET,
        REDIRECT_URI,
        transport=transport or ForbiddenTransport(),
        **kwargs,
    )


class ClientConstructionTestSuite(unittest.TestCase):
    """Construction, credentials and URL builders."""

    def setUp(self):
        console.print(Panel(Text(f"Running: {self._testMethodName}", style="bold cyan")))

    def test_missing_configuration_raises(self):
        for args in (
            ("", CLIENT_SECRET, REDIRECT_URI),
            (CLIENT_ID, "", REDIRECT_URI),
            (CLIENT_ID, CLIENT_SECRET, ""),
            (CLIENT_ID, CLIENT_SECRET, None),
        ):
            with self.assertRaises(ConfigurationError):
                OAuth2Client(*args, transport=ForbiddenTransport())

    def test_defaults(self):
        client = make_client()
        self.assertEqual(client.client_id, CLIENT_ID)
        self.assertEqual(client.redirect_uri, REDIRECT_URI)
        self.assertEqual(client.api_endpoint, "https://discord.com/api/v10")
        self.assertIsNone(client.bot_token)

    def test_custom_api_endpoint(self):
        client = make_client(api_endpoint="https://canary.discord.com/api/v9/")
        self.assertEqual(client.api_endpoint, "https://canary.discord.com/api/v9")

    def test_bot_token_setter(self):
        client = make_client()
        client.set_bot_token("bot-token")
        self.assertEqual(client.bot_token, "bot-token")
        with self.assertRaises(ConfigurationError):
            client.set_bot_token("")
        self.assertEqual(client.bot_token, "bot-token")

    def test_empty_bot_token_in_constructor(self):
        with self.assertRaises(ConfigurationError):
            make_client(bot_token="")

    def test_authorize_url_requires_scopes(self):
        client = make_client()
        with self.assertRaises(ValidationError):
            client.get_authorize_url([])

    def test_scope_string_is_rejected(self):
        client = make_client()
        with self.assertRaises(ValidationError):
            client.get_authorize_url("identify")
        with self.assertRaises(ValidationError):
            client.get_bot_install_url(scopes="applications.commands")

    def test_authorize_url(self):
        client = make_client()
        url = client.get_authorize_url(["identify", "email"], state="xyz")
        self.assertTrue(url.startswith(DISCORD_OAUTH2_URLS["AUTHORIZE"] + "?"))
        self.assertEqual(
            query_of(url),
            {
                "client_id": CLIENT_ID,
                "redirect_uri": REDIRECT_URI,
                "response_type": "code",
                "scope": "identify email",
                "state": "xyz",
            },
        )

    def test_authorize_url_optional_parameters(self):
        client = make_client()
        url = client.get_authorize_url(
            ["bot", "applications.commands"],
            response_type="token",
            prompt="none",
            integration_type=0,
            guild_id=41771983423143937,
            disable_guild_select=True,
            permissions=[Permissions.ADMINISTRATOR, Permissions.USE_EXTERNAL_APPS],
        )
        query = query_of(url)
        self.assertEqual(query["response_type"], "token")
        self.assertEqual(query["prompt"], "none")
        self.assertEqual(query["integration_type"], "0")
        self.assertEqual(query["guild_id"], "41771983423143937")
        self.assertEqual(query["disable_guild_select"], "true")
        self.assertEqual(query["permissions"], str((1 << 50) | 8))

    def test_bot_install_url_defaults(self):
        client = make_client()
        query = query_of(client.get_bot_install_url())
        self.assertEqual(query, {"client_id": CLIENT_ID, "scope": "bot"})

    def test_bot_install_url_with_extra_scopes(self):
        client = make_client()
        url = client.get_bot_install_url(
            permissions="8",
            scopes=["applications.commands"],
            guild_id="123",
            state="abc",
        )
        query = query_of(url)
        self.assertEqual(query["scope"], "bot applications.commands")
        self.assertEqual(query["permissions"], "8")
        self.assertEqual(query["redirect_uri"], REDIRECT_URI)
        self.assertEqual(query["response_type"], "code")
        self.assertEqual(query["guild_id"], "123")
        self.assertEqual(query["state"], "abc")

    def test_parse_scopes(self):
        self.assertEqual(OAuth2Client.parse_scopes("identify email"), ["identify", "email"])
        self.assertEqual(OAuth2Client.parse_scopes(""), [])
        self.assertEqual(OAuth2Client.parse_scopes("  guilds   guilds.join "), ["guilds", "guilds.join"])


class ClientRequestTestSuite(unittest.IsolatedAsyncioTestCase):
    """Request building and response mapping through a recording transport."""

    def setUp(self):
        console.print(Panel(Text(f"Running: {self._testMethodName}", style="bold cyan")))

    def assertBasicAuth(self, request):
        expected = base64.b64encode(f"{CLIENT_ID}:{CLIENT_SECRET}".encode()).decode()
        self.assertEqual(request.headers["Authorization"], f"Basic {expected}")

    async def test_exchange_code_requires_code(self):
        client = make_client()
        with self.assertRaises(ValidationError):
            await client.exchange_code("")

    async def test_exchange_code(self):
        transport = RecordingTransport(json_response(200, TOKEN_PAYLOAD))
        client = make_client(transport)

        token = await client.exchange_code("auth-code")

        self.assertEqual(len(transport.requests), 1)
        request = transport.requests[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.url, DISCORD_OAUTH2_URLS["TOKEN"])
        self.assertEqual(request.headers["Content-Type"], "application/x-www-form-urlencoded")
        self.assertIn("User-Agent", request.headers)
        self.assertBasicAuth(request)
        self.assertEqual(
            request.form(),
            {"grant_type": "authorization_code", "code": "auth-code", "redirect_uri": REDIRECT_URI},
        )

        self.assertIsInstance(token, OAuth2Token)
        self.assertEqual(token.access_token, TOKEN_PAYLOAD["access_token"])
        self.assertEqual(token.refresh_token, TOKEN_PAYLOAD["refresh_token"])
        self.assertEqual(token.expires_in, 604800)
        self.assertEqual(token.scopes, ["identify", "email"])
        self.assertIsNone(token.webhook)
        self.assertIsNone(token.guild)

    async def test_exchange_code_with_webhook_and_guild(self):
        payload = dict(
            TOKEN_PAYLOAD,
            scope="bot webhook.incoming",
            webhook={"id": "1", "name": "hook", "url": "https://discord.com/api/webhooks/1/x"},
            guild={"id": "2", "name": "Guild", "icon": None, "features": []},
        )
        client = make_client(RecordingTransport(json_response(200, payload)))

        token = await client.exchange_code("auth-code")

        self.assertEqual(token.webhook["id"], "1")
        self.assertEqual(token.guild["name"], "Guild")

    async def test_refresh_token(self):
        transport = RecordingTransport(json_response(200, TOKEN_PAYLOAD))
        client = make_client(transport)

        token = await client.refresh_token("refresh-me")

        request = transport.requests[0]
        self.assertBasicAuth(request)
        self.assertEqual(request.form(), {"grant_type": "refresh_token", "refresh_token": "refresh-me"})
        self.assertEqual(token.refresh_token, TOKEN_PAYLOAD["refresh_token"])

    async def test_refresh_token_requires_token(self):
        client = make_client()
        with self.assertRaises(ValidationError):
            await client.refresh_token("")

    async def test_refresh_token_error(self):
        transport = RecordingTransport(json_response(400, {"message": "invalid_grant", "code": 5}, "Bad Request"))
        client = make_client(transport)

        with self.assertRaises(DiscordAPIRequestError) as cm:
            await client.refresh_token("stale")

        error = cm.exception
        self.assertEqual(error.status, 400)
        self.assertEqual(error.message, "invalid_grant")
        self.assertEqual(error.code, 5)
        self.assertIsNone(error.errors)

    async def test_error_with_field_errors(self):
        payload = {"message": "Invalid Form Body", "code": 50035, "errors": {"code": {"_errors": []}}}
        client = make_client(RecordingTransport(json_response(400, payload)))

        with self.assertRaises(DiscordAPIRequestError) as cm:
            await client.exchange_code("bad")

        self.assertEqual(cm.exception.errors, {"code": {"_errors": []}})

    async def test_malformed_error_body_falls_back_to_reason(self):
        response = TransportResponse(
            status=401,
            headers={"content-type": "application/json"},
            body=b"<html>nope</html>",
            reason="Unauthorized",
        )
        client = make_client(RecordingTransport(response))

        with self.assertRaises(DiscordAPIRequestError) as cm:
            await client.get_user("token")

        self.assertEqual(cm.exception.status, 401)
        self.assertEqual(cm.exception.message, "Unauthorized")
        self.assertIsNone(cm.exception.code)

    async def test_error_without_reason_is_unknown(self):
        client = make_client(RecordingTransport(TransportResponse(status=500)))

        with self.assertRaises(DiscordAPIRequestError) as cm:
            await client.get_user("token")

        self.assertEqual(cm.exception.message, "Unknown error")

    async def test_client_credentials(self):
        transport = RecordingTransport(
            json_response(200, {"access_token": "app", "token_type": "Bearer", "expires_in": 10, "scope": "identify"}),
            json_response(200, {"access_token": "app", "token_type": "Bearer", "expires_in": 10, "scope": ""}),
        )
        client = make_client(transport)

        token = await client.get_client_credentials(["identify", "applications.commands.update"])
        await client.get_client_credentials()

        first, second = transport.requests
        self.assertBasicAuth(first)
        self.assertEqual(
            first.form(),
            {"grant_type": "client_credentials", "scope": "identify applications.commands.update"},
        )
        self.assertEqual(second.form(), {"grant_type": "client_credentials"})
        self.assertIsNone(token.refresh_token)

    async def test_client_credentials_rejects_scope_string(self):
        client = make_client()
        with self.assertRaises(ValidationError):
            await client.get_client_credentials("identify")

    async def test_revoke_token(self):
        transport = RecordingTransport(
            TransportResponse(status=200, headers={"Content-Type": "text/plain"}, body=b"", reason="OK")
        )
        client = make_client(transport)

        result = await client.revoke_token("access", "access_token")

        self.assertIsNone(result)
        request = transport.requests[0]
        self.assertEqual(request.url, DISCORD_OAUTH2_URLS["TOKEN_REVOKE"])
        self.assertBasicAuth(request)
        self.assertEqual(request.form(), {"token": "access", "token_type_hint": "access_token"})

    async def test_revoke_token_requires_token(self):
        client = make_client()
        with self.assertRaises(ValidationError):
            await client.revoke_token("")

    async def test_add_user_to_guild_requires_bot_token(self):
        client = make_client()
        with self.assertRaises(ValidationError):
            await client.add_user_to_guild("1", "2", "access")

    async def test_add_user_to_guild_requires_arguments(self):
        client = make_client(bot_token="bot")
        for args in (("", "2", "access"), ("1", "", "access"), ("1", "2", "")):
            with self.assertRaises(ValidationError):
                await client.add_user_to_guild(*args)

    async def test_add_user_to_guild(self):
        member = {"roles": ["5"], "joined_at": "2025-01-01T00:00:00+00:00", "deaf": False, "mute": False, "flags": 0}
        transport = RecordingTransport(json_response(201, member, "Created"))
        client = make_client(transport)
        client.set_bot_token("bot-token")

        result = await client.add_user_to_guild(111, 222, "user-access", nick="Neo", roles=[5])

        self.assertEqual(result, member)
        self.assertEqual(len(transport.requests), 1)
        request = transport.requests[0]
        self.assertEqual(request.method, "PUT")
        self.assertEqual(request.url, "https://discord.com/api/v10/guilds/111/members/222")
        self.assertEqual(request.headers["Authorization"], "Bot bot-token")
        self.assertEqual(request.headers["Content-Type"], "application/json")
        self.assertEqual(request.json(), {"access_token": "user-access", "nick": "Neo", "roles": ["5"]})

    async def test_add_user_to_guild_already_member(self):
        client = make_client(RecordingTransport(empty_response()), bot_token="bot-token")
        self.assertIsNone(await client.add_user_to_guild("1", "2", "access"))

    async def test_get_current_bot_application(self):
        application = {"id": CLIENT_ID, "name": "App", "icon": None, "description": "", "verify_key": "k"}
        transport = RecordingTransport(json_response(200, application))
        client = make_client(transport)

        self.assertEqual(await client.get_current_bot_application(), application)

        request = transport.requests[0]
        self.assertEqual(request.method, "GET")
        self.assertEqual(request.url, "https://discord.com/api/v10/oauth2/applications/@me")
        self.assertBasicAuth(request)
        self.assertIsNone(request.body)

    async def test_bearer_lookups(self):
        cases = (
            ("get_current_authorization_info", "/oauth2/@me", {"scopes": ["identify"], "expires": "x"}),
            ("get_user", "/users/@me", {"id": "80351110224678912", "username": "nelly"}),
            ("get_user_guilds", "/users/@me/guilds", [{"id": "1", "name": "g"}]),
            ("get_user_connections", "/users/@me/connections", []),
        )
        for method, path, payload in cases:
            with self.subTest(method=method):
                transport = RecordingTransport(json_response(200, payload))
                client = make_client(transport, api_endpoint="https://discord.com/api/v9")

                self.assertEqual(await getattr(client, method)("user-token"), payload)

                request = transport.requests[0]
                self.assertEqual(request.method, "GET")
                self.assertEqual(request.url, "https://discord.com/api/v9" + path)
                self.assertEqual(request.headers["Authorization"], "Bearer user-token")

    async def test_bearer_lookups_require_token(self):
        client = make_client()
        for method in ("get_current_authorization_info", "get_user", "get_user_guilds", "get_user_connections"):
            with self.subTest(method=method):
                with self.assertRaises(ValidationError):
                    await getattr(client, method)("")

    async def test_transport_failure_propagates(self):
        async def broken(method, url, headers, body):
            raise aiohttp.ClientConnectionError("connection reset")

        client = make_client(broken)
        with self.assertRaises(aiohttp.ClientConnectionError):
            await client.get_user("token")

    async def test_context_manager_closes(self):
        async with make_client() as client:
            self.assertIsInstance(client, OAuth2Client)


if __name__ == "__main__":
    unittest.main()
