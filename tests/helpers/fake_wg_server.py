"""In-process wg-easy lookalike used by the HTTP tests."""

from __future__ import annotations

import contextlib
import itertools
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple
from urllib.parse import parse_qs

import orjson
from aiohttp import web
from aiohttp.test_utils import TestServer

from wgclient.data_models import AuthFormat

SESSION_COOKIE = "connect.sid"


def peer_payload(peer_id: str, **overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": peer_id,
        "name": f"peer-{peer_id}",
        "enabled": True,
        "address": "10.8.0.2",
        "publicKey": f"pub-{peer_id}",
        "createdAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": "2024-01-02T00:00:00.000Z",
        "latestHandshakeAt": None,
        "transferRx": 0,
        "transferTx": 0,
    }
    payload.update(overrides)
    return payload


class FakeWgEasyServer:
    """
    Accepts exactly one login encoding and serves the client endpoints.

    Every request is recorded so tests can assert on request counts and
    ordering.
    """

    def __init__(
        self,
        *,
        accepted_format: Optional[AuthFormat] = AuthFormat.JSON_PASSWORD,
        password: str = "x",
        peers: Optional[List[Dict[str, Any]]] = None,
        set_cookie: bool = True,
        wrap_peer_list: bool = False,
        requires_password: bool = True,
    ) -> None:
        self.accepted_format = accepted_format
        self.password = password
        self.peers: List[Dict[str, Any]] = list(peers or [])
        self.set_cookie = set_cookie
        self.wrap_peer_list = wrap_peer_list
        self.requires_password = requires_password
        self.login_attempts: List[Tuple[str, bytes]] = []
        self.requests: List[Tuple[str, str]] = []
        self.valid_tokens: set[str] = set()
        self.forced_status: Optional[int] = None
        self.forced_body: Any = {"error": "Internal Server Error"}
        self._token_ids = itertools.count(1)

    @property
    def login_count(self) -> int:
        return len(self.login_attempts)

    def expire_sessions(self) -> None:
        self.valid_tokens.clear()

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/api/session", self._login)
        app.router.add_get("/api/session", self._session_info)
        app.router.add_get("/api/wireguard/client", self._list_clients)
        app.router.add_post("/api/wireguard/client", self._create_client)
        app.router.add_delete("/api/wireguard/client/{peer_id}", self._delete_client)
        app.router.add_post("/api/wireguard/client/{peer_id}/enable", self._enable_client)
        app.router.add_post("/api/wireguard/client/{peer_id}/disable", self._disable_client)
        app.router.add_get("/api/wireguard/client/{peer_id}/configuration", self._configuration)
        return app

    def _accepts(self, content_type: str, body: bytes) -> bool:
        fmt = self.accepted_format
        if fmt is None:
            return False
        if fmt in (AuthFormat.JSON_PASSWORD, AuthFormat.JSON_PASS):
            if content_type != "application/json":
                return False
            payload = orjson.loads(body)
            key = "password" if fmt is AuthFormat.JSON_PASSWORD else "pass"
            return isinstance(payload, dict) and payload.get(key) == self.password
        if fmt in (AuthFormat.FORM_PASSWORD, AuthFormat.FORM_PASS):
            if content_type != "application/x-www-form-urlencoded":
                return False
            fields = parse_qs(body.decode("utf-8"))
            key = "password" if fmt is AuthFormat.FORM_PASSWORD else "pass"
            return fields.get(key) == [self.password]
        return content_type == "text/plain" and body.decode("utf-8") == self.password

    async def _login(self, request: web.Request) -> web.Response:
        body = await request.read()
        self.requests.append((request.method, request.path))
        self.login_attempts.append((request.content_type, body))
        if not self._accepts(request.content_type, body):
            return web.json_response({"error": "Incorrect Password"}, status=401)

        response = web.json_response({"success": True})
        if self.set_cookie:
            token = f"token-{next(self._token_ids)}"
            self.valid_tokens.add(token)
            response.set_cookie(SESSION_COOKIE, token)
        return response

    def _authorized(self, request: web.Request) -> bool:
        if not self.requires_password:
            return True
        return request.cookies.get(SESSION_COOKIE) in self.valid_tokens

    def _guard(self, request: web.Request) -> Optional[web.Response]:
        self.requests.append((request.method, request.raw_path))
        if not self._authorized(request):
            return web.json_response({"error": "Not Logged In"}, status=401)
        if self.forced_status is not None:
            if isinstance(self.forced_body, str):
                return web.Response(text=self.forced_body, status=self.forced_status)
            return web.json_response(self.forced_body, status=self.forced_status)
        return None

    async def _session_info(self, request: web.Request) -> web.Response:
        self.requests.append((request.method, request.path))
        return web.json_response(
            {
                "requiresPassword": self.requires_password,
                "authenticated": self._authorized(request),
                "version": "14.0.0",
                "latestRelease": {"version": "15.0.0", "changelog": "fixes"},
            }
        )

    async def _list_clients(self, request: web.Request) -> web.Response:
        rejected = self._guard(request)
        if rejected is not None:
            return rejected
        if self.wrap_peer_list:
            return web.json_response({"clients": self.peers})
        return web.json_response(self.peers)

    async def _create_client(self, request: web.Request) -> web.Response:
        rejected = self._guard(request)
        if rejected is not None:
            return rejected
        payload = await request.json()
        peer = peer_payload(str(len(self.peers) + 1), name=payload["name"])
        self.peers.append(peer)
        return web.json_response(peer)

    async def _delete_client(self, request: web.Request) -> web.Response:
        rejected = self._guard(request)
        if rejected is not None:
            return rejected
        peer_id = request.match_info["peer_id"]
        self.peers = [peer for peer in self.peers if peer["id"] != peer_id]
        return web.json_response({"success": True})

    async def _set_enabled(self, request: web.Request, enabled: bool) -> web.Response:
        rejected = self._guard(request)
        if rejected is not None:
            return rejected
        peer_id = request.match_info["peer_id"]
        for peer in self.peers:
            if peer["id"] == peer_id:
                peer["enabled"] = enabled
                return web.json_response({"success": True})
        return web.json_response({"error": "Client Not Found"}, status=404)

    async def _enable_client(self, request: web.Request) -> web.Response:
        return await self._set_enabled(request, True)

    async def _disable_client(self, request: web.Request) -> web.Response:
        return await self._set_enabled(request, False)

    async def _configuration(self, request: web.Request) -> web.Response:
        rejected = self._guard(request)
        if rejected is not None:
            return rejected
        peer_id = request.match_info["peer_id"]
        return web.Response(text=f"[Interface]\n# peer {peer_id}\n", content_type="text/plain")


@contextlib.asynccontextmanager
async def serve(fake: FakeWgEasyServer) -> AsyncIterator[str]:
    """Run *fake* on a random local port and yield its base URL."""
    server = TestServer(fake.build_app())
    await server.start_server()
    try:
        yield str(server.make_url("")).rstrip("/")
    finally:
        await server.close()
