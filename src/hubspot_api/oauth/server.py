"""Local OAuth callback server for handling HubSpot redirects.

Starts a temporary local HTTP server that receives the redirect carrying the
access token, refresh token and TTL as query parameters.
"""

from __future__ import annotations

import asyncio
import html
import logging
import socket
import time
import webbrowser
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, HTTPServer
from threading import Thread
from urllib.parse import parse_qs, urlparse

from ..auth import Auth
from ..errors import OAuthError
from ..types import PortalId
from .client import OAuthClient

log = logging.getLogger(__name__)

CALLBACK_PATH = "/callback"

_PAGE = """<!DOCTYPE html>
<html>
<head><title>HubSpot Authorization</title></head>
<body style="font-family: sans-serif; text-align: center; margin-top: 20vh">
  <h1>{title}</h1>
  <p>{message}</p>
</body>
</html>
"""


@dataclass
class CallbackResult:
    """Query parameters received on the redirect."""

    params: dict[str, str] = field(default_factory=dict)

    @property
    def error(self) -> str | None:
        return self.params.get("error")

    @property
    def success(self) -> bool:
        return "access_token" in self.params and self.error is None


class OAuthCallbackHandler(BaseHTTPRequestHandler):
    """HTTP handler for the OAuth redirect."""

    callback_result: CallbackResult | None = None
    callback_path: str = CALLBACK_PATH

    def log_message(self, format, *args):
        """Route access logs through logging instead of stderr."""
        log.debug("callback server: " + format, *args)

    def do_GET(self):
        parsed = urlparse(self.path)
        if parsed.path != self.callback_path:
            # Browsers follow up with /favicon.ico and similar; those carry no tokens
            self._send_page(404, "Not Found", "This server only handles the OAuth callback.")
            return

        params = {k: v[0] for k, v in parse_qs(parsed.query).items() if v}
        result = CallbackResult(params=params)
        if OAuthCallbackHandler.callback_result is None:
            OAuthCallbackHandler.callback_result = result
        else:
            log.debug("Ignoring repeated OAuth callback")

        if result.success:
            self._send_page(200, "Authorization Successful", "You can close this window.")
        else:
            description = params.get("error_description") or "An error occurred during authorization."
            self._send_page(400, "Authorization Failed", description)

    def _send_page(self, status: int, title: str, message: str):
        page = _PAGE.format(title=html.escape(title), message=html.escape(message))
        self.send_response(status)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.end_headers()
        self.wfile.write(page.encode())


class OAuthCallbackServer:
    """Local server for handling OAuth redirects.

    Usage:
        with OAuthCallbackServer(port=3000) as server:
            result = server.wait_for_callback(timeout=300)

    Or as async context manager:
        async with OAuthCallbackServer(port=3000) as server:
            result = await server.wait_for_callback_async(timeout=300)
    """

    def __init__(self, port: int = 3000, host: str = "localhost", path: str = CALLBACK_PATH):
        self.port = port
        self.host = host
        self.path = path
        self._server: HTTPServer | None = None
        self._thread: Thread | None = None

    @property
    def callback_url(self) -> str:
        return f"http://{self.host}:{self.port}{self.path}"

    def _find_free_port(self) -> int:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("", 0))
            return s.getsockname()[1]

    def start(self, find_free_port: bool = True) -> int:
        """Start the callback server and return the port it listens on."""
        OAuthCallbackHandler.callback_result = None
        OAuthCallbackHandler.callback_path = self.path

        try:
            self._server = HTTPServer((self.host, self.port), OAuthCallbackHandler)
        except OSError:
            if not find_free_port:
                raise
            self.port = self._find_free_port()
            self._server = HTTPServer((self.host, self.port), OAuthCallbackHandler)

        self._thread = Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        log.debug("OAuth callback server listening on %s", self.callback_url)
        return self.port

    def stop(self):
        if self._server:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._thread:
            self._thread.join(timeout=1)
            self._thread = None

    def wait_for_callback(self, timeout: float = 300) -> CallbackResult:
        """Block until the redirect arrives.

        Raises:
            TimeoutError: If no callback received within timeout
        """
        start = time.monotonic()
        while time.monotonic() - start < timeout:
            if OAuthCallbackHandler.callback_result is not None:
                return OAuthCallbackHandler.callback_result
            time.sleep(0.1)

        raise TimeoutError(f"No OAuth callback received within {timeout} seconds")

    async def wait_for_callback_async(self, timeout: float = 300) -> CallbackResult:
        loop = asyncio.get_running_loop()
        start = loop.time()
        while loop.time() - start < timeout:
            if OAuthCallbackHandler.callback_result is not None:
                return OAuthCallbackHandler.callback_result
            await asyncio.sleep(0.1)

        raise TimeoutError(f"No OAuth callback received within {timeout} seconds")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *args):
        self.stop()

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, *args):
        self.stop()


async def run_oauth_flow(
    client: OAuthClient,
    portal_id: PortalId,
    port: int = 3000,
    timeout: float = 300,
    open_browser: bool = True,
) -> Auth:
    """Run the browser authorization flow and return the issued :class:`Auth`.

    Nothing is persisted; store the result yourself if you need it later.

    Raises:
        OAuthError: If authorization fails
        TimeoutError: If the user doesn't complete the flow in time
    """
    path = urlparse(client.redirect_uri).path or CALLBACK_PATH
    async with OAuthCallbackServer(port=port, path=path) as server:
        if server.port != port:
            client.redirect_uri = server.callback_url

        auth_url = client.get_authorization_url(portal_id)

        print("\nOpening browser for HubSpot authorization...")
        print(f"If browser doesn't open, visit:\n{auth_url}\n")

        if open_browser:
            webbrowser.open(auth_url)

        print("Waiting for authorization...")
        result = await server.wait_for_callback_async(timeout=timeout)

        if not result.success:
            raise OAuthError(
                result.params.get("error_description") or result.error or "Authorization failed",
                error_code=result.error,
                details=result.params,
            )

        return client.auth_from_callback(result.params)
