#!/usr/bin/env python3
"""Obtain an Etsy refresh token through the OAuth authorization-code flow with PKCE.

Usage:
    etsy-get-refresh-token --keystring=<API_KEYSTRING> --shared-secret=<SHARED_SECRET> [--port=3030]

Missing credentials are prompted for on the console. The script opens the
Etsy consent page in a browser, waits for the redirect on
http://localhost:<port>/oauth/redirect, prints the resulting token pair and
exits with status 0 (or 1 when the code exchange fails).
"""

import argparse
import logging
import sys
import webbrowser
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, Callable, Dict, List, Optional, Tuple, Type
from urllib.parse import parse_qs, urlparse

from .constants import CALLBACK_PATH, DEFAULT_CALLBACK_PORT
from .exceptions import EtsyAPIError, EtsyRequestError
from .oauth import exchange_authorization_code
from .pkce import build_authorization_url, generate_pkce_pair, generate_state
from .utils.validators import validate_port

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="etsy-get-refresh-token",
        description="Run the Etsy OAuth flow and print an access/refresh token pair.",
    )
    parser.add_argument("--keystring", help="Etsy app API keystring (client id)")
    parser.add_argument("--shared-secret", dest="shared_secret", help="Etsy app shared secret")
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_CALLBACK_PORT,
        help=f"Local port for the OAuth redirect listener (default {DEFAULT_CALLBACK_PORT})",
    )
    args = parser.parse_args(argv)
    if not validate_port(args.port):
        parser.error(f"invalid port: {args.port}")
    return args


def prompt_credentials(
    keystring: Optional[str],
    shared_secret: Optional[str],
    input_func: Callable[[str], str] = input,
) -> Tuple[str, str]:
    """Ask only for the credentials not supplied on the command line."""
    if not keystring:
        keystring = input_func("Enter your Etsy Keystring: ").strip()
    if not shared_secret:
        shared_secret = input_func("Enter your Etsy Shared Secret: ").strip()
    return keystring, shared_secret


class RefreshTokenAcquirer:
    """One run of the authorization-code flow.

    The PKCE verifier and state are generated once per instance and kept in
    memory until the redirect arrives.
    """

    def __init__(self, keystring: str, shared_secret: str, port: int = DEFAULT_CALLBACK_PORT) -> None:
        self.keystring = keystring
        self.shared_secret = shared_secret
        self.port = port
        self.pkce = generate_pkce_pair()
        self.state = generate_state()
        self.exit_code: Optional[int] = None
        self.tokens: Optional[Dict[str, Any]] = None

    @property
    def redirect_uri(self) -> str:
        return f"http://localhost:{self.port}{CALLBACK_PATH}"

    @property
    def authorization_url(self) -> str:
        return build_authorization_url(
            client_id=self.keystring,
            redirect_uri=self.redirect_uri,
            state=self.state,
            code_challenge=self.pkce.challenge,
        )

    def handle_redirect(self, query: Dict[str, List[str]]) -> Tuple[int, str]:
        """Process the query string of GET /oauth/redirect.

        Returns:
            (HTTP status, plain-text body) to send back to the browser
        """
        logger.info(f"Redirect received with query: {query}")
        code = (query.get("code") or [""])[0]
        if not code:
            return 400, "Authorization code is missing."

        returned_state = (query.get("state") or [""])[0]
        if returned_state != self.state:
            # Not enforced: the exchange still proceeds.
            logger.warning("State returned on the redirect does not match the one sent")

        try:
            self.tokens = exchange_authorization_code(
                client_id=self.keystring,
                code=code,
                code_verifier=self.pkce.verifier,
                redirect_uri=self.redirect_uri,
            )
        except EtsyAPIError as e:
            detail = e.payload if e.payload is not None else e.message
            logger.error(f"Error exchanging authorization code for access token: {detail}")
            self.exit_code = 1
            return 500, "Failed to get access token."
        except EtsyRequestError as e:
            logger.error(f"Error exchanging authorization code for access token: {e.message}")
            self.exit_code = 1
            return 500, "Failed to get access token."

        print("\nOAuth Authentication Successful!")
        print("=" * 50)
        print(f"Access Token: {self.tokens.get('access_token')}")
        print(f"Refresh Token: {self.tokens.get('refresh_token')}")
        print("=" * 50)
        print("You can now use these tokens in your Etsy MCP server configuration.")

        self.exit_code = 0
        return 200, "Authentication successful! You can close this window."

    def create_server(self, host: str = "localhost") -> HTTPServer:
        return HTTPServer((host, self.port), _make_handler(self))

    def serve(self, httpd: HTTPServer) -> int:
        """Handle requests until the redirect has produced an outcome."""
        try:
            while self.exit_code is None:
                httpd.handle_request()
        finally:
            httpd.server_close()
        return self.exit_code

    def run(self, open_browser: Callable[[str], bool] = webbrowser.open) -> int:
        url = self.authorization_url
        httpd = self.create_server()

        try:
            opened = open_browser(url)
        except webbrowser.Error as e:
            logger.error(f"Failed to open browser: {e}")
            opened = False
        if not opened:
            print("Please manually open this URL in your browser:")
            print(url)

        print(f"Server is listening on http://localhost:{self.port}")
        print("If you changed the port, ensure this exact callback URL is registered in your Etsy app settings.")
        return self.serve(httpd)


def _make_handler(acquirer: RefreshTokenAcquirer) -> Type[BaseHTTPRequestHandler]:
    class OAuthRedirectHandler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:
            parsed = urlparse(self.path)
            if parsed.path != CALLBACK_PATH:
                self._send_text(404, "Not found.")
                return
            status, body = acquirer.handle_redirect(parse_qs(parsed.query))
            self._send_text(status, body)

        def _send_text(self, status: int, body: str) -> None:
            payload = body.encode("utf-8")
            self.send_response(status)
            self.send_header("Content-Type", "text/plain; charset=utf-8")
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            self.wfile.write(payload)

        def log_message(self, format: str, *args: Any) -> None:
            logger.debug(format % args)

    return OAuthRedirectHandler


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    keystring, shared_secret = prompt_credentials(args.keystring, args.shared_secret)

    acquirer = RefreshTokenAcquirer(keystring, shared_secret, port=args.port)
    sys.exit(acquirer.run())


if __name__ == "__main__":
    main()
