#!/usr/bin/env python3
"""
Obtain a Google Drive OAuth refresh token (Desktop App client).

Starts a local callback server, opens the consent page and prints the
tokens returned by Google. Put the refresh_token in .env as
GOOGLE_OAUTH_REFRESH_TOKEN.

Usage:
    python scripts/get_oauth_token.py
    python scripts/get_oauth_token.py --port 5555 --no-browser
"""

import argparse
import json
import os
import sys
import webbrowser
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from typing import Optional
from urllib.parse import parse_qs, urlencode, urlparse

import httpx
from dotenv import load_dotenv

AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
SCOPES = ["https://www.googleapis.com/auth/drive.file"]


def build_auth_url(client_id: str, redirect_uri: str) -> str:
    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": " ".join(SCOPES),
        "access_type": "offline",
        # Forces Google to return a refresh_token
        "prompt": "consent",
    }
    return f"{AUTH_URL}?{urlencode(params)}"


def exchange_code(client_id: str, client_secret: str, code: str, redirect_uri: str) -> dict:
    response = httpx.post(
        TOKEN_URL,
        data={
            "grant_type": "authorization_code",
            "code": code,
            "client_id": client_id,
            "client_secret": client_secret,
            "redirect_uri": redirect_uri,
        },
        timeout=30.0,
    )
    response.raise_for_status()
    return response.json()


def wait_for_code(port: int) -> Optional[str]:
    """Serve /oauth2callback once and return the `code` query parameter."""
    received = {}

    class CallbackHandler(BaseHTTPRequestHandler):
        def do_GET(self):
            url = urlparse(self.path)
            if url.path != "/oauth2callback":
                self.send_response(404)
                self.end_headers()
                return

            code = parse_qs(url.query).get("code", [None])[0]
            received["code"] = code
            self.send_response(200)
            self.send_header("Content-Type", "text/plain; charset=utf-8")
            self.end_headers()
            message = "¡Listo! Ya podés volver a la consola." if code else "Missing code"
            self.wfile.write(message.encode("utf-8"))

        def log_message(self, format, *args):
            pass

    server = HTTPServer(("localhost", port), CallbackHandler)
    try:
        while "code" not in received:
            server.handle_request()
    finally:
        server.server_close()
    return received.get("code")


def main():
    load_dotenv(Path(__file__).resolve().parent.parent / ".env")

    parser = argparse.ArgumentParser(
        description="Generate a Google Drive OAuth refresh token"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("OAUTH_LOCAL_PORT", "5555")),
        help="Local callback port (default: OAUTH_LOCAL_PORT or 5555)",
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Only print the consent URL",
    )
    args = parser.parse_args()

    client_id = os.getenv("GOOGLE_OAUTH_CLIENT_ID")
    client_secret = os.getenv("GOOGLE_OAUTH_CLIENT_SECRET")
    if not client_id or not client_secret:
        print("Missing GOOGLE_OAUTH_CLIENT_ID / GOOGLE_OAUTH_CLIENT_SECRET in the environment.")
        sys.exit(1)

    redirect_uri = f"http://localhost:{args.port}/oauth2callback"
    auth_url = build_auth_url(client_id, redirect_uri)

    print("\nOpen this URL to authorize:")
    print(auth_url, "\n")
    if not args.no_browser:
        webbrowser.open(auth_url)

    code = wait_for_code(args.port)
    if not code:
        print("No authorization code received.")
        sys.exit(1)

    try:
        tokens = exchange_code(client_id, client_secret, code, redirect_uri)
    except httpx.HTTPError as e:
        print(f"Token exchange failed: {e}")
        sys.exit(1)

    print("\nTokens received:")
    print(json.dumps(tokens, indent=2))
    if not tokens.get("refresh_token"):
        print("\n⚠️  No refresh_token returned. Revoke the app's access and retry (prompt=consent).")


if __name__ == "__main__":
    main()
