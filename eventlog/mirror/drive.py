"""
Google Drive remote mirror.

Drive v3 REST API over httpx, authorized with an OAuth2 refresh token
(Desktop App client, scope drive.file). See scripts/get_oauth_token.py
for obtaining the refresh token.

No retries here: the sync loop retries on its next tick.
"""

import asyncio
import json
import logging
import time
import uuid
from pathlib import Path
from typing import Any, Dict, Optional, Union

import httpx

from .base import MIME_TYPE, RemoteMirror, RemoteMirrorError

logger = logging.getLogger(__name__)

TOKEN_URL = "https://oauth2.googleapis.com/token"
DRIVE_API_URL = "https://www.googleapis.com/drive/v3"
DRIVE_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3"

# Refresh the access token this many seconds before it expires
TOKEN_EXPIRY_MARGIN_S = 60


def _quote(value: str) -> str:
    """Escape a literal for a Drive search query."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


class GoogleDriveMirror(RemoteMirror):
    """
    Mirror scoped to one Drive folder.

    Args:
        client_id: OAuth client id
        client_secret: OAuth client secret
        refresh_token: Long-lived refresh token
        folder_id: Drive folder that holds the day-files
        timeout_s: HTTP timeout for every call
        http_client: Optional client (tests inject a MockTransport)
    """

    name = "drive"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        folder_id: str,
        timeout_s: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.folder_id = folder_id
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout_s)
        self._access_token: Optional[str] = None
        self._token_expires_at = 0.0

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def _get_access_token(self) -> str:
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        try:
            response = await self._client.post(
                TOKEN_URL,
                data={
                    "grant_type": "refresh_token",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "refresh_token": self.refresh_token,
                },
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise RemoteMirrorError(f"OAuth token refresh failed: {e}") from e

        token = body.get("access_token")
        if not token:
            raise RemoteMirrorError("OAuth token response has no access_token")

        expires_in = float(body.get("expires_in", 3600))
        self._access_token = token
        self._token_expires_at = time.monotonic() + max(0.0, expires_in - TOKEN_EXPIRY_MARGIN_S)
        return token

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        token = await self._get_access_token()
        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"Bearer {token}"
        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RemoteMirrorError(
                f"Drive API {method} {e.request.url.path} returned "
                f"{e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise RemoteMirrorError(f"Drive API {method} failed: {e}") from e
        return response

    # ------------------------------------------------------------------
    # RemoteMirror
    # ------------------------------------------------------------------

    async def find_by_name(self, name: str) -> Optional[str]:
        response = await self._request(
            "GET",
            f"{DRIVE_API_URL}/files",
            params={
                "q": f"'{_quote(self.folder_id)}' in parents and name='{_quote(name)}' and trashed=false",
                "fields": "files(id,name)",
                "spaces": "drive",
            },
        )
        files = response.json().get("files") or []
        return files[0]["id"] if files else None

    async def download(self, file_id: str, dest_path: Union[str, Path]) -> None:
        token = await self._get_access_token()
        dest = Path(dest_path)
        await asyncio.to_thread(dest.parent.mkdir, parents=True, exist_ok=True)
        # Written aside and renamed so a broken transfer leaves no day-file
        partial = dest.with_name(dest.name + ".part")
        try:
            async with self._client.stream(
                "GET",
                f"{DRIVE_API_URL}/files/{file_id}",
                params={"alt": "media"},
                headers={"Authorization": f"Bearer {token}"},
            ) as response:
                response.raise_for_status()
                f = await asyncio.to_thread(open, partial, "wb")
                try:
                    async for chunk in response.aiter_bytes():
                        await asyncio.to_thread(f.write, chunk)
                finally:
                    f.close()
            await asyncio.to_thread(partial.replace, dest)
        except httpx.HTTPStatusError as e:
            raise RemoteMirrorError(
                f"Drive download of {file_id} returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise RemoteMirrorError(f"Drive download of {file_id} failed: {e}") from e
        except OSError as e:
            raise RemoteMirrorError(f"Drive download of {file_id} not written: {e}") from e
        finally:
            partial.unlink(missing_ok=True)

    async def create_or_update(
        self,
        name: str,
        local_path: Union[str, Path],
        existing_id: Optional[str] = None,
    ) -> str:
        content = await asyncio.to_thread(Path(local_path).read_bytes)

        if existing_id:
            await self._request(
                "PATCH",
                f"{DRIVE_UPLOAD_URL}/files/{existing_id}",
                params={"uploadType": "media"},
                headers={"Content-Type": MIME_TYPE},
                content=content,
            )
            logger.debug(f"Updated {name} ({existing_id})")
            return existing_id

        metadata: Dict[str, Any] = {
            "name": name,
            "parents": [self.folder_id],
            "mimeType": MIME_TYPE,
        }
        boundary = uuid.uuid4().hex
        body = (
            f"--{boundary}\r\n"
            f"Content-Type: application/json; charset=UTF-8\r\n\r\n"
            f"{json.dumps(metadata)}\r\n"
            f"--{boundary}\r\n"
            f"Content-Type: {MIME_TYPE}\r\n\r\n"
        ).encode("utf-8") + content + f"\r\n--{boundary}--\r\n".encode("utf-8")

        response = await self._request(
            "POST",
            f"{DRIVE_UPLOAD_URL}/files",
            params={"uploadType": "multipart", "fields": "id"},
            headers={"Content-Type": f"multipart/related; boundary={boundary}"},
            content=body,
        )
        file_id = response.json().get("id")
        if not file_id:
            raise RemoteMirrorError(f"Drive create of {name} returned no id")
        logger.debug(f"Created {name} ({file_id})")
        return file_id

    async def check_connectivity(self) -> bool:
        try:
            response = await self._request(
                "GET",
                f"{DRIVE_API_URL}/files/{self.folder_id}",
                params={"fields": "id,name"},
            )
        except RemoteMirrorError as e:
            logger.warning(
                f"Drive folder not reachable: {e}",
                extra={"folder_id": self.folder_id},
            )
            return False

        logger.info(
            f"Drive folder reachable: {response.json().get('name', self.folder_id)}",
            extra={"folder_id": self.folder_id},
        )
        return True

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def __repr__(self) -> str:
        return f"GoogleDriveMirror(folder_id={self.folder_id!r})"
