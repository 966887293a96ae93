#!/usr/bin/env python3
"""
Google Drive sanity check.

Creates or updates hello.json in GOOGLE_DRIVE_FOLDER_ID using the same
mirror client as the sync loop.

Usage:
    python scripts/sanity_drive.py
"""

import asyncio
import json
import sys
import tempfile
import time
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv  # noqa: E402

from eventlog.mirror import GoogleDriveMirror, RemoteMirrorError  # noqa: E402
from infra.config import InfraConfig  # noqa: E402

NAME = "hello.json"


async def run(config: InfraConfig) -> int:
    mirror = GoogleDriveMirror(
        client_id=config.google_client_id,
        client_secret=config.google_client_secret,
        refresh_token=config.google_refresh_token,
        folder_id=config.drive_folder_id,
        timeout_s=config.drive_http_timeout_s,
    )
    try:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / NAME
            path.write_text(json.dumps({"hello": "world", "ts": int(time.time() * 1000)}))

            file_id = await mirror.find_by_name(NAME)
            new_id = await mirror.create_or_update(NAME, path, file_id)
            print(f"{'Updated' if file_id else 'Created'}: {new_id}")
    except RemoteMirrorError as e:
        print(f"✗ Drive error: {e}")
        return 1
    finally:
        await mirror.aclose()

    print("OK")
    return 0


def main():
    load_dotenv(PROJECT_ROOT / ".env")
    config = InfraConfig.from_env()
    if not config.drive_configured:
        print("Missing OAuth variables or GOOGLE_DRIVE_FOLDER_ID")
        sys.exit(1)
    sys.exit(asyncio.run(run(config)))


if __name__ == "__main__":
    main()
