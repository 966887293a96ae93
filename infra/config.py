"""
Infrastructure configuration system.

Environment-based backend selection for the event log.
A missing remote configuration disables the mirror; it never
prevents startup.
"""

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, get_args

from eventlog.mirror import GoogleDriveMirror, RemoteMirror, StubRemoteMirror

logger = logging.getLogger(__name__)


MirrorBackendType = Literal["drive", "stub", "disabled"]

DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "data"

MIRROR_BACKENDS = get_args(MirrorBackendType)

DEFAULT_SYNC_INTERVAL_S = 60.0
DEFAULT_DRIVE_HTTP_TIMEOUT_S = 30.0


def _positive_float_env(name: str, default: float) -> float:
    """Read a positive number of seconds; fall back to `default` with a warning."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        value = None
    if value is None or not math.isfinite(value) or value <= 0:
        logger.warning(f"Invalid {name}={raw!r}; using {default}")
        return default
    return value


def _mirror_backend_env() -> str:
    backend = os.getenv("MIRROR_BACKEND", "drive").strip().lower()
    if backend not in MIRROR_BACKENDS:
        logger.warning(
            f"Unknown MIRROR_BACKEND={backend!r} (expected one of {', '.join(MIRROR_BACKENDS)}); using 'drive'"
        )
        return "drive"
    return backend


@dataclass
class InfraConfig:
    """Event log configuration from environment."""

    # Local log
    log_dir: str
    sync_interval_s: float

    # Remote mirror
    mirror_backend: MirrorBackendType
    google_client_id: Optional[str]
    google_client_secret: Optional[str]
    google_refresh_token: Optional[str]
    drive_folder_id: Optional[str]
    drive_http_timeout_s: float

    @classmethod
    def from_env(cls) -> "InfraConfig":
        """
        Load configuration from environment variables.

        Defaults:
        - Day-files under ./data
        - Sync every 60s
        - Google Drive mirror (disabled unless fully configured)
        """
        return cls(
            # Local log
            log_dir=os.getenv("LOG_DIR", str(DEFAULT_LOG_DIR)),
            sync_interval_s=_positive_float_env("SYNC_INTERVAL_SECONDS", DEFAULT_SYNC_INTERVAL_S),

            # Remote mirror
            mirror_backend=_mirror_backend_env(),  # type: ignore
            google_client_id=os.getenv("GOOGLE_OAUTH_CLIENT_ID") or None,
            google_client_secret=os.getenv("GOOGLE_OAUTH_CLIENT_SECRET") or None,
            google_refresh_token=os.getenv("GOOGLE_OAUTH_REFRESH_TOKEN") or None,
            drive_folder_id=os.getenv("GOOGLE_DRIVE_FOLDER_ID") or None,
            drive_http_timeout_s=_positive_float_env("DRIVE_HTTP_TIMEOUT_SECONDS", DEFAULT_DRIVE_HTTP_TIMEOUT_S),
        )

    @property
    def drive_configured(self) -> bool:
        return all([
            self.google_client_id,
            self.google_client_secret,
            self.google_refresh_token,
            self.drive_folder_id,
        ])

    def create_mirror(self) -> Optional[RemoteMirror]:
        """Create the remote mirror, or None when disabled."""
        if self.mirror_backend == "disabled":
            logger.info("Remote mirror disabled by MIRROR_BACKEND")
            return None

        if self.mirror_backend == "stub":
            return StubRemoteMirror()

        if not self.drive_configured:
            logger.warning(
                "Remote mirror disabled: missing GOOGLE_OAUTH_CLIENT_ID, "
                "GOOGLE_OAUTH_CLIENT_SECRET, GOOGLE_OAUTH_REFRESH_TOKEN "
                "or GOOGLE_DRIVE_FOLDER_ID"
            )
            return None

        return GoogleDriveMirror(
            client_id=self.google_client_id,
            client_secret=self.google_client_secret,
            refresh_token=self.google_refresh_token,
            folder_id=self.drive_folder_id,
            timeout_s=self.drive_http_timeout_s,
        )


def get_config() -> InfraConfig:
    """Get infrastructure configuration from the current environment."""
    return InfraConfig.from_env()
