"""
Infrastructure configuration tests.

A missing remote configuration must disable the mirror, never fail.
"""

from unittest.mock import patch

import pytest

from eventlog import EventLogService, GoogleDriveMirror, StubRemoteMirror
from infra.bootstrap import bootstrap_event_log
from infra.config import DEFAULT_LOG_DIR, InfraConfig

DRIVE_ENV = {
    "GOOGLE_OAUTH_CLIENT_ID": "cid",
    "GOOGLE_OAUTH_CLIENT_SECRET": "secret",
    "GOOGLE_OAUTH_REFRESH_TOKEN": "refresh",
    "GOOGLE_DRIVE_FOLDER_ID": "folder",
}


class TestInfraConfig:

    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            config = InfraConfig.from_env()

        assert config.log_dir == str(DEFAULT_LOG_DIR)
        assert config.sync_interval_s == 60.0
        assert config.mirror_backend == "drive"
        assert config.drive_http_timeout_s == 30.0
        assert not config.drive_configured

    def test_missing_credentials_disable_mirror(self):
        with patch.dict("os.environ", {"GOOGLE_DRIVE_FOLDER_ID": "folder"}, clear=True):
            config = InfraConfig.from_env()

        assert config.create_mirror() is None

    @pytest.mark.asyncio
    async def test_full_credentials_create_drive_mirror(self):
        with patch.dict("os.environ", DRIVE_ENV, clear=True):
            config = InfraConfig.from_env()

        mirror = config.create_mirror()
        assert isinstance(mirror, GoogleDriveMirror)
        assert mirror.folder_id == "folder"
        await mirror.aclose()

    def test_stub_backend(self):
        with patch.dict("os.environ", {"MIRROR_BACKEND": "stub"}, clear=True):
            assert isinstance(InfraConfig.from_env().create_mirror(), StubRemoteMirror)

    def test_disabled_backend_ignores_credentials(self):
        env = dict(DRIVE_ENV, MIRROR_BACKEND="disabled")
        with patch.dict("os.environ", env, clear=True):
            assert InfraConfig.from_env().create_mirror() is None

    def test_overrides(self, tmp_path):
        env = {"LOG_DIR": str(tmp_path), "SYNC_INTERVAL_SECONDS": "5"}
        with patch.dict("os.environ", env, clear=True):
            config = InfraConfig.from_env()

        assert config.log_dir == str(tmp_path)
        assert config.sync_interval_s == 5.0

    @pytest.mark.parametrize("raw", ["abc", "0", "-5", "nan", "inf"])
    def test_bad_interval_falls_back_with_warning(self, raw, caplog):
        with patch.dict("os.environ", {"SYNC_INTERVAL_SECONDS": raw}, clear=True):
            config = InfraConfig.from_env()

        assert config.sync_interval_s == 60.0
        assert "SYNC_INTERVAL_SECONDS" in caplog.text

    def test_bad_timeout_falls_back(self):
        with patch.dict("os.environ", {"DRIVE_HTTP_TIMEOUT_SECONDS": "soon"}, clear=True):
            assert InfraConfig.from_env().drive_http_timeout_s == 30.0

    def test_unknown_backend_warns(self, caplog):
        with patch.dict("os.environ", {"MIRROR_BACKEND": "s3"}, clear=True):
            config = InfraConfig.from_env()

        assert config.mirror_backend == "drive"
        assert "Unknown MIRROR_BACKEND='s3'" in caplog.text

    def test_backend_is_case_insensitive(self):
        with patch.dict("os.environ", {"MIRROR_BACKEND": " Stub "}, clear=True):
            assert isinstance(InfraConfig.from_env().create_mirror(), StubRemoteMirror)


class TestBootstrap:

    def test_bootstrap_without_remote(self, tmp_path):
        with patch.dict("os.environ", {"LOG_DIR": str(tmp_path)}, clear=True):
            service = bootstrap_event_log()

        assert isinstance(service, EventLogService)
        assert not service.mirror_enabled
        assert service.store.log_dir == tmp_path

    def test_each_bootstrap_is_a_new_instance(self, tmp_path):
        with patch.dict("os.environ", {"LOG_DIR": str(tmp_path), "MIRROR_BACKEND": "stub"}, clear=True):
            first = bootstrap_event_log()
            second = bootstrap_event_log()

        assert first is not second
        assert first.sync_state is not second.sync_state
