from unittest.mock import patch

import httpx
import pytest
from pydantic import ValidationError

from lead_capture.config.settings import AppSettings, KajabiSettings
from lead_capture.utils.retry import build_retrying, call_with_retry


class TestSettings:
    """Test configuration loading."""

    def test_app_defaults(self) -> None:
        settings = AppSettings(_env_file=None)
        assert settings.upstream_timeout is None
        assert settings.upstream_max_attempts == 1
        assert settings.log_level == "INFO"

    def test_environment_override(self) -> None:
        with patch.dict(
            "os.environ",
            {"LEAD_CAPTURE_PORT": "9000", "LEAD_CAPTURE_LOG_LEVEL": "debug"},
        ):
            settings = AppSettings(_env_file=None)
            assert settings.port == 9000
            assert settings.log_level == "DEBUG"

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, log_level="LOUD")

    def test_kajabi_env_names(self, kajabi_env) -> None:
        settings = KajabiSettings(_env_file=None)
        assert settings.has_credentials
        assert settings.site_id == "site-1"
        assert settings.tag_map() == {"contractor": "111", "diy": "222", "waitlist": "333"}

    def test_masked_hides_secret(self, kajabi_settings) -> None:
        masked = kajabi_settings.masked()
        assert masked["client_secret"] == "********"
        assert "secret-xyz" not in masked.values()


class TestRetry:
    """Test the upstream retry policy."""

    @pytest.mark.asyncio
    async def test_single_attempt_by_default(self) -> None:
        calls = []

        async def operation():
            calls.append(1)
            raise httpx.ConnectError("down")

        with pytest.raises(httpx.ConnectError):
            await call_with_retry(operation)

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_transport_errors_retried(self) -> None:
        calls = []

        async for attempt in build_retrying(3, wait_multiplier=0):
            with attempt:
                calls.append(1)
                if len(calls) < 3:
                    raise httpx.ReadError("reset")

        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self) -> None:
        calls = []

        with pytest.raises(ValueError):
            async for attempt in build_retrying(3, wait_multiplier=0):
                with attempt:
                    calls.append(1)
                    raise ValueError("bad")

        assert len(calls) == 1
