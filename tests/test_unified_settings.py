"""Tests for unified settings management.

Covers:
  - Explicit values override defaults
  - Safe defaults for non-required settings
  - Invalid provider timeout → controlled error
  - Provider not configured → indicator for a user-friendly error
  - Secrets not in log output
  - FastAPI and Streamlit resolve identical values
"""

import logging

import pytest
from backend.app.core.settings import _DEFAULT_SCORING_CONFIG_PATH, Settings

# ---------------------------------------------------------------------------
# Overrides
# ---------------------------------------------------------------------------


class TestOverride:
    def test_overrides_log_level(self) -> None:
        s = Settings(
            log_level="DEBUG",
            _env_file=None,  # type: ignore[call-arg]
        )
        assert s.log_level == "DEBUG"

    def test_overrides_api_host(self) -> None:
        s = Settings(
            api_host="0.0.0.0",
            api_port=9000,
            _env_file=None,  # type: ignore[call-arg]
        )
        assert s.api_host == "0.0.0.0"
        assert s.api_port == 9000

    def test_env_var_sets_provider_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RAPIDAPI_HOST", "alt.p.rapidapi.com")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.rapidapi_host == "alt.p.rapidapi.com"

    def test_env_var_sets_scoring_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SCORING_CONFIG_PATH", "/tmp/weights.json")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.scoring_config_path == "/tmp/weights.json"


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_default_api_host_and_port(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.api_host == "127.0.0.1"
        assert s.api_port == 8000

    def test_default_debug_false(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.debug is False

    def test_default_log_level(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.log_level == "INFO"

    def test_default_provider(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.rapidapi_host == "linkedin-api8.p.rapidapi.com"
        assert s.provider_timeout_seconds == 30

    def test_default_scoring_config_path(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.scoring_config_path == _DEFAULT_SCORING_CONFIG_PATH
        assert s.scoring_config_path.endswith("scoring.json")


# ---------------------------------------------------------------------------
# Invalid timeout → controlled error
# ---------------------------------------------------------------------------


class TestTimeoutValidation:
    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_non_positive_timeout_rejected(self, timeout: float) -> None:
        with pytest.raises(Exception, match="provider_timeout_seconds"):
            Settings(
                provider_timeout_seconds=timeout,
                _env_file=None,  # type: ignore[call-arg]
            )


# ---------------------------------------------------------------------------
# Provider configured indicator
# ---------------------------------------------------------------------------


class TestProviderConfigured:
    def test_not_configured_without_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("RAPIDAPI_KEY", raising=False)
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.rapidapi_key is None
        assert s.is_provider_configured is False

    def test_empty_key_not_configured(self) -> None:
        s = Settings(
            rapidapi_key="",
            _env_file=None,  # type: ignore[call-arg]
        )
        assert s.is_provider_configured is False

    def test_configured_with_key(self) -> None:
        s = Settings(
            rapidapi_key="rapid-test",
            _env_file=None,  # type: ignore[call-arg]
        )
        assert s.is_provider_configured is True


# ---------------------------------------------------------------------------
# Secrets not in log output / safe_dump
# ---------------------------------------------------------------------------


class TestSecretMasking:
    def test_safe_dump_excludes_api_key(self) -> None:
        s = Settings(
            rapidapi_key="rapid-SUPERSECRET",
            _env_file=None,  # type: ignore[call-arg]
        )
        assert "rapid-SUPERSECRET" not in str(s.safe_dump())

    def test_repr_excludes_api_key(self) -> None:
        s = Settings(
            rapidapi_key="rapid-SUPERSECRET",
            _env_file=None,  # type: ignore[call-arg]
        )
        assert "rapid-SUPERSECRET" not in repr(s)

    def test_safe_dump_includes_non_secret_fields(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        dump = s.safe_dump()
        for key in (
            "api_host", "api_port", "log_level", "rapidapi_host",
            "scoring_config_path", "is_provider_configured",
        ):
            assert key in dump

    def test_safe_dump_log_line_has_no_secrets(
        self, caplog: pytest.LogCaptureFixture,
    ) -> None:
        fake_key = "rapid-SUPERSECRETKEY123456"
        s = Settings(
            rapidapi_key=fake_key,
            _env_file=None,  # type: ignore[call-arg]
        )
        logger = logging.getLogger("test.safe_dump")
        with caplog.at_level(logging.INFO):
            logger.info("config_loaded: %s", s.safe_dump())
        assert fake_key not in caplog.text
        assert "is_provider_configured': True" in caplog.text


# ---------------------------------------------------------------------------
# FastAPI and Streamlit resolve identical values
# ---------------------------------------------------------------------------


class TestSharedSettings:
    def test_singleton_settings_importable(self) -> None:
        from backend.app.core.settings import settings

        assert isinstance(settings, Settings)

    def test_settings_values_consistent(self) -> None:
        from backend.app.core import settings as mod1
        from backend.app.core import settings as mod2

        assert mod1.settings is mod2.settings

    def test_streamlit_uses_shared_settings(self) -> None:
        import ui_helpers

        expected = f"http://{ui_helpers.settings.api_host}:{ui_helpers.settings.api_port}"
        assert ui_helpers.API_BASE == expected
