"""
Tests for configuration system.
"""

import pytest

from autoform_filler.config import (
    BrowserSettings,
    ConfigLoader,
    FillSettings,
    ProfileServiceSettings,
    Settings,
    SettingsConfigProvider,
    StaticConfigProvider,
    get_settings,
    load_config,
    reset_settings,
)
from autoform_filler.exceptions import ConfigurationError
from autoform_filler.interfaces.config import ProfileServiceConnection


class TestSettings:
    """Test the Settings classes."""

    def test_default_settings(self):
        """Test default settings are created correctly."""
        settings = Settings()

        assert settings.profile_service.base_url == "http://localhost:8080"
        assert settings.profile_service.api_key is None
        assert settings.profile_service.auth_scheme == "x-api-key"
        assert settings.fill.debounce_ms == 120
        assert settings.fill.poll_ms == 200
        assert settings.fill.settle_ms == 1500
        assert settings.fill.timeout_ms == 15000
        assert settings.fill.max_passes == 25
        assert settings.browser.headless is True

    def test_override_settings(self):
        """Test overriding settings."""
        settings = Settings(
            fill=FillSettings(settle_ms=3000),
            browser=BrowserSettings(headless=False, browser_type="firefox"),
        )

        assert settings.fill.settle_ms == 3000
        assert settings.browser.headless is False
        assert settings.browser.browser_type == "firefox"

    def test_merge_with_overrides(self):
        """Test merging settings with overrides."""
        settings = Settings()
        new_settings = settings.merge_with({
            "profile_service": {"api_key": "ak_123"},
            "fill": {"timeout_ms": 20000},
        })

        assert new_settings.profile_service.api_key.get_secret_value() == "ak_123"
        assert new_settings.fill.timeout_ms == 20000
        # Other settings should remain default
        assert new_settings.fill.settle_ms == 1500
        assert settings.profile_service.api_key is None

    def test_fill_settings_validation(self):
        """Test validation of fill timing."""
        assert FillSettings(settle_ms=500).settle_ms == 500

        with pytest.raises(ValueError):
            FillSettings(poll_ms=0)

        with pytest.raises(ValueError):
            FillSettings(max_passes=0)

    def test_auth_scheme_validation(self):
        """Only the two supported schemes are accepted."""
        assert ProfileServiceSettings(auth_scheme="bearer").auth_scheme == "bearer"

        with pytest.raises(ValueError):
            ProfileServiceSettings(auth_scheme="basic")

    def test_api_key_is_secret(self):
        """The API key is not shown in reprs."""
        settings = ProfileServiceSettings(api_key="ak_secret")
        assert "ak_secret" not in repr(settings)

    def test_root_sections(self):
        """Only sections something reads are declared."""
        assert set(Settings.model_fields) == {"profile_service", "fill", "browser", "logging"}


class TestEnvironment:
    """Test loading from AUTOFORM__ environment variables."""

    def test_nested_env_vars(self, monkeypatch):
        monkeypatch.setenv("AUTOFORM__PROFILE_SERVICE__API_KEY", "ak_env")
        monkeypatch.setenv("AUTOFORM__FILL__SETTLE_MS", "3000")
        monkeypatch.setenv("AUTOFORM__BROWSER__HEADLESS", "false")

        settings = Settings()

        assert settings.profile_service.api_key.get_secret_value() == "ak_env"
        assert settings.fill.settle_ms == 3000
        assert settings.browser.headless is False


class TestConfigLoader:
    """Test YAML loading."""

    def test_load_yaml_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "profile_service:\n"
            "  base_url: https://api.example.com/\n"
            "fill:\n"
            "  max_passes: 10\n"
        )

        settings = load_config(config_path=config_file)

        assert settings.profile_service.base_url == "https://api.example.com/"
        assert settings.fill.max_passes == 10

    def test_overrides_beat_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("fill:\n  max_passes: 10\n")

        settings = load_config(config_path=config_file, fill={"max_passes": 3})

        assert settings.fill.max_passes == 3

    def test_empty_yaml_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        assert ConfigLoader(config_file).load_yaml_config(config_file) == {}

    def test_path_from_env_var(self, tmp_path, monkeypatch):
        config_file = tmp_path / "autoform.yaml"
        config_file.write_text("fill:\n  settle_ms: 900\n")
        monkeypatch.setenv("AUTOFORM_CONFIG", str(config_file))

        assert ConfigLoader().find_config_file() == config_file
        assert load_config().fill.settle_ms == 900

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("fill: [unclosed\n")

        with pytest.raises(ConfigurationError):
            load_config(config_path=config_file)

    def test_yaml_must_be_mapping(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader(config_file).load_yaml_config(config_file)

        assert "mapping" in exc_info.value.message

    def test_missing_explicit_path_falls_back(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        loader = ConfigLoader(tmp_path / "nope.yaml")
        monkeypatch.setattr(ConfigLoader, "DEFAULT_CONFIG_PATHS", [])

        assert loader.find_config_file() is None


class TestGlobalSettings:
    """Test the settings singleton."""

    def test_singleton(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(ConfigLoader, "DEFAULT_CONFIG_PATHS", [])

        assert get_settings() is get_settings()

    def test_reset_reloads(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(ConfigLoader, "DEFAULT_CONFIG_PATHS", [])

        first = get_settings()
        reset_settings()
        monkeypatch.setenv("AUTOFORM__FILL__MAX_PASSES", "7")

        second = get_settings()
        assert second is not first
        assert second.fill.max_passes == 7


class TestConfigProviders:
    """Test IConfigProvider implementations."""

    async def test_settings_provider(self):
        settings = Settings(profile_service=ProfileServiceSettings(
            base_url="  https://api.example.com/  ",
            api_key="  ak_123  ",
            auth_scheme="bearer",
        ))

        connection = await SettingsConfigProvider(settings).get_connection()

        assert connection.base_url == "https://api.example.com"
        assert connection.api_key == "ak_123"
        assert connection.auth_scheme == "bearer"
        assert connection.profile_path == "/api/profile"

    async def test_settings_provider_without_key(self):
        connection = await SettingsConfigProvider(Settings()).get_connection()
        assert connection.api_key == ""

    async def test_settings_provider_reads_global(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(ConfigLoader, "DEFAULT_CONFIG_PATHS", [])
        monkeypatch.setenv("AUTOFORM__PROFILE_SERVICE__API_KEY", "ak_global")

        connection = await SettingsConfigProvider().get_connection()

        assert connection.api_key == "ak_global"

    async def test_static_provider(self):
        provider = StaticConfigProvider("https://api.example.com/", " ak_1 ", timeout=5.0)

        connection = await provider.get_connection()

        assert connection == ProfileServiceConnection(
            base_url="https://api.example.com",
            api_key="ak_1",
            timeout=5.0,
        )
