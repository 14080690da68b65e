"""
Unit tests for configuration environment variable support.

Tests pydantic-settings integration for .env files and environment variables.
"""

import pytest
from pydantic import ValidationError

from fontify.core.config import (
    AppConfig,
    BundleConfig,
    CatalogConfig,
    DetectionConfig,
    InstallConfig,
)
from fontify.core.models import Framework, HostingStrategy


class TestEnvironmentVariableSupport:
    """Test environment variable support for all config classes."""

    def test_catalog_config_from_env_vars(self, monkeypatch):
        """Test catalog config loading from environment variables."""
        monkeypatch.setenv("CATALOG_API_KEY", "env-key")
        monkeypatch.setenv("CATALOG_TIMEOUT_SECONDS", "12.5")
        monkeypatch.setenv("CATALOG_MAX_COMMON_VARIANTS", "5")

        config = CatalogConfig(_env_file=None)

        assert config.api_key == "env-key"
        assert config.timeout_seconds == 12.5
        assert config.max_common_variants == 5

    def test_detection_config_from_env_vars(self, monkeypatch):
        """Test detection config loading, including JSON list values."""
        monkeypatch.setenv("DETECTION_MAX_FILES_PER_GLOB", "50")
        monkeypatch.setenv("DETECTION_STYLESHEET_GLOBS", '["**/*.less"]')
        monkeypatch.setenv("DETECTION_EDITOR_FONT_FAMILY", "'JetBrains Mono', monospace")

        config = DetectionConfig(_env_file=None)

        assert config.max_files_per_glob == 50
        assert config.stylesheet_globs == ["**/*.less"]
        assert config.editor_font_family == "'JetBrains Mono', monospace"

    def test_bundle_config_from_env_vars(self, monkeypatch):
        """Test bundle config enums load from their string values."""
        monkeypatch.setenv("BUNDLE_DEFAULT_STRATEGY", "both")
        monkeypatch.setenv("BUNDLE_DEFAULT_FRAMEWORK", "nextjs")
        monkeypatch.setenv("BUNDLE_INTER_FONT_DELAY_SECONDS", "0")

        config = BundleConfig(_env_file=None)

        assert config.default_strategy == HostingStrategy.BOTH
        assert config.default_framework == Framework.NEXTJS
        assert config.inter_font_delay_seconds == 0

    def test_install_config_from_env_vars(self, monkeypatch, temp_dir):
        """Test install config loading from environment variables."""
        monkeypatch.setenv("INSTALL_FONTS_DIR", str(temp_dir))
        monkeypatch.setenv("INSTALL_REFRESH_FONT_CACHE", "false")

        config = InstallConfig(_env_file=None)

        assert config.fonts_dir == temp_dir
        assert config.refresh_font_cache is False

    def test_app_config_from_env_vars(self, monkeypatch):
        """Test app config and nested configs read their own prefixes."""
        monkeypatch.setenv("APP_LOG_LEVEL", "debug")
        monkeypatch.setenv("CATALOG_API_KEY", "nested-key")

        config = AppConfig(_env_file=None)

        assert config.log_level == "DEBUG"
        assert config.catalog.api_key == "nested-key"

    def test_env_vars_are_case_insensitive(self, monkeypatch):
        """Test lower-case variable names are honoured."""
        monkeypatch.setenv("bundle_guide_filename", "FONTS.md")

        config = BundleConfig(_env_file=None)

        assert config.guide_filename == "FONTS.md"

    def test_invalid_env_value_raises(self, monkeypatch):
        """Test invalid environment values fail validation."""
        monkeypatch.setenv("DETECTION_MAX_FILES_PER_GLOB", "0")

        with pytest.raises(ValidationError):
            DetectionConfig(_env_file=None)


class TestDotEnvSupport:
    """Test .env file loading."""

    def test_load_from_env_file(self, temp_dir):
        """Test AppConfig.load_from_env reads a .env file."""
        env_file = temp_dir / ".env"
        env_file.write_text("APP_LOG_LEVEL=WARNING\nAPP_PROJECT_ROOT=/srv/site\n")

        config = AppConfig.load_from_env(env_file)

        assert config.log_level == "WARNING"
        assert str(config.project_root) == "/srv/site"

    def test_load_from_missing_env_file_uses_defaults(self, temp_dir, monkeypatch):
        """Test a missing .env file falls back to defaults."""
        monkeypatch.delenv("APP_LOG_LEVEL", raising=False)

        config = AppConfig.load_from_env(temp_dir / "missing.env")

        assert config.log_level == "INFO"

    def test_env_vars_override_env_file(self, temp_dir, monkeypatch):
        """Test process environment wins over the .env file."""
        env_file = temp_dir / ".env"
        env_file.write_text("CATALOG_TIMEOUT_SECONDS=10\n")
        monkeypatch.setenv("CATALOG_TIMEOUT_SECONDS", "20")

        config = CatalogConfig(_env_file=env_file)

        assert config.timeout_seconds == 20

    def test_api_key_hidden_from_repr(self, monkeypatch):
        """Test the API key never appears in repr output."""
        monkeypatch.setenv("CATALOG_API_KEY", "super-secret")

        config = CatalogConfig(_env_file=None)

        assert "super-secret" not in repr(config)
