"""Configuration management for the font detection and bundling system."""

from pathlib import Path, PurePosixPath, PureWindowsPath

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import (
    ConfigFileNotFoundError,
    ConfigLoadError,
    ConfigurationError,
    EmptyConfigFileError,
    InvalidYamlError,
    OutputDirectoryError,
)
from .models import Framework, HostingStrategy

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


def check_relative_output_dir(output_dir: str | Path) -> str:
    """
    Validate the shape of a caller-supplied output directory.

    Args:
        output_dir: Directory relative to the project root

    Returns:
        The directory as a normalized POSIX-style string

    Raises:
        OutputDirectoryError: If the path is empty, absolute, or climbs upwards
    """
    raw = str(output_dir).strip()
    if not raw:
        raise OutputDirectoryError(raw, "path is empty")

    # Check for dangerous patterns first
    for pattern in ("\x00", "\n", "\r"):
        if pattern in raw:
            raise OutputDirectoryError(raw, f"contains forbidden character {pattern!r}")

    windows_path = PureWindowsPath(raw)
    if (
        PurePosixPath(raw).is_absolute()
        or windows_path.is_absolute()
        or windows_path.drive
        or raw.startswith(("/", "\\", "~"))
    ):
        raise OutputDirectoryError(raw, "absolute paths are not allowed")

    parts = windows_path.parts
    if ".." in parts:
        raise OutputDirectoryError(raw, "'..' segments are not allowed")

    normalized = PurePosixPath(*[part for part in parts if part not in ("", ".")])
    if not normalized.parts:
        raise OutputDirectoryError(raw, "path does not name a directory")

    return normalized.as_posix()


def validate_output_dir(output_dir: str | Path, project_root: str | Path) -> Path:
    """
    Resolve an output directory and make sure it stays inside the project root.

    Args:
        output_dir: Directory relative to the project root
        project_root: Workspace root all writes are confined to

    Returns:
        Absolute, resolved output directory

    Raises:
        OutputDirectoryError: If the directory is malformed or escapes the root
    """
    relative = check_relative_output_dir(output_dir)

    try:
        root = Path(project_root).resolve()
        resolved = (root / relative).resolve()
    except (OSError, RuntimeError) as e:
        raise OutputDirectoryError(relative, f"path resolution failed: {e}") from e

    # Symlinked segments can still point outside the workspace
    if not resolved.is_relative_to(root):
        raise OutputDirectoryError(relative, f"resolves outside project root {root}")

    return resolved


class CatalogConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """Remote font catalog configuration."""

    api_url: str = Field(
        "https://www.googleapis.com/webfonts/v1/webfonts", description="Catalog listing endpoint"
    )
    css_url: str = Field(
        "https://fonts.googleapis.com/css2", description="Generated stylesheet endpoint"
    )
    api_key: str | None = Field(None, description="Catalog API key", repr=False)
    user_agent: str = Field(DEFAULT_USER_AGENT, description="Browser-like User-Agent")
    timeout_seconds: float = Field(30.0, gt=0.0, description="HTTP timeout")
    verify_ssl: bool = Field(True, description="Verify TLS certificates")
    max_common_variants: int = Field(3, ge=1, description="Variant cap for direct installs")

    @field_validator("api_url", "css_url")
    @classmethod
    def validate_endpoint_url(cls, v):
        """Validate endpoint URL format."""
        if not v.startswith(("https://", "http://")):
            raise ValueError("Endpoint URL must start with https:// or http://")
        return v.rstrip("/")


class DetectionConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DETECTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """Project scanning configuration."""

    max_files_per_glob: int = Field(20, ge=1, description="Files inspected per glob")
    max_fonts_per_declaration: int = Field(3, ge=1, description="Names kept per font stack")
    stylesheet_globs: list[str] = Field(
        default_factory=lambda: ["**/*.css", "**/*.scss"], description="Stylesheet globs"
    )
    utility_config_globs: list[str] = Field(
        default_factory=lambda: ["tailwind.config.*"], description="Utility config globs"
    )
    manifest_glob: str = Field("**/package.json", description="Manifest glob")
    excluded_dirs: list[str] = Field(
        default_factory=lambda: ["node_modules", "dist", "build"],
        description="Directory names never scanned",
    )
    manifest_prefixes: list[str] = Field(
        default_factory=lambda: ["@fontsource/", "@fontsource-variable/"],
        description="Dependency namespaces that ship a font",
    )

    # Host editor settings
    editor_font_family: str | None = Field(None, description="Editor UI font stack")
    auto_detect: bool = Field(True, description="Bundle detected fonts when none are named")


class BundleConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BUNDLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """Production bundle defaults."""

    inter_font_delay_seconds: float = Field(0.2, ge=0.0, description="Delay between fonts")
    default_variants: list[str] = Field(
        default_factory=lambda: ["regular", "500", "600", "700"], description="Default weights"
    )
    default_strategy: HostingStrategy = Field(HostingStrategy.SELF_HOSTED)
    default_framework: Framework = Field(Framework.VANILLA)
    include_preload: bool = Field(True, description="Add preconnect hints to the guide")
    guide_filename: str = Field("FONT_GUIDE.md", description="Aggregate guide filename")
    license_filename: str = Field("LICENSE.txt", description="Per-font license filename")


class InstallConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="INSTALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    """Direct install configuration."""

    inter_font_delay_seconds: float = Field(0.1, ge=0.0, description="Delay between fonts")
    fonts_dir: Path | None = Field(None, description="Override the user fonts directory")
    refresh_font_cache: bool = Field(True, description="Refresh the OS font cache afterwards")


class AppConfig(BaseSettings):
    """Main application configuration that loads from multiple sources."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field("INFO", description="Application log level")
    project_root: Path = Field(Path("."), description="Workspace root")

    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    bundle: BundleConfig = Field(default_factory=BundleConfig)
    install: InstallConfig = Field(default_factory=InstallConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def load_from_env(cls, env_file: str | Path | None = ".env") -> "AppConfig":
        """Load configuration from environment variables and .env file."""
        if env_file:
            env_file = Path(env_file)
            if env_file.exists():
                return cls(_env_file=env_file)
        return cls()


def load_config_from_yaml(config_path: str | Path, config_class: type) -> BaseSettings:
    """Load configuration from YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigFileNotFoundError(str(config_path))

    try:
        with config_path.open() as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidYamlError(str(config_path), str(e)) from e

    if config_data is None:
        raise EmptyConfigFileError(str(config_path))

    try:
        # YAML values win over anything in .env for this instance
        if issubclass(config_class, BaseSettings):
            return config_class(_env_file=None, **config_data)
        return config_class(**config_data)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigLoadError(str(e)) from e


# Add convenient methods to configuration classes
def _add_yaml_methods():
    """Add YAML loading methods to configuration classes."""

    @classmethod
    def from_yaml(cls, config_path: str | Path):
        """Load configuration from YAML file."""
        return load_config_from_yaml(config_path, cls)

    @classmethod
    def from_env_and_yaml(cls, yaml_path: str | Path | None = None, env_file: str = ".env"):
        """Load configuration from environment variables and optionally override with YAML."""
        if yaml_path and Path(yaml_path).exists():
            return cls.from_yaml(yaml_path)
        return cls(_env_file=env_file if Path(env_file).exists() else None)

    for config_class in [
        CatalogConfig,
        DetectionConfig,
        BundleConfig,
        InstallConfig,
        AppConfig,
    ]:
        config_class.from_yaml = from_yaml
        config_class.from_env_and_yaml = from_env_and_yaml


_add_yaml_methods()
