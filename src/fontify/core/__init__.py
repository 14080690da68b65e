"""Core components: configuration, exceptions and data models."""

from .config import AppConfig, BundleConfig, CatalogConfig, DetectionConfig, InstallConfig
from .exceptions import (
    BundleError,
    CatalogError,
    ConfigurationError,
    ErrorKind,
    FontifyError,
    FontNotFoundError,
    OperationCancelledError,
    OutputDirectoryError,
    ValidationError,
)
from .models import (
    BundleOptions,
    BundleResult,
    BundleRun,
    CatalogEntry,
    DetectedFontReference,
    FontFileDescriptor,
    FontSource,
    Framework,
    FrameworkSuggestion,
    HostingStrategy,
    OperationResult,
)

__all__ = [
    "AppConfig",
    "BundleConfig",
    "BundleError",
    "BundleOptions",
    "BundleResult",
    "BundleRun",
    "CatalogConfig",
    "CatalogEntry",
    "CatalogError",
    "ConfigurationError",
    "DetectedFontReference",
    "DetectionConfig",
    "ErrorKind",
    "FontFileDescriptor",
    "FontNotFoundError",
    "FontSource",
    "FontifyError",
    "Framework",
    "FrameworkSuggestion",
    "HostingStrategy",
    "InstallConfig",
    "OperationCancelledError",
    "OperationResult",
    "OutputDirectoryError",
    "ValidationError",
]
