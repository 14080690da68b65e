"""Fontify
=======

Detects the font families a web project references and turns them into
production-ready bundles: self-hosted font files with stylesheets, CDN
imports, framework glue and an integration guide.
"""

__version__ = "1.0.0"
__author__ = "Fontify Team"

from .core.config import AppConfig, BundleConfig, CatalogConfig, DetectionConfig, InstallConfig
from .core.exceptions import ErrorKind, FontifyError
from .core.models import (
    BundleOptions,
    BundleResult,
    BundleRun,
    DetectedFontReference,
    Framework,
    HostingStrategy,
    OperationResult,
)

__all__ = [
    "AppConfig",
    "BundleConfig",
    "BundleOptions",
    "BundleResult",
    "BundleRun",
    "CatalogConfig",
    "DetectedFontReference",
    "DetectionConfig",
    "ErrorKind",
    "FontifyError",
    "Framework",
    "HostingStrategy",
    "InstallConfig",
    "OperationResult",
]
