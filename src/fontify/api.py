"""
Public Operations
=================

Entry points consumed by the CLI and by embedding hosts. Every operation
returns an OperationResult; nothing raises past this module.
"""

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from .bundling.progress import BundleProgressCallback
from .core.exceptions import (
    CatalogUnavailableError,
    FontifyError,
    NoFontsSelectedError,
    NoWorkspaceError,
)
from .core.models import (
    BundleOptions,
    BundleRun,
    DetectedFontReference,
    FontAvailability,
    FontSource,
    FrameworkSuggestion,
    InstallResult,
    OperationResult,
)
from .services import FontifyServices

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _guarded(operation: str, func: Callable[[], T]) -> OperationResult[T]:
    try:
        return OperationResult.ok(func())
    except FontifyError as e:
        logger.error(f"{operation} failed: {e}")
        return OperationResult.fail(e)
    except Exception as e:
        logger.exception(f"Unexpected error during {operation}: {e}")
        return OperationResult.fail(e)


def _project_root(services: FontifyServices, project_root: str | Path | None) -> Path:
    root = Path(project_root) if project_root is not None else services.config.project_root
    if not root.is_dir():
        raise NoWorkspaceError(str(root))
    return root


def detect_fonts(
    services: FontifyServices,
    project_root: str | Path | None = None,
    host_font_family: str | None = None,
    cancel_event: threading.Event | None = None,
) -> OperationResult[list[DetectedFontReference]]:
    """
    Detect the fonts a project references.

    Args:
        services: Session services
        project_root: Workspace root; defaults to the configured root
        host_font_family: Editor font stack to include
        cancel_event: Optional event that stops scanning between files

    Returns:
        OperationResult with deduplicated references
    """

    def _detect():
        root = _project_root(services, project_root)
        return services.detector.detect(root, host_font_family, cancel_event)

    return _guarded("font detection", _detect)


def infer_framework(
    services: FontifyServices, project_root: str | Path | None = None
) -> OperationResult[FrameworkSuggestion]:
    """Suggest a framework and output directory for a project."""
    return _guarded(
        "framework inference",
        lambda: services.inferencer.infer(_project_root(services, project_root)),
    )


def default_bundle_options(
    services: FontifyServices, project_root: str | Path | None = None, **overrides
) -> BundleOptions:
    """
    Bundle options from configuration, with the inferred framework and output dir.

    Explicit keyword overrides win over both.
    """
    bundle_config = services.config.bundle
    values = {
        "strategy": bundle_config.default_strategy,
        "variants": list(bundle_config.default_variants),
        "framework": bundle_config.default_framework,
        "include_preload": bundle_config.include_preload,
    }

    suggestion = services.inferencer.infer(_project_root(services, project_root))
    values["output_dir"] = suggestion.default_output_dir
    if suggestion.was_detected_from_manifest:
        values["framework"] = suggestion.name

    values.update({k: v for k, v in overrides.items() if v is not None})
    return BundleOptions(**values)


def make_production_ready(
    services: FontifyServices,
    font_names: list[str],
    options: BundleOptions | None = None,
    project_root: str | Path | None = None,
    progress_callback: BundleProgressCallback | None = None,
    **overrides,
) -> OperationResult[BundleRun]:
    """
    Bundle fonts for production.

    Per-font failures are reported on the individual results of a successful
    run; invalid options or an unusable output directory fail the whole run
    before anything is written.

    Without explicit ``options`` the configured defaults and the inferred
    framework are used; keyword ``overrides`` replace individual fields.
    """

    def _bundle():
        if not font_names:
            raise NoFontsSelectedError()
        root = _project_root(services, project_root)
        bundle_options = options or default_bundle_options(services, root, **overrides)
        return services.bundler.bundle(font_names, bundle_options, root, progress_callback)

    return _guarded("production bundling", _bundle)


def install_fonts(
    services: FontifyServices,
    fonts: list[DetectedFontReference | str],
    progress_callback: BundleProgressCallback | None = None,
) -> OperationResult[list[InstallResult]]:
    """Install fonts into the user fonts directory, skipping known-installed ones."""

    def _install():
        if not fonts:
            raise NoFontsSelectedError()
        references = [
            font
            if isinstance(font, DetectedFontReference)
            else DetectedFontReference(name=font, source=FontSource.HOST_SETTING)
            for font in fonts
        ]
        return services.installer.install_fonts(references, progress_callback)

    return _guarded("font install", _install)


def check_font_availability(
    services: FontifyServices, font_name: str
) -> OperationResult[FontAvailability]:
    """Catalog availability of a family; absence is a successful ``available=False``."""
    return _guarded(
        "availability check", lambda: services.installer.check_font_availability(font_name)
    )


def refresh_catalog(services: FontifyServices) -> OperationResult[int]:
    """Drop the memoized catalog listing and fetch it again; returns the family count."""

    def _refresh():
        services.client.refresh()
        entries = services.client.list_fonts(strict=True)
        if not entries:
            raise CatalogUnavailableError(services.client.config.api_url, "no families returned")
        return len(entries)

    return _guarded("catalog refresh", _refresh)
