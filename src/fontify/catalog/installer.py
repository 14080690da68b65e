"""
Font Installer
==============

Direct-install flow: downloads catalog fonts into the current user's font
directory and refreshes the operating system font cache where that applies.
"""

import logging
import os
import platform
import shutil
import subprocess
from pathlib import Path

from fontify.bundling.progress import BundleProgressCallback
from fontify.bundling.queue import SequentialTaskQueue
from fontify.core.config import InstallConfig
from fontify.core.exceptions import (
    DownloadFailedError,
    FontNotFoundError,
    NoFontFilesError,
    error_kind_for,
)
from fontify.core.models import DetectedFontReference, FontAvailability, InstallResult

from .client import CatalogClient, select_common_variants

logger = logging.getLogger(__name__)

CATALOG_SOURCE = "catalog"


class FontInstaller:
    """
    Installs catalog fonts for the current user.

    Handles the per-platform fonts directory and the best-effort cache
    refresh that follows a successful install.
    """

    def __init__(self, client: CatalogClient, config: InstallConfig | None = None):
        self.client = client
        self.config = config or InstallConfig()
        self.system = platform.system().lower()

        logger.debug(f"FontInstaller initialized for {self.system}")

    def get_user_fonts_directory(self) -> Path:
        """User-writable fonts directory for this operating system."""
        if self.config.fonts_dir is not None:
            return Path(self.config.fonts_dir)

        if self.system == "windows":
            local_app_data = os.environ.get("LOCALAPPDATA")
            base = Path(local_app_data) if local_app_data else Path.home() / "AppData" / "Local"
            return base / "Microsoft" / "Windows" / "Fonts"
        if self.system == "darwin":
            return Path.home() / "Library" / "Fonts"
        return Path.home() / ".local" / "share" / "fonts"

    def requires_reload(self) -> bool:
        """Windows applications only see new fonts after a restart."""
        return self.system == "windows"

    def install_font(self, font_name: str) -> InstallResult:
        """
        Install one family from the catalog.

        Args:
            font_name: Family name as detected

        Returns:
            InstallResult describing the outcome; never raises
        """
        try:
            entry = self.client.search(font_name, strict=True)
            if entry is None:
                raise FontNotFoundError(font_name)

            variants = select_common_variants(
                entry.available_variants, self.client.config.max_common_variants
            ) or ["regular"]

            descriptors = self.client.get_font_files(entry.family, variants)
            if not descriptors:
                raise NoFontFilesError(entry.family)

            fonts_dir = self.get_user_fonts_directory()
            installed = []
            for descriptor in descriptors:
                path = self.client.download(descriptor, fonts_dir)
                if path is not None:
                    installed.append(path)

            if not installed:
                raise DownloadFailedError(entry.family)

            if self.config.refresh_font_cache:
                self.refresh_font_cache()

        except Exception as e:
            logger.warning(f"Failed to install font {font_name}: {e}")
            return InstallResult(
                font_name=font_name,
                success=False,
                source=CATALOG_SOURCE,
                error=str(e) or "Unknown error occurred",
                error_kind=error_kind_for(e),
            )

        logger.info(f"Installed {len(installed)} files for {font_name}")
        return InstallResult(
            font_name=font_name,
            success=True,
            source=CATALOG_SOURCE,
            installed_files=installed,
            requires_reload=self.requires_reload(),
        )

    def install_fonts(
        self,
        fonts: list[DetectedFontReference],
        progress_callback: BundleProgressCallback | None = None,
    ) -> list[InstallResult]:
        """
        Install every detected font not already known to be installed.

        Fonts are processed one at a time with the configured delay in between.
        """
        pending = [font for font in fonts if font.known_installed is not True]
        callback = progress_callback or BundleProgressCallback()
        callback.on_start(len(pending))

        position = iter(range(len(pending)))

        def _install(font: DetectedFontReference) -> InstallResult:
            callback.on_font_start(font.name, next(position))
            result = self.install_font(font.name)
            callback.on_font_complete(font.name, result.success)
            return result

        queue = SequentialTaskQueue(self.config.inter_font_delay_seconds)
        results = queue.run(pending, _install)

        succeeded = sum(1 for r in results if r.success)
        callback.on_complete(succeeded, len(results) - succeeded)
        return results

    def check_font_availability(self, font_name: str) -> FontAvailability:
        """
        Report whether the catalog carries a family, with variants and license.

        Raises:
            CatalogUnavailableError: If the catalog listing cannot be fetched
        """
        entry = self.client.search(font_name, strict=True)
        if entry is None:
            return FontAvailability(available=False)

        return FontAvailability(
            available=True,
            source=CATALOG_SOURCE,
            variants=entry.available_variants,
            license=self.client.get_font_license(entry.family),
        )

    def refresh_font_cache(self) -> None:
        """Refresh the system font cache; failures are logged, never raised."""
        try:
            if self.system == "linux":
                fc_cache_path = shutil.which("fc-cache")
                if fc_cache_path:
                    subprocess.run([fc_cache_path, "-f"], timeout=30, check=False)
                    logger.info("Refreshed fontconfig cache")
                else:
                    logger.warning("fc-cache not found in PATH")
            else:
                # macOS picks up ~/Library/Fonts immediately; Windows needs a reload
                logger.debug(f"No font cache refresh needed on {self.system}")

        except Exception as e:
            logger.warning(f"Failed to refresh font cache: {e}")
