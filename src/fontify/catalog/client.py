"""
Catalog Client
==============

Queries the remote font catalog, resolves per-variant font files from its
generated stylesheet, and downloads font binaries.
"""

import logging
from pathlib import Path
from urllib.parse import quote

import requests

from fontify.core.config import CatalogConfig
from fontify.core.exceptions import CatalogUnavailableError
from fontify.core.models import (
    CatalogEntry,
    FontFileDescriptor,
    normalize_family,
    sanitize_font_name,
    variant_to_weight,
)

from .css import parse_font_face_blocks, select_one_per_variant

logger = logging.getLogger(__name__)

OPEN_FONT_LICENSE = "Open Font License (OFL) - Free for commercial use"

# Variant selection order for direct installs
PREFERRED_VARIANTS = ["regular", "400", "500", "600", "700", "bold"]


def build_weight_param(variants: list[str]) -> str:
    """Numeric weights for the stylesheet endpoint, ascending and de-duplicated."""
    weights = sorted({variant_to_weight(v) for v in variants})
    return ";".join(str(w) for w in weights)


def font_filename(descriptor: FontFileDescriptor) -> str:
    """Deterministic on-disk name: ``<sanitizedFamily>-<variant>.<format>``."""
    return f"{sanitize_font_name(descriptor.family)}-{descriptor.variant}.{descriptor.format.value}"


def select_common_variants(available_variants: list[str], max_variants: int = 3) -> list[str]:
    """
    Pick the variants a direct install fetches.

    Args:
        available_variants: Variants the catalog lists for the family
        max_variants: Upper bound on returned variants

    Returns:
        Preferred variants present in the catalog, in preference order
    """
    available = set(available_variants)
    selected = []
    weights = set()
    for variant in PREFERRED_VARIANTS:
        alias = "700" if variant == "bold" else variant
        weight = variant_to_weight(variant)
        if (variant in available or alias in available) and weight not in weights:
            selected.append(variant)
            weights.add(weight)
    return selected[:max_variants]


class CatalogClient:
    """
    Client for the remote font catalog.

    The full catalog listing is fetched once per instance and memoized;
    call ``refresh()`` to drop it.
    """

    def __init__(self, config: CatalogConfig | None = None, session: requests.Session | None = None):
        self.config = config or CatalogConfig()
        self.session = session or self._create_session()
        self._fonts_cache: list[CatalogEntry] | None = None

    def _create_session(self) -> requests.Session:
        """Create HTTP session with appropriate configuration."""
        session = requests.Session()
        session.verify = self.config.verify_ssl
        session.headers.update({"User-Agent": "fontify/1.0.0"})
        return session

    def list_fonts(self, strict: bool = False) -> list[CatalogEntry]:
        """
        Return every family the catalog lists, most popular first.

        A failed request is not memoized. It yields an empty list, or raises
        CatalogUnavailableError when ``strict`` is set.
        """
        if self._fonts_cache is not None:
            return self._fonts_cache

        try:
            self._fonts_cache = self._fetch_listing()
        except CatalogUnavailableError as e:
            logger.error(f"Failed to fetch font catalog: {e}")
            if strict:
                raise
            return []

        logger.info(f"Loaded {len(self._fonts_cache)} families from font catalog")
        return self._fonts_cache

    def _fetch_listing(self) -> list[CatalogEntry]:
        params = {"sort": "popularity"}
        if self.config.api_key:
            params["key"] = self.config.api_key

        try:
            response = self.session.get(
                self.config.api_url, params=params, timeout=self.config.timeout_seconds
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise CatalogUnavailableError(self.config.api_url, str(e)) from e

        entries = []
        for item in data.get("items") or []:
            try:
                entries.append(CatalogEntry.model_validate(item))
            except ValueError as e:
                logger.debug(f"Skipping malformed catalog item: {e}")
        return entries

    def refresh(self) -> None:
        """Forget the memoized catalog listing."""
        self._fonts_cache = None
        logger.debug("Font catalog cache cleared")

    def search(self, family_name: str, strict: bool = False) -> CatalogEntry | None:
        """
        Find a family by name, ignoring whitespace and case.

        Args:
            family_name: Family to look up
            strict: Raise CatalogUnavailableError instead of treating an
                unreachable catalog as empty

        Returns:
            CatalogEntry if listed, None otherwise
        """
        wanted = normalize_family(family_name)
        for entry in self.list_fonts(strict=strict):
            if entry.normalized_family == wanted:
                return entry
        return None

    def build_stylesheet_url(self, family: str, variants: list[str]) -> str:
        """URL of the generated stylesheet for ``family`` at the given weights."""
        return (
            f"{self.config.css_url}?family={quote(family)}:wght@{build_weight_param(variants)}"
            "&display=swap"
        )

    def get_font_files(
        self, family: str, variants: list[str] | None = None
    ) -> list[FontFileDescriptor]:
        """
        Resolve downloadable files for a family.

        Args:
            family: Family name
            variants: Variant labels (``regular``, ``700``); defaults to regular

        Returns:
            One descriptor per variant the stylesheet declares; empty on failure
        """
        variants = variants or ["regular"]
        url = self.build_stylesheet_url(family, variants)

        try:
            # The browser-like agent is what makes the endpoint serve woff2
            response = self.session.get(
                url,
                headers={"User-Agent": self.config.user_agent},
                timeout=self.config.timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to get font files for {family}: {e}")
            return []

        requested = {variant_to_weight(v) for v in variants}
        descriptors = [
            d
            for d in select_one_per_variant(parse_font_face_blocks(response.text))
            if d.numeric_weight in requested
        ]
        logger.debug(f"Stylesheet for {family} declares {len(descriptors)} variants")
        return descriptors

    def download(self, descriptor: FontFileDescriptor, target_dir: Path) -> Path | None:
        """
        Fetch a font binary and write it under ``target_dir``.

        Network failures are logged and return None. Filesystem errors propagate.

        Args:
            descriptor: File to download
            target_dir: Directory to write into (created if absent)

        Returns:
            Path of the written file, or None if the download failed
        """
        try:
            response = self.session.get(descriptor.source_url, timeout=self.config.timeout_seconds)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Failed to download font {descriptor.family} {descriptor.variant}: {e}")
            return None

        target_dir = Path(target_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        file_path = target_dir / font_filename(descriptor)
        file_path.write_bytes(response.content)

        logger.info(f"Downloaded {descriptor.family} {descriptor.variant} to {file_path}")
        return file_path

    def get_font_license(self, family: str) -> str | None:
        """License text for a catalog family; the catalog is uniformly open-licensed."""
        if self.search(family) is None:
            return None
        return OPEN_FONT_LICENSE

    def cleanup(self) -> None:
        """Cleanup client resources."""
        if hasattr(self, "session"):
            self.session.close()
