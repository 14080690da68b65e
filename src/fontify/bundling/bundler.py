"""
Production Bundler
==================

Materializes production font bundles: per-font directories holding the
downloaded binaries, a stylesheet, optional framework glue and a license
notice, plus one aggregate integration guide per run.
"""

import logging
import threading
from datetime import datetime
from pathlib import Path

from fontify.catalog.client import CatalogClient
from fontify.core.config import BundleConfig, validate_output_dir
from fontify.core.exceptions import (
    BundleWriteError,
    FontNotFoundError,
    NoWorkspaceError,
    error_kind_for,
)
from fontify.core.models import (
    BundleOptions,
    BundleResult,
    BundleRun,
    Framework,
    sanitize_font_name,
)

from .progress import BundleProgressCallback
from .queue import SequentialTaskQueue
from .templates import (
    cdn_stylesheet_url,
    generate_font_face_css,
    generate_integration_guide,
    generate_license_text,
    generate_nextjs_module,
)

logger = logging.getLogger(__name__)


class ProductionBundler:
    """
    Bundles fonts for production one at a time.

    A failure while bundling one font is recorded on its BundleResult and the
    run continues with the next font. Invalid options and an unusable output
    directory are rejected before anything is downloaded or written.
    """

    def __init__(self, client: CatalogClient, config: BundleConfig | None = None):
        self.client = client
        self.config = config or BundleConfig()

    def bundle(
        self,
        font_names: list[str],
        options: BundleOptions,
        project_root: str | Path,
        progress_callback: BundleProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> BundleRun:
        """
        Bundle fonts and write the integration guide.

        Args:
            font_names: Families to bundle; case-insensitive duplicates are dropped
            options: Strategy, variants, output directory and framework
            project_root: Workspace root all writes are confined to
            progress_callback: Optional per-font progress hooks
            cancel_event: Optional event checked between fonts

        Returns:
            BundleRun with one result per font and the guide location

        Raises:
            NoWorkspaceError: If the project root does not exist
            OutputDirectoryError: If the output directory escapes the project root
            BundleWriteError: If the guide cannot be written
        """
        root = Path(project_root)
        if not root.is_dir():
            raise NoWorkspaceError(str(project_root))
        root = root.resolve()

        output_root = validate_output_dir(options.output_dir, root)
        families = _unique_names(font_names)

        callback = progress_callback or BundleProgressCallback()
        callback.on_start(len(families))
        position = iter(range(len(families)))

        def _bundle(family: str) -> BundleResult:
            callback.on_font_start(family, next(position))
            try:
                result = self.bundle_font(family, options, output_root, root)
            except Exception as e:
                logger.error(f"Failed to bundle {family}: {e}")
                callback.on_error(family, e)
                result = BundleResult(
                    font_family=family,
                    strategy=options.strategy,
                    error=str(e) or type(e).__name__,
                    error_kind=error_kind_for(e),
                )
            callback.on_font_complete(family, result.succeeded)
            return result

        queue = SequentialTaskQueue(self.config.inter_font_delay_seconds)
        results = queue.run(families, _bundle, cancel_event)

        guide_path = output_root / self.config.guide_filename
        guide = generate_integration_guide(results, options, datetime.now())
        _write_text(guide_path, guide)

        run = BundleRun(results=results, guide_path=guide_path.relative_to(root))
        callback.on_complete(len(results) - len(run.failed), len(run.failed))
        logger.info(
            f"Bundled {len(results) - len(run.failed)}/{len(results)} fonts into {options.output_dir}"
        )
        return run

    def bundle_font(
        self, family: str, options: BundleOptions, output_root: Path, project_root: Path
    ) -> BundleResult:
        """
        Bundle a single family.

        Individual variant downloads that fail are left out of the result.
        Filesystem errors propagate to the caller.

        Args:
            family: Family name as detected
            options: Bundle options for the run
            output_root: Resolved output directory
            project_root: Resolved workspace root; result paths are relative to it

        Returns:
            BundleResult for the family
        """
        family = self._canonical_family(family)
        slug = sanitize_font_name(family)
        font_dir = output_root / slug

        written: list[Path] = []
        if options.strategy.self_hosted:
            for descriptor in self.client.get_font_files(family, options.variants):
                path = self.client.download(descriptor, font_dir)
                if path is not None:
                    written.append(path)
            if not written:
                logger.warning(f"No font files downloaded for {family}")

        cdn_url = cdn_stylesheet_url(family, options.variants) if options.strategy.uses_cdn else None

        css_path = font_dir / f"{slug}.css"
        _write_text(
            css_path,
            generate_font_face_css(
                family, written, url_base=f"{options.output_dir}/{slug}", cdn_url=cdn_url
            ),
        )

        module_path = None
        snippet = None
        if options.framework == Framework.NEXTJS and written:
            snippet = generate_nextjs_module(family, written)
            module_path = font_dir / f"{slug}.ts"
            _write_text(module_path, snippet)

        license_path = font_dir / self.config.license_filename
        _write_text(license_path, generate_license_text(family, datetime.now()))

        def _relative(path: Path | None) -> Path | None:
            return path.relative_to(project_root) if path is not None else None

        return BundleResult(
            font_family=family,
            strategy=options.strategy,
            written_font_file_paths=[_relative(p) for p in written],
            css_file_path=_relative(css_path),
            license_file_path=_relative(license_path),
            framework_module_path=_relative(module_path),
            framework_snippet=snippet,
            cdn_url=cdn_url,
        )

    def _canonical_family(self, family: str) -> str:
        """Catalog spelling of ``family``; unchecked when the catalog is unreachable."""
        if not self.client.list_fonts():
            logger.debug(f"Catalog listing unavailable, using {family} as given")
            return family

        entry = self.client.search(family)
        if entry is None:
            raise FontNotFoundError(family)
        return entry.family


def _unique_names(font_names: list[str]) -> list[str]:
    seen = set()
    unique = []
    for name in font_names:
        name = name.strip()
        if name and name.lower() not in seen:
            seen.add(name.lower())
            unique.append(name)
    return unique


def _write_text(path: Path, content: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise BundleWriteError(str(path), str(e)) from e
    logger.debug(f"Wrote {path}")
