"""Framework inference from a project's manifest and directory layout."""

import json
import logging
from pathlib import Path

from fontify.core.models import Framework, FrameworkSuggestion

from .detector import manifest_dependencies

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = "assets/fonts"

# Checked in order; the first directory that exists wins
CONVENTIONAL_ASSET_DIRS = ["public", "assets", "src/assets", "static"]

BUNDLER_DEPENDENCIES = ("vite", "webpack", "parcel", "@vitejs/plugin-react")


class FrameworkInferencer:
    """Suggests a target framework and output directory for generated fonts.

    The suggestion is best-effort; callers may override both values.
    """

    def __init__(self, manifest_name: str = "package.json"):
        self.manifest_name = manifest_name

    def infer(self, project_root: str | Path) -> FrameworkSuggestion:
        """
        Infer the framework used by a project.

        Args:
            project_root: Workspace root

        Returns:
            FrameworkSuggestion with a relative output directory
        """
        root = Path(project_root)

        suggestion = self._infer_from_manifest(root)
        if suggestion is not None:
            logger.info(f"Detected {suggestion.name.value} from {self.manifest_name}")
            return suggestion

        for asset_dir in CONVENTIONAL_ASSET_DIRS:
            if (root / asset_dir).is_dir():
                logger.info(f"Using existing asset directory {asset_dir}")
                return FrameworkSuggestion(
                    name=Framework.VANILLA,
                    default_output_dir=f"{asset_dir}/fonts",
                    was_detected_from_manifest=False,
                )

        return FrameworkSuggestion(
            name=Framework.VANILLA,
            default_output_dir=DEFAULT_OUTPUT_DIR,
            was_detected_from_manifest=False,
        )

    def _infer_from_manifest(self, root: Path) -> FrameworkSuggestion | None:
        manifest_path = root / self.manifest_name
        if not manifest_path.is_file():
            return None

        try:
            manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read {manifest_path}: {e}")
            return None

        if not isinstance(manifest, dict):
            return None

        return suggest_from_dependencies(set(manifest_dependencies(manifest)))


def suggest_from_dependencies(deps: set[str]) -> FrameworkSuggestion | None:
    """Apply the manifest rules in priority order."""

    def _suggest(framework: Framework, output_dir: str) -> FrameworkSuggestion:
        return FrameworkSuggestion(
            name=framework, default_output_dir=output_dir, was_detected_from_manifest=True
        )

    # Full-stack meta-frameworks serve public/ as-is
    if "next" in deps:
        return _suggest(Framework.NEXTJS, "public/fonts")
    if "nuxt" in deps or "nuxt3" in deps:
        return _suggest(Framework.VUE, "public/fonts")

    if "react" in deps:
        if "react-scripts" in deps:
            return _suggest(Framework.REACT, "public/fonts")
        if any(dep in deps for dep in BUNDLER_DEPENDENCIES):
            return _suggest(Framework.REACT, "src/assets/fonts")
        return _suggest(Framework.REACT, "src/fonts")

    if "vue" in deps:
        return _suggest(Framework.VUE, "src/assets/fonts")

    return None
