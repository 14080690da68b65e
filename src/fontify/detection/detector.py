"""
Font Detection
==============

Finds font-family names referenced by a project: the host editor's font
setting, stylesheets, utility-framework config files and package manifests.

Parsing is pattern matching over normalized text, not a real CSS/JS parser.
Nested braces, comments and preprocessor interpolation can hide or invent
matches.
"""

import fnmatch
import json
import logging
import os
import re
import threading
from collections.abc import Iterable
from pathlib import Path

from fontify.core.config import DetectionConfig
from fontify.core.models import DetectedFontReference, FontSource

logger = logging.getLogger(__name__)

FONT_FAMILY_PATTERN = re.compile(r"font-family\s*:\s*([^;}]+)", re.IGNORECASE)
UTILITY_FONT_BLOCK_PATTERN = re.compile(r"fontFamily\s*:\s*\{([^}]*)\}")
UTILITY_FONT_KEY_PATTERN = re.compile(r"['\"`]?([\w-]+)['\"`]?\s*:\s*\[([^\]]+)\]")
CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
WHITESPACE_PATTERN = re.compile(r"\s+")

SYSTEM_FONTS = frozenset(
    {
        "serif",
        "sans-serif",
        "monospace",
        "cursive",
        "fantasy",
        "system-ui",
        "ui-serif",
        "ui-sans-serif",
        "ui-monospace",
        "ui-rounded",
        "emoji",
        "math",
        "fangsong",
        "arial",
        "helvetica",
        "helvetica neue",
        "times",
        "times new roman",
        "courier",
        "courier new",
        "georgia",
        "verdana",
        "-apple-system",
        "blinkmacsystemfont",
        "segoe ui",
        "inherit",
        "initial",
        "unset",
        "revert",
    }
)


def is_system_font(name: str) -> bool:
    """True for generic families and fonts every platform already ships."""
    return name.lower() in SYSTEM_FONTS


def normalize_text(text: str) -> str:
    """Strip NUL and other control characters and collapse whitespace runs."""
    return WHITESPACE_PATTERN.sub(" ", CONTROL_CHARS_PATTERN.sub("", text))


def _clean_token(token: str) -> str | None:
    # Brackets come from nested arrays such as [['Inter', 'sans-serif'], {...}]
    name = token.replace("!important", "").strip().strip("[]").strip().strip("'\"`").strip()
    if not name:
        return None
    # Variables, functions, spreads and object literals are not family names
    if name.startswith(("$", "@", "...", "--", "{")) or "(" in name or "#{" in name or ":" in name:
        return None
    return name


def parse_font_family(value: str, limit: int = 3) -> list[str]:
    """
    Parse a comma-separated font stack.

    Args:
        value: Raw font stack, e.g. ``'Inter', sans-serif``
        limit: Maximum number of names returned

    Returns:
        Up to ``limit`` custom family names, in declaration order
    """
    names = []
    for token in value.split(","):
        name = _clean_token(token)
        if name and not is_system_font(name):
            names.append(name)
    return names[:limit]


def deduplicate(fonts: Iterable[DetectedFontReference]) -> list[DetectedFontReference]:
    """Case-insensitive on name; the first occurrence wins outright."""
    unique: dict[str, DetectedFontReference] = {}
    for font in fonts:
        if font.key not in unique:
            unique[font.key] = font
    return list(unique.values())


class FontDetector:
    """
    Scans a project for font-family references.

    Each source is scanned independently; a file that cannot be read or
    parsed is logged and skipped.
    """

    def __init__(self, config: DetectionConfig | None = None):
        self.config = config or DetectionConfig()

    def detect(
        self,
        project_root: str | Path,
        host_font_family: str | None = None,
        cancel_event: threading.Event | None = None,
    ) -> list[DetectedFontReference]:
        """
        Detect fonts referenced by a project.

        Args:
            project_root: Workspace root
            host_font_family: Editor font stack; defaults to the configured value
            cancel_event: Optional event; scanning stops between files once set

        Returns:
            Deduplicated references, host setting first
        """
        root = Path(project_root)
        fonts: list[DetectedFontReference] = []

        fonts.extend(self.detect_from_host_setting(host_font_family))
        if self._cancelled(cancel_event):
            return []

        fonts.extend(self.detect_from_stylesheets(root, cancel_event))
        fonts.extend(self.detect_from_utility_configs(root, cancel_event))
        fonts.extend(self.detect_from_manifests(root, cancel_event))

        unique = deduplicate(fonts)
        logger.info(f"Detected {len(unique)} fonts ({len(fonts)} references) in {root}")
        return unique

    def detect_from_host_setting(self, font_family: str | None = None) -> list[DetectedFontReference]:
        """References from the host editor's configured font stack."""
        font_family = font_family if font_family is not None else self.config.editor_font_family
        if not font_family:
            return []

        return [
            DetectedFontReference(name=name, source=FontSource.HOST_SETTING)
            for name in self._parse(font_family)
        ]

    def detect_from_stylesheets(
        self, root: Path, cancel_event: threading.Event | None = None
    ) -> list[DetectedFontReference]:
        """References from ``font-family`` declarations in stylesheets."""
        fonts = []

        for file_path in self.find_files(root, self.config.stylesheet_globs):
            if self._cancelled(cancel_event):
                break
            try:
                content = normalize_text(file_path.read_text(encoding="utf-8", errors="replace"))
            except OSError as e:
                logger.warning(f"Failed to read stylesheet {file_path}: {e}")
                continue

            for match in FONT_FAMILY_PATTERN.finditer(content):
                for name in self._parse(match.group(1)):
                    logger.debug(f"Found {name} in {file_path}")
                    fonts.append(
                        DetectedFontReference(
                            name=name, source=FontSource.STYLESHEET, origin_path=file_path
                        )
                    )

        return fonts

    def detect_from_utility_configs(
        self, root: Path, cancel_event: threading.Event | None = None
    ) -> list[DetectedFontReference]:
        """References from ``fontFamily: { key: [...] }`` in utility-framework configs."""
        fonts = []

        for file_path in self.find_files(root, self.config.utility_config_globs):
            if self._cancelled(cancel_event):
                break
            try:
                content = normalize_text(file_path.read_text(encoding="utf-8", errors="replace"))
            except OSError as e:
                logger.warning(f"Failed to read utility config {file_path}: {e}")
                continue

            for block in UTILITY_FONT_BLOCK_PATTERN.finditer(content):
                for key_match in UTILITY_FONT_KEY_PATTERN.finditer(block.group(1)):
                    for name in self._parse(key_match.group(2)):
                        fonts.append(
                            DetectedFontReference(
                                name=name, source=FontSource.UTILITY_CONFIG, origin_path=file_path
                            )
                        )

        return fonts

    def detect_from_manifests(
        self, root: Path, cancel_event: threading.Event | None = None
    ) -> list[DetectedFontReference]:
        """References from font packages declared as manifest dependencies."""
        fonts = []

        for file_path in self.find_files(root, [self.config.manifest_glob], limit=None):
            if self._cancelled(cancel_event):
                break
            try:
                manifest = json.loads(file_path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to parse manifest {file_path}: {e}")
                continue

            if not isinstance(manifest, dict):
                logger.warning(f"Ignoring manifest without a top-level object: {file_path}")
                continue

            for dependency in manifest_dependencies(manifest):
                name = self._font_from_package(dependency)
                if name:
                    fonts.append(
                        DetectedFontReference(
                            name=name,
                            source=FontSource.MANIFEST,
                            origin_path=file_path,
                            known_installed=True,
                        )
                    )

        return fonts

    def _font_from_package(self, dependency: str) -> str | None:
        for prefix in self.config.manifest_prefixes:
            if dependency.startswith(prefix):
                name = dependency[len(prefix) :].replace("-", " ").strip()
                return name or None
        return None

    def find_files(
        self, root: Path, patterns: list[str], limit: int | None = -1
    ) -> list[Path]:
        """
        List files matching any glob, skipping excluded directories.

        Ordering is sorted by relative path so the per-glob cap is deterministic.

        Args:
            root: Directory to search
            patterns: Glob patterns relative to ``root``
            limit: Maximum files returned; -1 uses the configured cap, None disables it
        """
        if limit == -1:
            limit = self.config.max_files_per_glob

        excluded = set(self.config.excluded_dirs)
        recursive = any("/" in pattern for pattern in patterns)
        matches: list[str] = []

        def _on_error(error: OSError) -> None:
            logger.warning(f"Failed to list {error.filename}: {error}")

        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
            # Pruned in place so excluded trees are never entered
            dirnames[:] = [d for d in dirnames if d not in excluded] if recursive else []

            relative_dir = Path(dirpath).relative_to(root).as_posix()
            for filename in filenames:
                relative = filename if relative_dir == "." else f"{relative_dir}/{filename}"
                if any(_glob_matches(relative, pattern) for pattern in patterns):
                    matches.append(relative)

        ordered = [root / relative for relative in sorted(matches)]
        if limit is not None and len(ordered) > limit:
            logger.debug(f"Limiting {patterns} to {limit} of {len(ordered)} files")
            ordered = ordered[:limit]
        return ordered

    def _parse(self, value: str) -> list[str]:
        return parse_font_family(value, self.config.max_fonts_per_declaration)

    @staticmethod
    def _cancelled(cancel_event: threading.Event | None) -> bool:
        return cancel_event is not None and cancel_event.is_set()


def _glob_matches(relative: str, pattern: str) -> bool:
    """Match a root-relative posix path; a leading ``**/`` also matches at the root."""
    if pattern.startswith("**/"):
        tail = pattern[3:]
        return fnmatch.fnmatchcase(relative, tail) or fnmatch.fnmatchcase(relative, f"*/{tail}")
    return fnmatch.fnmatchcase(relative, pattern)


def manifest_dependencies(manifest: dict) -> dict[str, str]:
    """Combined runtime and development dependencies of a package manifest."""
    combined: dict[str, str] = {}
    for section in ("dependencies", "devDependencies"):
        deps = manifest.get(section)
        if isinstance(deps, dict):
            combined.update(deps)
    return combined


def render_detection_report(fonts: list[DetectedFontReference]) -> str:
    """Markdown report of detected fonts grouped by source."""
    by_source: dict[FontSource, list[DetectedFontReference]] = {}
    for font in fonts:
        by_source.setdefault(font.source, []).append(font)

    lines = ["# Detected Fonts", ""]
    for source, source_fonts in by_source.items():
        lines.append(f"## {source.value.upper()}")
        lines.append("")
        for font in source_fonts:
            line = f"- **{font.name}**"
            if font.origin_path:
                line += f" ({font.origin_path})"
            if font.known_installed is not None:
                line += " - Installed" if font.known_installed else " - Not installed"
            lines.append(line)
        lines.append("")

    return "\n".join(lines)
