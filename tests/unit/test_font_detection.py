"""Tests for Font Detection
========================

Unit tests for font stack parsing, per-source detection and deduplication.
"""

import json
import os
import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from fontify.core.config import DetectionConfig
from fontify.core.models import DetectedFontReference, FontSource
from fontify.detection.detector import (
    FONT_FAMILY_PATTERN,
    FontDetector,
    deduplicate,
    is_system_font,
    manifest_dependencies,
    normalize_text,
    parse_font_family,
    render_detection_report,
)


class TestParseFontFamily:
    """Test font stack parsing."""

    def test_quoted_name_with_generic_fallback(self):
        """Test quotes are stripped and generic families dropped."""
        assert parse_font_family("'Inter', sans-serif") == ["Inter"]

    def test_declaration_value_from_pattern(self):
        """Test a full declaration parsed through the detector pattern."""
        detector = FontDetector(DetectionConfig(_env_file=None))
        match = FONT_FAMILY_PATTERN.search("font-family: 'Inter', sans-serif;")
        names = detector._parse(match.group(1))

        assert names == ["Inter"]

    def test_limit_applies_to_custom_names(self):
        """Test at most three names are kept from a long stack."""
        stack = "'A One', 'B Two', 'C Three', 'D Four', 'E Five'"

        assert parse_font_family(stack) == ["A One", "B Two", "C Three"]

    def test_custom_limit(self):
        """Test the limit is configurable."""
        assert parse_font_family("A, B, C, D", limit=2) == ["A", "B"]

    def test_system_fonts_filtered(self):
        """Test platform fonts are never reported."""
        assert parse_font_family("-apple-system, BlinkMacSystemFont, 'Segoe UI', Arial") == []

    def test_noise_tokens_dropped(self):
        """Test variables, functions and !important are handled."""
        value = "$body-font, var(--font), @base, 'Lato' !important, #{$x}"

        assert parse_font_family(value) == ["Lato"]

    def test_nested_array_brackets_stripped(self):
        """Test the tuple form of a utility config yields a clean family name."""
        assert parse_font_family("['Inter', 'sans-serif'") == ["Inter"]
        assert parse_font_family("{ fontFeatureSettings: 'cv11' }, 'Lato'") == ["Lato"]

    def test_double_quotes_and_backticks(self):
        """Test all quote styles are stripped."""
        assert parse_font_family('"Fira Code", `Source Serif`') == ["Fira Code", "Source Serif"]

    def test_is_system_font_case_insensitive(self):
        """Test the system font check ignores case."""
        assert is_system_font("Helvetica Neue")
        assert is_system_font("SANS-SERIF")
        assert not is_system_font("Inter")

    def test_normalize_text(self):
        """Test control characters are removed and whitespace collapsed."""
        assert normalize_text("a\x00b\n\n  c\td") == "ab c d"


class TestDeduplicate:
    """Test reference deduplication."""

    def test_first_occurrence_wins(self):
        """Test case-insensitive dedup keeps the first reference unchanged."""
        first = DetectedFontReference(name="Inter", source=FontSource.STYLESHEET)
        second = DetectedFontReference(
            name="inter", source=FontSource.MANIFEST, known_installed=True
        )

        result = deduplicate([first, second])

        assert result == [first]
        assert result[0].known_installed is None


class TestFontDetector:
    """Test FontDetector against project trees."""

    @pytest.fixture
    def detector(self, detection_config):
        return FontDetector(detection_config)

    def test_detect_sample_project(self, detector, sample_project):
        """Test all sources are scanned and merged in order."""
        fonts = detector.detect(sample_project)

        assert [f.name for f in fonts] == [
            "Inter",
            "Fira Code",
            "Playfair Display",
            "Lexend",
            "open sans",
        ]
        assert fonts[0].source == FontSource.STYLESHEET
        assert fonts[0].origin_path == sample_project / "src" / "styles" / "main.css"
        assert fonts[3].source == FontSource.UTILITY_CONFIG

    def test_excluded_directories_skipped(self, detector, sample_project):
        """Test node_modules content is never scanned."""
        names = {f.name for f in detector.detect(sample_project)}

        assert "Vendor Font" not in names

    def test_host_setting_comes_first(self, detector, sample_project):
        """Test the editor font is reported before project sources."""
        fonts = detector.detect(sample_project, host_font_family="'Fira Code', monospace")

        assert fonts[0].name == "Fira Code"
        assert fonts[0].source == FontSource.HOST_SETTING
        assert sum(1 for f in fonts if f.key == "fira code") == 1

    def test_host_setting_from_config(self, sample_project):
        """Test the configured editor font is used when none is passed."""
        detector = FontDetector(
            DetectionConfig(_env_file=None, editor_font_family="'JetBrains Mono', monospace")
        )

        assert detector.detect_from_host_setting()[0].name == "JetBrains Mono"

    def test_duplicate_across_files_attributed_to_first(self, detector, temp_dir):
        """Test the same family in two files is reported once, for the first file."""
        (temp_dir / "a.css").write_text("body { font-family: 'Inter', sans-serif; }")
        (temp_dir / "b.css").write_text("p { font-family: INTER; }")

        fonts = detector.detect(temp_dir)

        assert len(fonts) == 1
        assert fonts[0].name == "Inter"
        assert fonts[0].origin_path == temp_dir / "a.css"

    def test_manifest_font_package(self, detector, temp_dir):
        """Test a font package dependency becomes an installed reference."""
        (temp_dir / "package.json").write_text(
            json.dumps({"dependencies": {"@fontsource/open-sans": "^1.0.0"}})
        )

        fonts = detector.detect(temp_dir)

        assert len(fonts) == 1
        assert fonts[0].name == "open sans"
        assert fonts[0].known_installed is True
        assert fonts[0].source == FontSource.MANIFEST

    def test_variable_font_package_and_dev_dependencies(self, detector, temp_dir):
        """Test dev dependencies and the variable-font namespace are read."""
        (temp_dir / "package.json").write_text(
            json.dumps({"devDependencies": {"@fontsource-variable/inter": "^5.0.0"}})
        )

        assert [f.name for f in detector.detect(temp_dir)] == ["inter"]

    def test_malformed_manifest_skipped(self, detector, temp_dir):
        """Test an unparsable manifest is logged and skipped."""
        (temp_dir / "package.json").write_text("{ not json")
        (temp_dir / "style.css").write_text("h1 { font-family: 'Lato'; }")

        assert [f.name for f in detector.detect(temp_dir)] == ["Lato"]

    def test_unreadable_stylesheet_skipped(self, detector, temp_dir):
        """Test a read failure on one stylesheet does not abort the scan."""
        (temp_dir / "a.css").write_text("h1 { font-family: 'Lato'; }")
        (temp_dir / "b.css").write_text("h2 { font-family: 'Merriweather'; }")

        original_read_text = type(temp_dir).read_text

        def flaky_read_text(path, *args, **kwargs):
            if path.name == "a.css":
                raise PermissionError("denied")
            return original_read_text(path, *args, **kwargs)

        with patch.object(type(temp_dir), "read_text", flaky_read_text):
            fonts = detector.detect_from_stylesheets(temp_dir)

        assert [f.name for f in fonts] == ["Merriweather"]

    def test_file_cap_per_glob(self, detector, temp_dir):
        """Test only the first 20 matching stylesheets are inspected."""
        for i in range(25):
            (temp_dir / f"style{i:02d}.css").write_text(f"p {{ font-family: 'Family {i:02d}'; }}")

        fonts = detector.detect_from_stylesheets(temp_dir)

        assert len(fonts) == 20
        assert fonts[0].name == "Family 00"
        assert fonts[-1].name == "Family 19"

    def test_file_cap_is_configurable(self, temp_dir):
        """Test the per-glob cap follows configuration."""
        for i in range(5):
            (temp_dir / f"s{i}.css").write_text(f"p {{ font-family: 'F{i}'; }}")
        detector = FontDetector(DetectionConfig(_env_file=None, max_files_per_glob=2))

        assert len(detector.detect_from_stylesheets(temp_dir)) == 2

    def test_manifests_not_capped(self, detector, temp_dir):
        """Test manifest discovery has no per-glob cap."""
        for i in range(22):
            package_dir = temp_dir / "packages" / f"p{i:02d}"
            package_dir.mkdir(parents=True)
            (package_dir / "package.json").write_text(
                json.dumps({"dependencies": {f"@fontsource/font-{i:02d}": "1.0.0"}})
            )

        assert len(detector.detect_from_manifests(temp_dir)) == 22

    def test_utility_config_detection(self, detector, temp_dir):
        """Test fontFamily keys in a tailwind config are parsed."""
        (temp_dir / "tailwind.config.ts").write_text(
            "export default { theme: { fontFamily: {\n"
            "  body: ['Nunito', 'sans-serif'],\n"
            "  'mono-code': ['\"IBM Plex Mono\"', 'monospace'],\n"
            "} } }"
        )

        fonts = detector.detect_from_utility_configs(temp_dir)

        assert [f.name for f in fonts] == ["Nunito", "IBM Plex Mono"]
        assert all(f.source == FontSource.UTILITY_CONFIG for f in fonts)

    def test_utility_config_tuple_form(self, detector, temp_dir):
        """Test a family declared with font feature settings keeps its plain name."""
        (temp_dir / "tailwind.config.js").write_text(
            "module.exports = { theme: { fontFamily: {\n"
            "  sans: [['Inter', 'sans-serif'], { fontFeatureSettings: '\"cv11\"' }],\n"
            "} } }"
        )

        fonts = detector.detect_from_utility_configs(temp_dir)

        assert [f.name for f in fonts] == ["Inter"]

    def test_excluded_directories_never_entered(self, detector, temp_dir):
        """Test excluded trees are pruned before they are walked."""
        (temp_dir / "node_modules" / "pkg").mkdir(parents=True)
        (temp_dir / "node_modules" / "pkg" / "vendor.css").write_text("p { font-family: 'Vendor'; }")
        (temp_dir / "app.css").write_text("p { font-family: 'Lato'; }")
        visited = []
        real_walk = os.walk

        def recording_walk(top, *args, **kwargs):
            for dirpath, dirnames, filenames in real_walk(top, *args, **kwargs):
                visited.append(Path(dirpath).name)
                yield dirpath, dirnames, filenames

        with patch("fontify.detection.detector.os.walk", recording_walk):
            files = detector.find_files(temp_dir, ["**/*.css"])

        assert files == [temp_dir / "app.css"]
        assert "node_modules" not in visited
        assert "pkg" not in visited

    def test_root_only_pattern_does_not_descend(self, detector, temp_dir):
        """Test patterns without a directory part match at the root only."""
        (temp_dir / "tailwind.config.js").write_text("")
        (temp_dir / "packages" / "ui").mkdir(parents=True)
        (temp_dir / "packages" / "ui" / "tailwind.config.js").write_text("")

        assert detector.find_files(temp_dir, ["tailwind.config.*"]) == [
            temp_dir / "tailwind.config.js"
        ]

    def test_recursive_pattern_matches_root_and_nested(self, detector, temp_dir):
        """Test a leading **/ matches files at every depth, in path order."""
        (temp_dir / "b").mkdir()
        (temp_dir / "b" / "package.json").write_text("{}")
        (temp_dir / "package.json").write_text("{}")

        assert detector.find_files(temp_dir, ["**/package.json"], limit=None) == [
            temp_dir / "b" / "package.json",
            temp_dir / "package.json",
        ]

    def test_cancel_stops_between_files(self, detector, temp_dir):
        """Test a set cancel event stops scanning."""
        (temp_dir / "a.css").write_text("p { font-family: 'Lato'; }")
        event = threading.Event()
        event.set()

        assert detector.detect(temp_dir, cancel_event=event) == []

    def test_empty_project(self, detector, temp_dir):
        """Test an empty project yields nothing."""
        assert detector.detect(temp_dir) == []


class TestManifestHelpers:
    """Test manifest helpers and reports."""

    def test_manifest_dependencies_combined(self):
        """Test runtime and dev dependencies are merged."""
        deps = manifest_dependencies(
            {"dependencies": {"next": "14"}, "devDependencies": {"vite": "5"}, "peer": {}}
        )

        assert set(deps) == {"next", "vite"}

    def test_manifest_dependencies_ignores_bad_sections(self):
        """Test non-mapping sections are ignored."""
        assert manifest_dependencies({"dependencies": ["react"]}) == {}

    def test_render_detection_report(self, temp_dir):
        """Test the report groups fonts by source."""
        fonts = [
            DetectedFontReference(
                name="Inter", source=FontSource.STYLESHEET, origin_path=temp_dir / "a.css"
            ),
            DetectedFontReference(name="open sans", source=FontSource.MANIFEST, known_installed=True),
        ]

        report = render_detection_report(fonts)

        assert report.startswith("# Detected Fonts")
        assert "## STYLESHEET" in report
        assert "## MANIFEST" in report
        assert "- **open sans** - Installed" in report
        assert str(temp_dir / "a.css") in report
