"""
Bundle Templates
================

Text generation for production bundle artifacts: per-font stylesheets, the
Next.js ``localFont`` module, license notices and the aggregate integration
guide.
"""

from datetime import datetime
from pathlib import Path
import re

from fontify.core.exceptions import UnsupportedVariantError
from fontify.core.models import (
    BundleOptions,
    BundleResult,
    Framework,
    sanitize_font_name,
    variant_to_weight,
)

CDN_STYLESHEET_URL = "https://fonts.googleapis.com/css2"
CDN_PRECONNECT_HOSTS = ["https://fonts.googleapis.com", "https://fonts.gstatic.com"]

LICENSE_NAME = "SIL Open Font License, Version 1.1"
LICENSE_URL = "https://openfontlicense.org"

# CSS format() hints differ from file extensions for TrueType
FORMAT_HINTS = {"ttf": "truetype"}


def font_slug(family: str) -> str:
    """Lower-case slug used in class names and custom properties."""
    return sanitize_font_name(family).strip("-").lower()


def js_identifier(family: str) -> str:
    """camelCase identifier for generated modules, e.g. ``ibmPlexMono``."""
    words = [w for w in re.split(r"[^a-zA-Z0-9]+", family) if w]
    if not words:
        return "font"
    identifier = words[0].lower() + "".join(w[:1].upper() + w[1:].lower() for w in words[1:])
    if identifier[0].isdigit():
        identifier = f"font{identifier[0].upper()}{identifier[1:]}"
    return identifier


def cdn_stylesheet_url(family: str, variants: list[str]) -> str:
    """Catalog CDN stylesheet URL: spaces become ``+``, weights ascend."""
    family_param = re.sub(r"\s+", "+", family.strip())
    weights = ";".join(str(w) for w in sorted({variant_to_weight(v) for v in variants}))
    return f"{CDN_STYLESHEET_URL}?family={family_param}:wght@{weights}&display=swap"


def weight_from_filename(path: Path) -> int:
    """Weight encoded in ``<family>-<variant>.<ext>``; ``regular`` is 400."""
    variant = Path(path).stem.rsplit("-", 1)[-1]
    try:
        return variant_to_weight(variant)
    except UnsupportedVariantError:
        return 400


def generate_font_face_css(
    family: str,
    font_files: list[Path],
    url_base: str | None = None,
    cdn_url: str | None = None,
) -> str:
    """
    Build the per-font stylesheet.

    Args:
        family: Family name as declared in CSS
        font_files: Successfully downloaded files (one ``@font-face`` each)
        url_base: Site path of the font directory, e.g. ``assets/fonts/Roboto``;
            files are referenced relative to the stylesheet when omitted
        cdn_url: Catalog stylesheet to ``@import`` when the CDN is used

    Returns:
        Stylesheet text
    """
    slug = font_slug(family)
    prefix = f"/{url_base.strip('/')}/" if url_base else "./"
    parts = [f"/* {family} Font Family */\n\n"]

    # @import must precede every other rule
    if cdn_url:
        parts.append(f"@import url('{cdn_url}');\n\n")

    for font_file in font_files:
        font_file = Path(font_file)
        extension = font_file.suffix.lstrip(".")
        hint = FORMAT_HINTS.get(extension, extension)
        parts.append(
            "@font-face {\n"
            f"  font-family: '{family}';\n"
            f"  src: url('{prefix}{font_file.name}') format('{hint}');\n"
            f"  font-weight: {weight_from_filename(font_file)};\n"
            "  font-style: normal;\n"
            "  font-display: swap;\n"
            "}\n\n"
        )

    parts.append("/* Utility Classes */\n")
    parts.append(f".font-{slug} {{\n  font-family: '{family}', sans-serif;\n}}\n\n")
    parts.append(f":root {{\n  --font-{slug}: '{family}', sans-serif;\n}}\n")

    return "".join(parts)


def generate_nextjs_module(family: str, font_files: list[Path]) -> str:
    """``next/font/local`` module sourcing every downloaded file."""
    slug = font_slug(family)
    identifier = js_identifier(family)

    lines = ["import localFont from 'next/font/local';", ""]
    lines.append(f"export const {identifier} = localFont({{")
    lines.append("  src: [")
    for font_file in font_files:
        lines.extend(
            [
                "    {",
                f"      path: './{Path(font_file).name}',",
                f"      weight: '{weight_from_filename(font_file)}',",
                "      style: 'normal',",
                "    },",
            ]
        )
    lines.extend(
        [
            "  ],",
            "  display: 'swap',",
            f"  variable: '--font-{slug}',",
            "});",
            "",
            "// Usage in your components:",
            f"// <div className={{`${{{identifier}.variable}} font-{slug}`}}>",
            "//   Your content here",
            "// </div>",
            "",
        ]
    )
    return "\n".join(lines)


def generate_license_text(family: str, downloaded_at: datetime) -> str:
    """License notice written next to each bundled family."""
    return (
        f"Font: {family}\n"
        "Source: Google Fonts\n"
        f"License: {LICENSE_NAME}\n"
        f"Downloaded: {downloaded_at.isoformat()}\n"
        "\n"
        f"This font software is licensed under the {LICENSE_NAME}.\n"
        "You can use this font freely in your projects, both personal and commercial.\n"
        "\n"
        f"For full license details, visit: {LICENSE_URL}\n"
    )


def _fenced(language: str, body: list[str]) -> list[str]:
    return [f"```{language}", *body, "```", ""]


def generate_integration_guide(
    results: list[BundleResult], options: BundleOptions, generated_at: datetime
) -> str:
    """
    Aggregate Markdown guide for a bundling run.

    Self-hosted snippets are only emitted for fonts with at least one written
    file; fonts that failed outright are listed at the end.
    """
    bundled = [r for r in results if r.error is None]
    lines = [
        "# Font Integration Guide",
        "",
        f"Generated on: {generated_at.isoformat(timespec='seconds')}",
        f"Strategy: {options.strategy.value}",
        f"Framework: {options.framework.value}",
        f"Output directory: {options.output_dir}",
        "",
    ]

    if options.strategy.uses_cdn:
        lines.extend(["## CDN Integration", "", "Add to your HTML `<head>`:", ""])
        if options.include_preload:
            lines.extend(
                _fenced(
                    "html",
                    [
                        f'<link rel="preconnect" href="{CDN_PRECONNECT_HOSTS[0]}">',
                        f'<link rel="preconnect" href="{CDN_PRECONNECT_HOSTS[1]}" crossorigin>',
                    ],
                )
            )
        lines.extend(
            _fenced(
                "html",
                [f'<link href="{r.cdn_url}" rel="stylesheet">' for r in bundled if r.cdn_url],
            )
        )
        lines.extend(["Or import from CSS:", ""])
        lines.extend(
            _fenced("css", [f"@import url('{r.cdn_url}');" for r in bundled if r.cdn_url])
        )

    if options.strategy.self_hosted:
        hosted = [r for r in bundled if r.written_font_file_paths and r.css_file_path]
        lines.extend(["## Self-Hosted Integration", ""])
        if hosted:
            lines.extend(["Import the CSS files (paths relative to the project root):", ""])
            lines.extend(
                _fenced(
                    "css",
                    [f"@import url('./{r.css_file_path.as_posix()}');" for r in hosted],
                )
            )
        else:
            lines.extend(["No font files were downloaded.", ""])

        if options.framework == Framework.NEXTJS:
            snippets = [r for r in hosted if r.framework_snippet]
            if snippets:
                lines.extend(["### Next.js Integration", ""])
                for result in snippets:
                    lines.extend(_fenced("typescript", [result.framework_snippet.rstrip("\n")]))
        elif options.framework in (Framework.REACT, Framework.VUE) and hosted:
            entry = "src/main.jsx" if options.framework == Framework.REACT else "src/main.js"
            lines.extend(
                [f"### {options.framework.value.capitalize()} Integration", "", f"In `{entry}`:", ""]
            )
            lines.extend(
                _fenced(
                    "javascript",
                    [f"import '/{r.css_file_path.as_posix()}';" for r in hosted],
                )
            )

    lines.extend(["## CSS Usage", ""])
    for result in bundled:
        slug = font_slug(result.font_family)
        lines.extend(
            _fenced(
                "css",
                [
                    f"/* Using {result.font_family} */",
                    ".your-class {",
                    f"  font-family: '{result.font_family}', sans-serif;",
                    "}",
                    "",
                    "/* Or use the utility class / custom property */",
                    f"/* <p class=\"font-{slug}\"> */",
                    ".another-class {",
                    f"  font-family: var(--font-{slug});",
                    "}",
                ],
            )
        )

    failed = [r for r in results if r.error is not None]
    if failed:
        lines.extend(["## Fonts Not Bundled", ""])
        lines.extend(f"- **{r.font_family}**: {r.error}" for r in failed)
        lines.append("")

    return "\n".join(lines)
