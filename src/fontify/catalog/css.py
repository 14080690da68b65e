"""
Stylesheet Parsing
==================

Regex-based helpers for reading the catalog's generated stylesheet. The
catalog serves one ``@font-face`` block per weight and charset subset, each
preceded by a ``/* subset */`` comment.
"""

import logging
import re

from fontify.core.models import FontFileDescriptor, FontFormat, weight_to_variant

logger = logging.getLogger(__name__)

FONT_FACE_PATTERN = re.compile(r"(?:/\*\s*([\w-]+)\s*\*/\s*)?@font-face\s*\{([^}]*)\}", re.I)
URL_PATTERN = re.compile(r"url\(([^)]+)\)")
FAMILY_PATTERN = re.compile(r"font-family\s*:\s*['\"]([^'\"]+)['\"]")
WEIGHT_PATTERN = re.compile(r"font-weight\s*:\s*(\d+)")

PREFERRED_SUBSET = "latin"


def infer_font_format(url: str) -> FontFormat:
    """Infer the binary format from a URL, preferring woff2 over woff over ttf."""
    path = url.split("?", 1)[0].lower()
    if ".woff2" in path:
        return FontFormat.WOFF2
    if ".woff" in path:
        return FontFormat.WOFF
    if ".ttf" in path:
        return FontFormat.TTF
    return FontFormat.WOFF2


def parse_font_face_blocks(css_text: str) -> list[FontFileDescriptor]:
    """
    Extract one descriptor per ``@font-face`` block.

    Blocks without a ``url(...)`` or a quoted ``font-family`` are skipped.
    A missing ``font-weight`` is read as 400.

    Args:
        css_text: Stylesheet text as served by the catalog

    Returns:
        Descriptors in document order
    """
    descriptors = []

    for match in FONT_FACE_PATTERN.finditer(css_text):
        subset, body = match.group(1), match.group(2)

        url_match = URL_PATTERN.search(body)
        family_match = FAMILY_PATTERN.search(body)
        if not url_match or not family_match:
            logger.debug(f"Skipping @font-face block without url or family: {body.strip()[:80]}")
            continue

        url = url_match.group(1).strip().strip("'\"")
        weight_match = WEIGHT_PATTERN.search(body)
        weight = weight_match.group(1) if weight_match else "400"

        descriptors.append(
            FontFileDescriptor(
                family=family_match.group(1),
                variant=weight_to_variant(weight),
                source_url=url,
                format=infer_font_format(url),
                subset=subset.lower() if subset else None,
            )
        )

    return descriptors


def select_one_per_variant(descriptors: list[FontFileDescriptor]) -> list[FontFileDescriptor]:
    """
    Collapse per-subset duplicates so each variant yields a single file.

    The ``latin`` subset wins; otherwise the last block for the variant is kept.
    Output order follows the first appearance of each variant.
    """
    chosen: dict[str, FontFileDescriptor] = {}

    for descriptor in descriptors:
        current = chosen.get(descriptor.variant)
        if current is None or current.subset != PREFERRED_SUBSET:
            chosen[descriptor.variant] = descriptor

    return list(chosen.values())
