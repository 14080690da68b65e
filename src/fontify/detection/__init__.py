"""Font reference detection and framework inference."""

from .detector import FontDetector, parse_font_family, render_detection_report
from .framework import FrameworkInferencer

__all__ = ["FontDetector", "FrameworkInferencer", "parse_font_family", "render_detection_report"]
