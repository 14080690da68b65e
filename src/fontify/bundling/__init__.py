"""Production bundle generation."""

from .bundler import ProductionBundler
from .progress import BundleProgressCallback, ConsoleProgressCallback
from .queue import SequentialTaskQueue

__all__ = [
    "BundleProgressCallback",
    "ConsoleProgressCallback",
    "ProductionBundler",
    "SequentialTaskQueue",
]
