"""
Progress Callbacks
==================

Hooks invoked while fonts are bundled or installed one after another.
"""

import time

from tqdm import tqdm


class BundleProgressCallback:
    """Base class for per-font progress callbacks."""

    def on_start(self, total_fonts: int) -> None:
        """Called before the first font is processed."""

    def on_font_start(self, font_name: str, index: int) -> None:
        """Called when processing of a font starts."""

    def on_font_complete(self, font_name: str, success: bool) -> None:
        """Called when processing of a font completes."""

    def on_error(self, font_name: str, error: Exception) -> None:
        """Called when a font fails with an exception."""

    def on_complete(self, succeeded: int, failed: int) -> None:
        """Called after the last font."""


class ConsoleProgressCallback(BundleProgressCallback):
    """Console progress bar backed by tqdm."""

    def __init__(self, description: str = "Bundling fonts"):
        self.description = description
        self.pbar: tqdm | None = None
        self.start_time: float | None = None

    def on_start(self, total_fonts: int) -> None:
        self.start_time = time.time()
        self.pbar = tqdm(total=total_fonts, desc=self.description, unit="font")

    def on_font_start(self, font_name: str, index: int) -> None:
        if self.pbar is not None:
            self.pbar.set_postfix_str(font_name)

    def on_font_complete(self, font_name: str, success: bool) -> None:
        if self.pbar is not None:
            self.pbar.update(1)
        if not success:
            tqdm.write(f"✗ {font_name}")

    def on_error(self, font_name: str, error: Exception) -> None:
        tqdm.write(f"✗ Error processing {font_name}: {error}")

    def on_complete(self, succeeded: int, failed: int) -> None:
        if self.pbar is not None:
            self.pbar.close()
        elapsed = time.time() - self.start_time if self.start_time else 0
        tqdm.write(f"Done: {succeeded} succeeded, {failed} failed in {elapsed:.1f}s")
