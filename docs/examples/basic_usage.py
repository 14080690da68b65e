"""
Basic Usage Examples
====================

This module demonstrates basic usage patterns for fontify: detecting the
fonts a project references and bundling them for production.
"""

import threading
from pathlib import Path

from fontify import BundleOptions, Framework, HostingStrategy, api
from fontify.bundling import ConsoleProgressCallback
from fontify.core.config import AppConfig
from fontify.services import create_services

PROJECT_ROOT = Path("examples/my-site")


def example_detect_fonts():
    """
    Simplest way to see which fonts a project uses.
    """
    print("=== Font Detection ===")

    with create_services() as services:
        result = api.detect_fonts(services, PROJECT_ROOT)

        if not result.success:
            print(f"❌ Detection failed: {result.error}")
            return

        for font in result.value:
            origin = f" in {font.origin_path}" if font.origin_path else ""
            print(f"   🔤 {font.name} ({font.source.value}){origin}")


def example_self_hosted_bundle():
    """
    Bundle detected fonts with defaults inferred from package.json.
    """
    print("\n=== Self-Hosted Bundle ===")

    with create_services() as services:
        detected = api.detect_fonts(services, PROJECT_ROOT)
        names = [font.name for font in detected.value or []]

        result = api.make_production_ready(
            services,
            names,
            project_root=PROJECT_ROOT,
            progress_callback=ConsoleProgressCallback(),
        )

        if not result.success:
            print(f"❌ Bundling failed ({result.error_kind.value}): {result.error}")
            return

        run = result.value
        for font_result in run.results:
            status = "✅" if font_result.succeeded else "❌"
            print(f"   {status} {font_result.font_family}: {font_result.css_file_path}")
        print(f"   📖 Guide: {run.guide_path}")


def example_nextjs_with_cdn_fallback():
    """
    Explicit options: self-hosted files plus a CDN import for a Next.js app.
    """
    print("\n=== Next.js Bundle ===")

    options = BundleOptions(
        strategy=HostingStrategy.BOTH,
        variants=["regular", "700"],
        output_dir="public/fonts",
        framework=Framework.NEXTJS,
    )

    with create_services() as services:
        result = api.make_production_ready(
            services, ["Inter", "JetBrains Mono"], options, project_root=PROJECT_ROOT
        )

        if result.success:
            for font_result in result.value.results:
                if font_result.framework_module_path:
                    print(f"   ⚛️  {font_result.framework_module_path}")


def example_custom_configuration():
    """
    Load settings from YAML and cancel a long scan from another thread.
    """
    print("\n=== Custom Configuration ===")

    config = AppConfig.from_env_and_yaml("fontify.yaml")
    cancel = threading.Event()

    with create_services(config) as services:
        timer = threading.Timer(5.0, cancel.set)
        timer.start()
        result = api.detect_fonts(services, PROJECT_ROOT, cancel_event=cancel)
        timer.cancel()

        print(f"   Scanned with max {config.detection.max_files_per_glob} files per glob")
        print(f"   Result: {'ok' if result.success else result.error}")


def example_install_locally():
    """
    Install a family into the user's fonts directory for local design work.
    """
    print("\n=== Local Install ===")

    with create_services() as services:
        availability = api.check_font_availability(services, "Lexend")
        if not (availability.success and availability.value.available):
            print("   Lexend is not in the catalog")
            return

        result = api.install_fonts(services, ["Lexend"])
        for install_result in result.value or []:
            print(f"   {install_result.font_name}: {len(install_result.installed_files)} files")


if __name__ == "__main__":
    example_detect_fonts()
    example_self_hosted_bundle()
    example_nextjs_with_cdn_fallback()
    example_custom_configuration()
    example_install_locally()
