#!/usr/bin/env python3
"""
Font Catalog Script
===================

Script for browsing the remote font catalog: listing families, showing
variant details, resolving downloadable files and exporting the listing.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fontify.catalog import CatalogClient
from fontify.core.config import CatalogConfig


def setup_logging(level: str = "INFO") -> None:
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def list_families(client: CatalogClient, args) -> None:
    """List catalog families, most popular first."""
    entries = client.list_fonts(strict=True)
    if args.category:
        entries = [e for e in entries if (e.category or "").lower() == args.category.lower()]

    if not entries:
        print("   No fonts found.")
        return

    print(f"📚 Found {len(entries)} font families:")
    for entry in entries[: args.limit]:
        category = f" [{entry.category}]" if entry.category else ""
        print(f"   {entry.family}{category} ({len(entry.available_variants)} variants)")


def font_info(client: CatalogClient, args) -> None:
    """Show catalog details for one family."""
    entry = client.search(args.font_name, strict=True)
    if entry is None:
        print(f"❌ Font not found: {args.font_name}")
        return

    print(f"📄 Font Information: {entry.family}")
    print(f"   Category: {entry.category or 'unknown'}")
    print(f"   Variants: {', '.join(entry.available_variants)}")
    print(f"   Subsets: {', '.join(sorted(entry.supported_subsets))}")
    print(f"   License: {client.get_font_license(entry.family)}")


def resolve_files(client: CatalogClient, args) -> None:
    """Resolve downloadable files for a family."""
    variants = args.variant or ["regular"]
    print(f"🔗 {client.build_stylesheet_url(args.font_name, variants)}")

    descriptors = client.get_font_files(args.font_name, variants)
    if not descriptors:
        print("❌ No font files resolved")
        return

    for descriptor in descriptors:
        subset = f" ({descriptor.subset})" if descriptor.subset else ""
        print(f"   {descriptor.variant} {descriptor.format.value}{subset}: {descriptor.source_url}")


def export_catalog(client: CatalogClient, args) -> None:
    """Export the catalog listing to JSON."""
    output_path = Path(args.output or "font_catalog.json")
    entries = client.list_fonts(strict=True)

    print(f"📤 Exporting {len(entries)} families to {output_path}...")
    output_path.write_text(
        json.dumps([e.model_dump(mode="json") for e in entries], indent=2), encoding="utf-8"
    )
    print("✅ Font catalog exported successfully")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Font catalog maintenance script")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser("list", help="List catalog families")
    list_parser.add_argument("--category", help="Only list this category")
    list_parser.add_argument("--limit", type=int, default=50, help="Maximum families shown")

    info_parser = subparsers.add_parser("info", help="Show font information")
    info_parser.add_argument("font_name", help="Font name to query")

    files_parser = subparsers.add_parser("files", help="Resolve downloadable files")
    files_parser.add_argument("font_name", help="Font name")
    files_parser.add_argument("--variant", action="append", help="Variant (repeatable)")

    export_parser = subparsers.add_parser("export", help="Export catalog listing")
    export_parser.add_argument("--output", help="Output file path")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    setup_logging(args.log_level)

    commands = {
        "list": list_families,
        "info": font_info,
        "files": resolve_files,
        "export": export_catalog,
    }

    client = CatalogClient(CatalogConfig())
    try:
        commands[args.command](client, args)
    except KeyboardInterrupt:
        print("\n❌ Operation cancelled by user")
    except Exception as e:
        print(f"❌ Error: {e}")
        if args.log_level == "DEBUG":
            import traceback

            traceback.print_exc()
    finally:
        client.cleanup()


if __name__ == "__main__":
    main()
