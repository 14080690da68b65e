"""
Fontify CLI
===========

Command-line interface for detecting project fonts and making them
production ready. Exit codes follow ``ErrorKind.exit_code``.
"""

import json
import logging
from pathlib import Path

import click

from . import api
from .bundling.progress import ConsoleProgressCallback
from .core.config import AppConfig
from .core.exceptions import ConfigurationError, ErrorKind, NoFontsSelectedError
from .core.models import Framework, HostingStrategy, OperationResult
from .detection.detector import render_detection_report
from .services import create_services

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def _fail(ctx: click.Context, result: OperationResult) -> None:
    click.echo(f"❌ {result.error}", err=True)
    ctx.exit(result.exit_code)


def _exit_if_all_failed(ctx: click.Context, kinds: list[ErrorKind | None], total: int) -> None:
    """Exit non-zero when a non-empty run produced no successful font."""
    if total and len(kinds) == total:
        click.echo(f"❌ All {total} fonts failed", err=True)
        ctx.exit(next((kind for kind in kinds if kind), ErrorKind.NETWORK).exit_code)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration YAML file",
)
@click.pass_context
def cli(ctx, verbose: bool, config_path: Path | None):
    """Detect the fonts a project uses and bundle them for production."""
    try:
        config = AppConfig.from_env_and_yaml(yaml_path=config_path)
    except (ConfigurationError, ValueError) as e:
        click.echo(f"❌ Invalid configuration: {e}", err=True)
        ctx.exit(ErrorKind.CONFIGURATION.exit_code)

    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    services = create_services(config)
    ctx.ensure_object(dict)
    ctx.obj["services"] = services
    ctx.call_on_close(services.close)


@cli.command()
@click.argument(
    "project_root", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option("--editor-font", help="Editor font stack to include, e.g. \"'Fira Code', monospace\"")
@click.option("--report", type=click.Path(dir_okay=False, path_type=Path), help="Write a Markdown report")
@click.option("--json", "as_json", is_flag=True, help="Print detected fonts as JSON")
@click.pass_context
def detect(ctx, project_root: Path, editor_font: str | None, report: Path | None, as_json: bool):
    """Detect fonts referenced by a project."""
    services = ctx.obj["services"]

    result = api.detect_fonts(services, project_root, host_font_family=editor_font)
    if not result.success:
        _fail(ctx, result)

    fonts = result.value
    if report:
        report.write_text(render_detection_report(fonts), encoding="utf-8")
        logger.info(f"Detection report written to {report}")

    if as_json:
        click.echo(json.dumps([font.model_dump(mode="json") for font in fonts], indent=2))
        return

    if not fonts:
        click.echo("No fonts detected.")
        return

    click.echo(f"\n🔤 Detected Fonts ({len(fonts)}):")
    click.echo("=" * 40)
    for font in fonts:
        origin = f" ({font.origin_path})" if font.origin_path else ""
        installed = " ✓ installed" if font.known_installed else ""
        click.echo(f"  {font.name} [{font.source.value}]{origin}{installed}")


@cli.command()
@click.argument(
    "project_root", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.argument("fonts", nargs=-1)
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in HostingStrategy]),
    help="Hosting strategy (default from configuration)",
)
@click.option(
    "--framework",
    type=click.Choice([f.value for f in Framework]),
    help="Code generation target (default: inferred)",
)
@click.option("--output-dir", "-o", help="Output directory relative to the project root")
@click.option("--variant", "variants", multiple=True, help="Variant to bundle (repeatable)")
@click.option("--no-preload", is_flag=True, help="Leave preconnect hints out of the guide")
@click.option("--quiet", "-q", is_flag=True, help="Hide the progress bar")
@click.pass_context
def bundle(
    ctx,
    project_root: Path,
    fonts: tuple[str, ...],
    strategy: str | None,
    framework: str | None,
    output_dir: str | None,
    variants: tuple[str, ...],
    no_preload: bool,
    quiet: bool,
):
    """Make fonts production ready.

    Bundles FONTS, or every font detected in PROJECT_ROOT when none are given
    and auto-detection is enabled. Exits non-zero when every font fails.
    """
    services = ctx.obj["services"]

    font_names = list(fonts)
    if not font_names:
        if not services.config.detection.auto_detect:
            _fail(ctx, OperationResult.fail(NoFontsSelectedError()))
        detected = api.detect_fonts(services, project_root)
        if not detected.success:
            _fail(ctx, detected)
        font_names = [font.name for font in detected.value]
        if not font_names:
            click.echo("No fonts detected; nothing to bundle.")
            return
        click.echo(f"🔍 Detected {len(font_names)} fonts: {', '.join(font_names)}")

    result = api.make_production_ready(
        services,
        font_names,
        project_root=project_root,
        progress_callback=None if quiet else ConsoleProgressCallback(),
        strategy=strategy,
        framework=framework,
        output_dir=output_dir,
        variants=list(variants) or None,
        include_preload=False if no_preload else None,
    )
    if not result.success:
        _fail(ctx, result)

    run = result.value
    click.echo("\n📦 Bundle Results")
    click.echo("=" * 40)
    for font_result in run.results:
        if font_result.succeeded:
            click.echo(
                f"✅ {font_result.font_family}: "
                f"{len(font_result.written_font_file_paths)} files, {font_result.css_file_path}"
            )
        else:
            reason = font_result.error or "no font files downloaded"
            click.echo(f"❌ {font_result.font_family}: {reason}", err=True)

    click.echo(f"\n📖 Integration guide: {run.guide_path}")
    _exit_if_all_failed(ctx, [r.error_kind for r in run.failed], len(run.results))


@cli.command()
@click.argument("fonts", nargs=-1, required=True)
@click.pass_context
def install(ctx, fonts: tuple[str, ...]):
    """Install fonts into the user fonts directory."""
    services = ctx.obj["services"]

    result = api.install_fonts(
        services, list(fonts), progress_callback=ConsoleProgressCallback("Installing fonts")
    )
    if not result.success:
        _fail(ctx, result)

    for install_result in result.value:
        if install_result.success:
            click.echo(
                f"✅ {install_result.font_name}: {len(install_result.installed_files)} files"
            )
        else:
            click.echo(f"❌ {install_result.font_name}: {install_result.error}", err=True)

    if any(r.success and r.requires_reload for r in result.value):
        click.echo("⚠️  Restart your applications to use the new fonts.")

    failed = [r.error_kind for r in result.value if not r.success]
    _exit_if_all_failed(ctx, failed, len(result.value))


@cli.command()
@click.argument("font")
@click.pass_context
def check(ctx, font: str):
    """Check whether the catalog carries a font."""
    services = ctx.obj["services"]

    result = api.check_font_availability(services, font)
    if not result.success:
        _fail(ctx, result)

    availability = result.value
    if not availability.available:
        click.echo(f"❌ {font} is not available in the font catalog")
        ctx.exit(ErrorKind.NOT_FOUND.exit_code)

    click.echo(f"✅ {font} is available ({availability.source})")
    click.echo(f"   Variants: {', '.join(availability.variants)}")
    click.echo(f"   License: {availability.license}")


@cli.command(name="infer-framework")
@click.argument(
    "project_root", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.pass_context
def infer_framework(ctx, project_root: Path):
    """Suggest a framework and output directory for a project."""
    services = ctx.obj["services"]

    result = api.infer_framework(services, project_root)
    if not result.success:
        _fail(ctx, result)

    suggestion = result.value
    origin = "package.json" if suggestion.was_detected_from_manifest else "directory layout"
    click.echo(f"Framework: {suggestion.name.value}")
    click.echo(f"Output directory: {suggestion.default_output_dir}")
    click.echo(f"Detected from: {origin}")


@cli.command()
@click.pass_context
def refresh(ctx):
    """Refresh the cached font catalog."""
    services = ctx.obj["services"]

    result = api.refresh_catalog(services)
    if not result.success:
        _fail(ctx, result)

    click.echo(f"🔄 Font catalog refreshed: {result.value} families")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
