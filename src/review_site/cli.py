"""Command-line entry point for review-site."""

from __future__ import annotations

import json
import logging
import sys

import click

from .commands import build as build_cmd
from .commands import render as render_cmd
from .commands import stats as stats_cmd
from .core.config import ConfigManager, DEFAULT_CONFIG_PATH
from .core.paths import get_data_dir

# Setup logging early so submodules inherit sane defaults
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@click.group()
@click.option(
    "--config",
    default=str(DEFAULT_CONFIG_PATH),
    show_default=True,
    help="Path to config file (defaults to data_dir/config/config.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, config: str, verbose: bool) -> None:
    """review-site - static review and affiliate site generator."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config


@cli.command("build")
@click.option("--category", help="Build a single category only")
@click.option("--output", "output_dir", default=None, help="Output directory (overrides output.directory)")
@click.pass_context
def build(ctx: click.Context, category: str | None, output_dir: str | None) -> None:
    """Render every page of the site into the output directory."""
    try:
        summary = build_cmd.run(ctx.obj["config_path"], category, output_dir)
        click.echo(f"✅ Built {len(summary['pages'])} pages into {summary['output_dir']}")
        if summary["not_found"]:
            click.echo(f"⚠️  Rendered as not found: {', '.join(summary['not_found'])}")
        if summary["failed"]:
            click.echo(f"⚠️  Failed to render: {', '.join(summary['failed'])}")
    except Exception as exc:  # pragma: no cover - click echoes the message
        click.echo(f"❌ Build failed: {exc}", err=True)
        sys.exit(1)


@cli.command("stats")
@click.option("--category", help="Report a single category only")
@click.pass_context
def stats(ctx: click.Context, category: str | None) -> None:
    """Print category and site research statistics as JSON."""
    try:
        report = stats_cmd.run(ctx.obj["config_path"], category)
        click.echo(json.dumps(report, indent=2, ensure_ascii=False))
    except Exception as exc:  # pragma: no cover - click echoes the message
        click.echo(f"❌ Stats command failed: {exc}", err=True)
        sys.exit(1)


@cli.command("render")
@click.argument("path", default="/")
@click.pass_context
def render(ctx: click.Context, path: str) -> None:
    """Render a single route (e.g. /kitchen/best-knives) to stdout."""
    try:
        result = render_cmd.run(ctx.obj["config_path"], path)
        if result.status == 404:
            click.echo(f"⚠️  No page for {result.path}; showing the not-found page", err=True)
        click.echo(result.html)
    except Exception as exc:  # pragma: no cover - click echoes the message
        click.echo(f"❌ Render failed: {exc}", err=True)
        sys.exit(1)


@cli.command("status")
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show system status and configuration."""
    try:
        config_manager = ConfigManager(ctx.obj["config_path"])
        click.echo(f"📄 Config file: {config_manager.config_path}")
        click.echo(f"📁 Data directory: {get_data_dir()}")

        if config_manager.validate_config():
            click.echo("✅ Configuration is valid")
        else:
            click.echo("❌ Configuration validation failed")
            return

        content = config_manager.get_content_settings()
        click.echo(f"🌐 Content store: {content['base_url']}")
        click.echo(f"🏷️  Site id: {content['site_id']}")

        output = config_manager.get_output_settings()
        click.echo(f"📦 Output directory: {output['directory']}")
        click.echo(f"🧩 Template: {output['template']}")

    except Exception as exc:  # pragma: no cover - click echoes the message
        click.echo(f"❌ Error checking status: {exc}", err=True)


if __name__ == "__main__":  # pragma: no cover - script entry
    cli()
