"""
CLI entry point for Karu.

Modified: 2025-11-12
"""

import sys
import click
from pathlib import Path
from typing import Optional

from karu import __version__
from karu.config.settings import Settings
from karu.core.exceptions import KaruError
from karu.core.lister import DirectoryLister, expand_path
from karu.core.models import Entry
from karu.core.preview import PreviewClassifier
from karu.tui.keybindings import registry
from karu.tui.screen import format_row
from karu.utils.log import setup_logging


LS_ROW_WIDTH = 60


def _settings(ctx: click.Context) -> Settings:
    """Settings loaded once per invocation and stored on the context."""
    return ctx.obj["settings"]


@click.group(invoke_without_command=True)
@click.version_option(version=__version__)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to config file (default: ~/.config/karu/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path]):
    """Karu - terminal file browser."""
    try:
        settings = Settings.load(config_path)
    except KaruError as e:
        click.echo(f"✗ Configuration error: {e}", err=True)
        sys.exit(1)

    log_file = setup_logging(settings)
    ctx.obj = {"settings": settings, "log_file": log_file}

    if ctx.invoked_subcommand is None:
        ctx.invoke(browse)


@cli.command()
@click.argument("path", type=click.Path(path_type=Path), required=False)
@click.option("--hide-hidden", is_flag=True, help="Start with hidden entries hidden")
@click.pass_context
def browse(ctx: click.Context, path: Optional[Path] = None, hide_hidden: bool = False):
    """Launch the TUI file browser (default command)."""
    settings = _settings(ctx)
    if hide_hidden:
        settings.browser.show_hidden = False

    try:
        import asyncio
        from karu.tui.app import run_app

        # Run the TUI
        asyncio.run(run_app(start_path=path, settings=settings))
    except KeyboardInterrupt:
        click.echo("\nGoodbye!")
    except KaruError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"✗ TUI error: {e}", err=True)
        import traceback
        traceback.print_exc()
        sys.exit(1)


@cli.command(name="ls")
@click.argument("path", type=click.Path(path_type=Path), required=False)
@click.option("--hidden/--no-hidden", default=None, help="Include hidden entries")
@click.pass_context
def ls_command(ctx: click.Context, path: Optional[Path], hidden: Optional[bool]):
    """Print a directory listing in browser order."""
    settings = _settings(ctx)
    show_hidden = settings.browser.show_hidden if hidden is None else hidden
    directory = expand_path(str(path) if path else ".")

    try:
        listing = DirectoryLister().list(directory, show_hidden)
    except KaruError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    click.echo(str(listing.directory))
    for entry in listing:
        click.echo(format_row(entry, LS_ROW_WIDTH))


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--width", type=int, default=80, help="Columns for text lines (default: 80)")
@click.option("--lines", "max_lines", type=int, default=None, help="Maximum text lines")
@click.pass_context
def preview(ctx: click.Context, path: Path, width: int, max_lines: Optional[int]):
    """Print how the preview pane would show PATH."""
    settings = _settings(ctx)
    target = expand_path(str(path))
    if not target.exists() and not target.is_symlink():
        click.echo(f"✗ No such file or directory: {target}", err=True)
        sys.exit(1)

    classifier = PreviewClassifier(
        max_size_mb=settings.preview.max_size_mb,
        blocked_names=settings.preview.blocked_names,
        sniff_bytes=settings.preview.sniff_bytes,
    )
    entry = Entry(name=target.name, path=target, is_dir=target.is_dir())
    result = classifier.classify(entry, width, max_lines=max_lines)

    click.echo(f"[{result.kind.value}]")
    if result.text:
        click.echo(result.text)


@cli.command()
def keys():
    """Show all keybindings."""
    click.echo(registry.format_help_text())


@cli.command()
@click.pass_context
def status(ctx: click.Context):
    """Show version and effective configuration."""
    settings = _settings(ctx)
    click.echo(f"Karu v{__version__}")

    click.echo("\nBrowser:")
    click.echo(f"  Show hidden: {settings.browser.show_hidden}")
    click.echo(f"  Start path: {settings.browser.start_path or '(working directory)'}")

    click.echo("\nPreview:")
    click.echo(f"  Max size: {settings.preview.max_size_mb} MB")
    click.echo(f"  Blocked: {', '.join(settings.preview.blocked_names) or '(none)'}")

    click.echo("\nLogging:")
    click.echo(f"  Level: {settings.logging.level}")
    log_file = ctx.obj.get("log_file")
    if log_file:
        click.echo(f"  ✓ Log file: {log_file}")
    else:
        click.echo("  ✗ Log file unavailable")


if __name__ == "__main__":
    cli()
