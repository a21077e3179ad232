"""Command-line interface for blogsmith.

Running ``blogsmith`` in a project directory builds every Markdown file into
HTML next to its source and regenerates the Atom feed. The exit status is
non-zero when metadata extraction fails or any page fails to render.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click

from . import __version__
from .errors import BlogError, MetadataError


def _configure_logging() -> None:
    level = logging.DEBUG if os.environ.get("BLOGSMITH_DEBUG") == "1" else logging.INFO
    logging.basicConfig(level=level, format="%(message)s")


@click.command()
@click.version_option(version=__version__, prog_name="blogsmith")
def cli():
    """Build the blog in the current directory."""
    _configure_logging()
    project_root = Path.cwd()
    from .build import build_site

    try:
        report = build_site(project_root)
    except MetadataError as exc:
        try:
            rel_path = exc.source_path.relative_to(project_root)
        except ValueError:
            rel_path = exc.source_path
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {rel_path}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    except BlogError as exc:
        raise click.ClickException(str(exc)) from None

    failures = report.failures
    if failures:
        click.echo(
            click.style(
                f"{len(failures)} of {len(report.pages)} pages failed:",
                fg="red",
                bold=True,
            ),
            err=True,
        )
        for page in failures:
            click.echo(click.style(f"  File: {page.source}", fg="yellow"), err=True)
            click.echo(click.style(f"  Error: {page.error.message}", fg="white"), err=True)
        raise SystemExit(1)
    click.echo(f"Built {len(report.pages)} pages and {report.feed_path.name}")


def main():
    """Entry point for the CLI application."""
    cli()
