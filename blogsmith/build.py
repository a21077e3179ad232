"""Site building functionality for blogsmith.

This module contains the core logic for building the blog from source files.
It loads configuration, collects metadata for every Markdown file, renders
all pages concurrently, and writes the Atom feed.

Key functions:
- build_site: Main function to build the entire site.
- render_pages: Render every page concurrently and collect the results.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .collections import PostCollection, build_collection
from .config import SiteConfig, load_site_config
from .converters import default_converter_registry
from .errors import BlogError, BuildError, ConversionError, ImageInspectionError
from .feeds import AtomFeedGenerator
from .images import create_image_inspector
from .metadata import PostMetadata
from .pages import PageRenderer
from .protocols import ImageInspector, MarkdownConverter
from .utils import write_atomic

logger = logging.getLogger(__name__)


@dataclass
class PageResult:
    """Outcome of rendering one page.

    Attributes:
        source: Source path relative to the project root.
        output: Output path relative to the project root.
        error: The BuildError when rendering failed, otherwise None.
    """

    source: str
    output: str
    error: BuildError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BuildReport:
    """Result of a site build operation.

    Attributes:
        pages: One PageResult per source file, in collection order.
        feed_path: Where the feed was written, or None if it was not.
        output_dir: Directory pages were written under.
    """

    pages: list[PageResult] = field(default_factory=list)
    feed_path: Path | None = None
    output_dir: Path | None = None

    @property
    def failures(self) -> list[PageResult]:
        return [page for page in self.pages if not page.ok]

    @property
    def ok(self) -> bool:
        return not self.failures


def _format_error_message(exc: BaseException) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    if isinstance(exc, ConversionError):
        return f"Conversion failed: {exc}"
    if isinstance(exc, ImageInspectionError):
        return f"Image inspection failed: {exc.message}"
    if isinstance(exc, BuildError):
        return exc.message
    if isinstance(exc, BlogError):
        return str(exc)
    return f"{type(exc).__name__}: {exc}"


async def _render_one(
    renderer: PageRenderer,
    collection: PostCollection,
    meta: PostMetadata,
    semaphore: asyncio.Semaphore,
) -> None:
    async with semaphore:
        neighbors = collection.neighbors(meta)
        html = await renderer.render(meta, neighbors, collection.posts)
        await asyncio.to_thread(
            write_atomic, renderer.config.root / meta.outfile, html
        )
    logger.info("done %s", meta.outfile)


async def render_pages(
    renderer: PageRenderer, collection: PostCollection
) -> list[PageResult]:
    """Render every page concurrently.

    Each page's pipeline is sequential; pages run independently so one
    failure does not stop the others.

    Returns:
        One PageResult per page, in collection order (posts first).
    """
    metas = [*collection.posts, *collection.non_posts]
    semaphore = asyncio.Semaphore(renderer.config.concurrency)
    outcomes = await asyncio.gather(
        *(_render_one(renderer, collection, meta, semaphore) for meta in metas),
        return_exceptions=True,
    )
    results: list[PageResult] = []
    for meta, outcome in zip(metas, outcomes):
        result = PageResult(source=meta.filepath, output=meta.outfile)
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            result.error = BuildError(
                renderer.config.root / meta.filepath,
                _format_error_message(outcome),
                outcome,
            )
            logger.error("failed %s: %s", meta.filepath, result.error.message)
        results.append(result)
    return results


async def build_site_async(
    config: SiteConfig,
    converter: MarkdownConverter | None = None,
    image_inspector: ImageInspector | None = None,
) -> BuildReport:
    """Build the site described by ``config``.

    Args:
        config: Site configuration.
        converter: Optional MarkdownConverter; defaults to ``config.converter``.
        image_inspector: Optional ImageInspector; defaults to identify or Pillow.

    Returns:
        BuildReport with one result per page.

    Raises:
        MetadataError: A source file could not be read or parsed.
    """
    collection = build_collection(config)
    logger.debug(
        "collected %d pages (%d posts)", len(collection), len(collection.posts)
    )
    renderer = PageRenderer(
        config,
        converter or default_converter_registry.create(config),
        image_inspector or create_image_inspector(),
    )
    report = BuildReport(output_dir=config.root)
    report.pages = await render_pages(renderer, collection)
    report.feed_path = AtomFeedGenerator(config).write(
        config.root, collection.posts, collection.tags
    )
    return report


def build_site(
    project_root: Path,
    converter: MarkdownConverter | None = None,
    image_inspector: ImageInspector | None = None,
) -> BuildReport:
    """Build the entire blog under ``project_root``.

    Args:
        project_root: Root directory of the project.
        converter: Optional MarkdownConverter override.
        image_inspector: Optional ImageInspector override.

    Returns:
        BuildReport containing every page result and the feed path.
    """
    config = load_site_config(project_root)
    return asyncio.run(
        build_site_async(config, converter=converter, image_inspector=image_inspector)
    )
