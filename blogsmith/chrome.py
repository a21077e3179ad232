"""Page chrome rendering for blogsmith.

This module uses Jinja2 to render the pieces wrapped around each converted
page body: the ``<head>`` block, banner figure, top navigation, headline,
"updated on / tagged with" subline, and the Markdown sources of the
previous/next footer and the post index.

Templates are looked up first in the site's templates directory (``_templates``
by default) and then in the package's built-in templates, so a site can
override any single piece.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from .config import SiteConfig
from .html_utils import filepath_to_abspath, filepath_to_url, path_to_top
from .metadata import PostMetadata

_TEMPLATES_DIR = Path(__file__).parent / "templates"

SUBLINE_DATE_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"


def format_utc(value: datetime) -> str:
    """Format a datetime the way HTTP dates are written, in UTC.

    Examples:
        >>> format_utc(datetime(2021, 3, 1, tzinfo=timezone.utc))
        'Mon, 01 Mar 2021 00:00:00 GMT'
    """
    return value.astimezone(timezone.utc).strftime(SUBLINE_DATE_FORMAT)


def short_date(value: datetime) -> str:
    """Format a date as Y/M/D without zero padding.

    Examples:
        >>> short_date(datetime(2021, 3, 1, tzinfo=timezone.utc))
        '2021/3/1'
    """
    value = value.astimezone(timezone.utc)
    return f"{value.year}/{value.month}/{value.day}"


def quote_tags(tags: Iterable[str]) -> str:
    return "—".join(f"‘{tag}’" for tag in tags)


def subline_text(meta: PostMetadata) -> str:
    """Return the "updated on / tagged with" sentence for a post."""
    tagtext = quote_tags(meta.tags)
    if meta.date and meta.tags:
        return f"Updated on {format_utc(meta.date)}, tagged with {tagtext}."
    if meta.date:
        return f"Updated on {format_utc(meta.date)}."
    if meta.tags:
        return f"Tagged with {tagtext}."
    return ""


def resolve_image_url(config: SiteConfig, meta: PostMetadata, image: str) -> str:
    """Return the absolute URL of an image referenced from a page."""
    if not image:
        return ""
    if image.startswith(("http://", "https://", "//")):
        return image
    if image.startswith("/"):
        return filepath_to_url(config.url, image.lstrip("/"), config.prepath)
    return filepath_to_url(
        config.url, posixpath.join(meta.directory, image), config.prepath
    )


class ChromeRenderer:
    """Renders chrome fragments from Jinja2 templates.

    Attributes:
        config: Site configuration.
        env: Jinja2 environment.
    """

    def __init__(self, config: SiteConfig):
        self.config = config
        self.env = Environment(
            loader=FileSystemLoader(
                [config.root / config.templates_dir, _TEMPLATES_DIR]
            ),
            autoescape=select_autoescape(
                enabled_extensions=("html.jinja", "html", "xml"),
                default_for_string=False,
            ),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["abspath"] = self._abspath
        self.env.filters["utcstring"] = format_utc
        self.env.filters["shortdate"] = short_date
        self.env.globals["feed_path"] = config.feed_path

    def _abspath(self, filepath: str) -> str:
        return filepath_to_abspath(filepath, self.config.prepath)

    def _render(self, name: str, **context) -> str:
        return self.env.get_template(name).render(**context)

    def head(self, meta: PostMetadata, highlight_css: str = "") -> str:
        """Render the ``<!doctype>`` and ``<head>`` block for a page.

        Args:
            meta: Page metadata.
            highlight_css: Pygments stylesheet, included only when non-empty.
        """
        config = self.config
        return self._render(
            "head.html.jinja",
            meta=meta,
            feed_href=self._abspath(config.feed_path),
            page_url=filepath_to_url(config.url, meta.outfile, config.prepath),
            social_image=resolve_image_url(
                config, meta, meta.social_banner or meta.banner
            ),
            stylesheet=path_to_top(meta.filepath) + config.stylesheet,
            highlight_css=Markup(highlight_css) if highlight_css else "",
            plotly_src=self._abspath(config.plotly_script),
        )

    def banner(self, src: str, width: int, height: int) -> str:
        return self._render("banner.html.jinja", src=src, width=width, height=height)

    def topnav(self) -> str:
        return self._render("topnav.html.jinja")

    def headline(self, meta: PostMetadata) -> str:
        return self._render("headline.html.jinja", meta=meta)

    def subline(self, meta: PostMetadata) -> str:
        return self._render("subline.html.jinja", text=subline_text(meta))

    def footer_markdown(
        self, previous: PostMetadata | None, next: PostMetadata | None
    ) -> str:
        """Return the previous/next footer source, or '' with no neighbors."""
        if previous is None and next is None:
            return ""
        return self._render("footer.md.jinja", previous=previous, next=next)

    def post_index_markdown(self, posts: Iterable[PostMetadata]) -> str:
        """Return the Markdown list of all posts for the site index page."""
        return self._render("post_index.md.jinja", posts=list(posts))
