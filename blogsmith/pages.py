"""Per-page rendering for blogsmith.

PageRenderer turns one PostMetadata into the complete HTML document for its
output file. The steps run strictly in order for a page; the build module
runs many pages concurrently.

Pipeline:
1. rewrite overlay images, convert the body
2. highlight code blocks (only when the HTML contains any)
3. head, banner, top navigation, headline, subline
4. post index (site index page only) and previous/next footer
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from .chrome import ChromeRenderer
from .collections import Neighbors
from .config import SiteConfig
from .highlight import Highlighter, has_code_blocks
from .metadata import PostMetadata
from .overlays import rewrite_overlays

if TYPE_CHECKING:
    from .protocols import ImageInspector, MarkdownConverter

logger = logging.getLogger(__name__)

INDEX_FILEPATH = "index.md"


class PageRenderer:
    """Renders complete pages.

    Attributes:
        config: Site configuration.
        converter: MarkdownConverter used for bodies and fragments.
        image_inspector: ImageInspector used for banner sizes.
        highlighter: Highlighter applied to code blocks.
        chrome: ChromeRenderer for templated fragments.
    """

    def __init__(
        self,
        config: SiteConfig,
        converter: MarkdownConverter,
        image_inspector: ImageInspector,
        highlighter: Highlighter | None = None,
        chrome: ChromeRenderer | None = None,
    ):
        self.config = config
        self.converter = converter
        self.image_inspector = image_inspector
        self.highlighter = highlighter or Highlighter(config.highlight_style)
        self.chrome = chrome or ChromeRenderer(config)
        self._highlight_css: str | None = None

    def highlight_css(self) -> str:
        if self._highlight_css is None:
            self._highlight_css = self.highlighter.stylesheet()
        return self._highlight_css

    def is_post(self, meta: PostMetadata) -> bool:
        return meta.filepath.startswith(self.config.post_prefix)

    async def body_html(self, meta: PostMetadata) -> tuple[str, bool]:
        """Convert and highlight the page body.

        Returns:
            Tuple of (HTML, whether any code block was highlighted).
        """
        frontmatter = meta.contents[: len(meta.contents) - len(meta.body)]
        body = rewrite_overlays(meta.body, self.config.root / meta.directory)
        html = await self.converter.convert(frontmatter + body, frontmatter=True)
        if meta.mathjax:
            html = html.replace("\\&amp;", "&")
        highlighted = has_code_blocks(html)
        if highlighted:
            html = self.highlighter.highlight(html)
        return html, highlighted

    async def banner_html(self, meta: PostMetadata) -> str:
        if not meta.banner:
            return ""
        if meta.banner.startswith("/"):
            image_path = self.config.root / meta.banner.lstrip("/")
        else:
            image_path = self.config.root / meta.directory / meta.banner
        width, height = await self.image_inspector.size(image_path)
        return self.chrome.banner(meta.banner, width, height)

    async def header_html(self, meta: PostMetadata, highlighted: bool) -> str:
        is_post = self.is_post(meta)
        parts = [
            self.chrome.head(meta, self.highlight_css() if highlighted else ""),
            "\n",
            await self.banner_html(meta),
        ]
        if is_post:
            parts.append(self.chrome.topnav())
        parts.append(self.chrome.headline(meta))
        if is_post:
            parts.append(self.chrome.subline(meta))
        return "".join(parts)

    async def post_index_html(
        self, meta: PostMetadata, posts: Sequence[PostMetadata]
    ) -> str:
        if meta.filepath != INDEX_FILEPATH:
            return ""
        source = self.chrome.post_index_markdown(posts)
        return await self.converter.convert(source, frontmatter=False)

    async def footer_html(self, neighbors: Neighbors) -> str:
        source = self.chrome.footer_markdown(neighbors.previous, neighbors.next)
        if not source:
            return ""
        return await self.converter.convert(source, frontmatter=False)

    async def render(
        self,
        meta: PostMetadata,
        neighbors: Neighbors,
        posts: Sequence[PostMetadata],
    ) -> str:
        """Render the full HTML document for one page.

        Args:
            meta: Page metadata.
            neighbors: Older and newer posts, empty for non-posts.
            posts: Every post, newest first; used by the site index page.

        Returns:
            Complete HTML text.
        """
        html, highlighted = await self.body_html(meta)
        head = await self.header_html(meta, highlighted)
        post_index = await self.post_index_html(meta, posts)
        footer = await self.footer_html(neighbors)
        logger.debug("rendered %s", meta.filepath)
        return head + post_index + html + footer
