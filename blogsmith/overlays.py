"""Pre-conversion rewrite of image overlay syntax.

A Markdown image whose title is ``overlay:<file.svg>``::

    ![Map of the trail](trail.jpg "overlay:trail-labels.svg")

is replaced by a raw HTML figure holding the image and the inlined SVG, read
from the page's directory, so CSS can stack the SVG over the photo. Fenced
code blocks are left untouched.
"""

from __future__ import annotations

import re
from pathlib import Path

from .errors import BuildError
from .html_utils import escape_html

OVERLAY_IMAGE_RE = re.compile(
    r'!\[(?P<alt>[^\]]*)\]\((?P<src>[^)\s]+)\s+"overlay:(?P<svg>[^"]+)"\)'
)
FENCE_RE = re.compile(r"^\s*(`{3,}|~{3,})")
XML_PROLOG_RE = re.compile(r"^\s*<\?xml[^>]*\?>\s*")


def render_overlay(alt: str, src: str, svg_markup: str) -> str:
    """Return the figure markup for one overlaid image."""
    svg = XML_PROLOG_RE.sub("", svg_markup).strip()
    return (
        '\n<figure class="svg-overlay">\n'
        f'<img src="{escape_html(src)}" alt="{escape_html(alt)}">\n'
        f"{svg}\n"
        "</figure>\n"
    )


def rewrite_overlays(markdown: str, directory: Path) -> str:
    """Replace overlay images in ``markdown`` with inline figures.

    Args:
        markdown: Markdown body of the page.
        directory: Directory the SVG paths are relative to.

    Returns:
        Markdown with overlay images replaced by raw HTML.

    Raises:
        BuildError: A referenced SVG file does not exist.
    """
    if "overlay:" not in markdown:
        return markdown

    def repl(match: re.Match) -> str:
        svg_path = directory / match.group("svg")
        try:
            svg_markup = svg_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise BuildError(svg_path, f"cannot read overlay: {exc}", exc) from exc
        return render_overlay(match.group("alt"), match.group("src"), svg_markup)

    lines = markdown.split("\n")
    fence: str | None = None
    out: list[str] = []
    for line in lines:
        marker = FENCE_RE.match(line)
        if marker:
            token = marker.group(1)
            if fence is None:
                fence = token[0]
            elif token[0] == fence:
                fence = None
            out.append(line)
            continue
        out.append(line if fence else OVERLAY_IMAGE_RE.sub(repl, line))
    return "\n".join(out)
