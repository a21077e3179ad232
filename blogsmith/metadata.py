"""Metadata extraction for blogsmith.

This module reads one Markdown source file, parses its optional YAML
front-matter and overlays it onto the site's default record, producing an
immutable PostMetadata.

Key pieces:
- PostMetadata: frozen dataclass describing one source file.
- extract_frontmatter: splits raw text into a front-matter mapping and body.
- parse_date: normalizes YAML dates, datetimes and ISO strings to UTC.
- MetadataExtractor: turns a path into a PostMetadata.

Malformed front-matter raises MetadataError; it is never silently dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

import yaml

from .errors import MetadataError

FRONTMATTER_OPEN = "---\n"
FRONTMATTER_CLOSE = "\n---\n"

# front-matter key -> PostMetadata field
FIELD_MAP = {
    "title": "title",
    "description": "description",
    "date": "date",
    "dateUpdated": "date_updated",
    "banner": "banner",
    "socialBanner": "social_banner",
    "tags": "tags",
    "author": "author",
    "plotly": "plotly",
    "mathjax": "mathjax",
    "titleHtml": "title_html",
}


@dataclass(frozen=True)
class PostMetadata:
    """Metadata for one Markdown source file.

    Attributes:
        title: Page title.
        description: Short description used in meta tags and the feed.
        date: Creation date (timezone-aware).
        date_updated: Optional update date (timezone-aware).
        banner: Banner image path relative to the page directory.
        social_banner: Image used for social cards instead of the banner.
        tags: Tags in front-matter order.
        author: Author name.
        plotly: Include the Plotly script preamble.
        mathjax: Include the MathJax preamble.
        title_html: Optional raw HTML used for the headline.
        filepath: Source path relative to the project root (POSIX).
        outfile: Output path, the source path with ``.md`` swapped for ``.html``.
        contents: Raw file contents.
        body: Contents after the front-matter block.
    """

    title: str
    description: str
    date: datetime
    date_updated: datetime | None
    banner: str
    social_banner: str
    tags: tuple[str, ...]
    author: str
    plotly: bool
    mathjax: bool
    title_html: str | None
    filepath: str
    outfile: str
    contents: str
    body: str

    @property
    def effective_date(self) -> datetime:
        """Update date if present, otherwise the creation date."""
        return self.date_updated or self.date

    @property
    def directory(self) -> str:
        """Directory of the source file relative to the root, '' at the root."""
        parent = Path(self.filepath).parent.as_posix()
        return "" if parent == "." else parent


def outfile_for(filepath: str) -> str:
    """Derive the output path by substituting the ``.md`` extension."""
    if filepath.endswith(".md"):
        return filepath[: -len(".md")] + ".html"
    return filepath + ".html"


def extract_frontmatter(text: str, path: Path) -> tuple[dict[str, Any], str]:
    """Split raw file text into front-matter and body.

    Args:
        text: Raw file content.
        path: Source path, for error messages.

    Returns:
        Tuple of (front-matter mapping, body). Files that do not start with
        the delimiter line yield an empty mapping and the full text.

    Raises:
        MetadataError: The block is unterminated, invalid YAML, or not a mapping.
    """
    if not text.startswith(FRONTMATTER_OPEN):
        return {}, text
    start = len(FRONTMATTER_OPEN)
    end = text.find(FRONTMATTER_CLOSE, start - 1)
    if end == -1:
        if text.endswith("\n---"):
            end = len(text) - len("\n---")
            body = ""
        else:
            raise MetadataError(path, "front-matter block is not closed")
    else:
        body = text[end + len(FRONTMATTER_CLOSE) :]
    block = text[start:end] if end >= start else ""
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        raise MetadataError(path, f"invalid front-matter YAML: {exc}", exc) from exc
    if data is None:
        return {}, body
    if not isinstance(data, dict):
        raise MetadataError(
            path, f"front-matter must be a mapping, got {type(data).__name__}"
        )
    return data, body


def parse_date(value: Any, path: Path, key: str) -> datetime | None:
    """Normalize a front-matter date value to an aware UTC datetime.

    Args:
        value: YAML date, datetime, ISO-8601 string, or None.
        path: Source path, for error messages.
        key: Front-matter key, for error messages.

    Returns:
        Timezone-aware datetime, or None for empty values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise MetadataError(path, f"cannot parse {key}: {value!r}", exc) from exc
    else:
        raise MetadataError(path, f"cannot parse {key}: {value!r}")
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_tags(value: Any, path: Path) -> tuple[str, ...]:
    """Normalize the ``tags`` field to a tuple of strings."""
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(tag.strip() for tag in value.split(",") if tag.strip())
    if isinstance(value, (list, tuple)):
        return tuple(str(tag) for tag in value)
    raise MetadataError(path, f"tags must be a list of strings, got {value!r}")


class MetadataExtractor:
    """Builds PostMetadata records from Markdown files.

    Attributes:
        root: Project root; filepaths are recorded relative to it.
        defaults: Default record overlaid by each file's front-matter.
    """

    def __init__(self, root: Path, defaults: dict[str, Any]):
        self.root = root
        self.defaults = defaults

    def extract(self, path: Path) -> PostMetadata:
        """Read a file and return its metadata.

        Raises:
            MetadataError: The file cannot be read or its front-matter is malformed.
        """
        try:
            contents = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise MetadataError(path, f"cannot read file: {exc}", exc) from exc
        return self.from_text(contents, path)

    def from_text(self, contents: str, path: Path) -> PostMetadata:
        """Build metadata from already-read file contents."""
        frontmatter, body = extract_frontmatter(contents, path)
        fields = dict(self.defaults)
        for key, value in frontmatter.items():
            name = FIELD_MAP.get(key)
            if name is not None:
                fields[name] = value

        date_value = parse_date(fields["date"], path, "date")
        fields["date"] = date_value or parse_date(self.defaults["date"], path, "date")
        fields["date_updated"] = parse_date(fields["date_updated"], path, "dateUpdated")
        fields["tags"] = parse_tags(fields["tags"], path)
        for name in ("title", "description", "banner", "social_banner", "author"):
            fields[name] = "" if fields[name] is None else str(fields[name])
        fields["plotly"] = bool(fields["plotly"])
        fields["mathjax"] = bool(fields["mathjax"])

        filepath = self._relative(path)
        return PostMetadata(
            filepath=filepath,
            outfile=outfile_for(filepath),
            contents=contents,
            body=body,
            **fields,
        )

    def _relative(self, path: Path) -> str:
        try:
            return path.resolve().relative_to(self.root.resolve()).as_posix()
        except ValueError:
            return path.as_posix()
