"""Feed generation for blogsmith.

This module builds the site's Atom 1.0 feed from the sorted post list. The
feed is regenerated in full on every build.

Classes:
    FeedEntry: Per-post values that go into one ``<entry>``.
    FeedGenerator: Abstract base class for feed generators.
    AtomFeedGenerator: Generates the Atom feed.
"""

from __future__ import annotations

import mimetypes
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from .chrome import resolve_image_url
from .config import SiteConfig
from .html_utils import escape_html, filepath_to_url
from .metadata import PostMetadata
from .utils import write_atomic

ATOM_NS = "http://www.w3.org/2005/Atom"


def atom_date(value: datetime) -> str:
    """Format a datetime as an RFC 3339 UTC timestamp."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class FeedEntry:
    """Values for one feed entry, derived from a post."""

    title: str
    url: str
    description: str
    author: str
    author_link: str
    date: datetime
    published: datetime
    image: str

    @classmethod
    def from_post(cls, post: PostMetadata, config: SiteConfig) -> FeedEntry:
        return cls(
            title=post.title,
            url=filepath_to_url(config.url, post.outfile, config.prepath),
            description=post.description,
            author=post.author,
            author_link=filepath_to_url(config.url, "#contact", config.prepath),
            date=post.effective_date,
            published=post.date,
            image=resolve_image_url(config, post, post.social_banner or post.banner),
        )


class FeedGenerator(ABC):
    """Abstract base class for feed generators."""

    @property
    @abstractmethod
    def filename(self) -> str:
        """Return the output path of this feed relative to the project root."""
        ...

    @abstractmethod
    def generate(self, posts: Sequence[PostMetadata], tags: Iterable[str]) -> str:
        """Generate feed content from the posts, newest first."""
        ...

    def write(
        self, root: Path, posts: Sequence[PostMetadata], tags: Iterable[str]
    ) -> Path:
        """Generate the feed and write it under ``root``.

        Returns:
            Path of the written file.
        """
        output_path = root / self.filename
        write_atomic(output_path, self.generate(posts, tags))
        return output_path


class AtomFeedGenerator(FeedGenerator):
    """Generates an Atom 1.0 feed.

    The feed's ``updated`` is the newest post's effective date, so rebuilding
    an unchanged site produces an identical file.
    """

    def __init__(self, config: SiteConfig):
        self.config = config

    @property
    def filename(self) -> str:
        return self.config.feed_path

    def _url(self, filepath: str) -> str:
        return filepath_to_url(self.config.url, filepath, self.config.prepath)

    def generate(self, posts: Sequence[PostMetadata], tags: Iterable[str]) -> str:
        config = self.config
        updated = posts[0].effective_date if posts else config.build_time
        site_url = self._url("")
        lines = [
            '<?xml version="1.0" encoding="utf-8"?>',
            f'<feed xmlns="{ATOM_NS}">',
            f"    <id>{escape_html(site_url)}</id>",
            f"    <title>{escape_html(config.title)}</title>",
            f"    <updated>{atom_date(updated)}</updated>",
            "    <generator>blogsmith</generator>",
            "    <author>",
            f"        <name>{escape_html(config.author)}</name>",
            f"        <uri>{escape_html(self._url('#contact'))}</uri>",
            "    </author>",
            f'    <link rel="alternate" href="{escape_html(site_url)}"/>',
            f'    <link rel="self" href="{escape_html(self._url(config.feed_path))}"/>',
            f"    <subtitle>{escape_html(config.description)}</subtitle>",
        ]
        if config.banner:
            lines.append(f"    <logo>{escape_html(self._url(config.banner))}</logo>")
        lines.append(f"    <rights>{escape_html(config.copyright)}</rights>")
        for tag in tags:
            lines.append(f'    <category term="{escape_html(tag)}"/>')
        for post in posts:
            lines.extend(self._entry(FeedEntry.from_post(post, config)))
        lines.append("</feed>")
        return "\n".join(lines) + "\n"

    def _entry(self, entry: FeedEntry) -> list[str]:
        lines = [
            "    <entry>",
            f'        <title type="html"><![CDATA[{_cdata(entry.title)}]]></title>',
            f"        <id>{escape_html(entry.url)}</id>",
            f'        <link href="{escape_html(entry.url)}"/>',
            f"        <updated>{atom_date(entry.date)}</updated>",
            f"        <published>{atom_date(entry.published)}</published>",
            f'        <summary type="html"><![CDATA[{_cdata(entry.description)}]]></summary>',
            "        <author>",
            f"            <name>{escape_html(entry.author)}</name>",
            f"            <uri>{escape_html(entry.author_link)}</uri>",
            "        </author>",
        ]
        if entry.image:
            mime, _ = mimetypes.guess_type(entry.image)
            type_attr = f' type="{mime}"' if mime else ""
            lines.append(
                f'        <link rel="enclosure" href="{escape_html(entry.image)}"{type_attr}/>'
            )
        lines.append("    </entry>")
        return lines


def _cdata(text: str) -> str:
    return text.replace("]]>", "]]]]><![CDATA[>")
